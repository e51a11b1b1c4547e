import json
import logging

from refields.field_handles import StaticFieldHandle
from refields.registry import FieldRegistry
from refields.values_dump import dump_values_json


def test_dump_writes_partial_snapshot(tmp_path, session):
    registry = FieldRegistry(["name", "desc"])
    registry.attach("name", StaticFieldHandle(value="Fire"))
    out = tmp_path / "dumps" / "deck_values.json"

    assert dump_values_json(registry.get_all_values(), out, form_id="deck", session=session) is True

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data == {
        "form_id": "deck",
        "values": {"name": "Fire", "desc": None},
        "unmounted": ["desc"],
    }


def test_dump_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    logger = logging.getLogger("refields.tests.dump")

    with caplog.at_level(logging.WARNING, logger="refields.tests.dump"):
        ok = dump_values_json({"name": "Fire"}, blocker / "out.json", logger=logger)

    assert ok is False
    assert "Could not output to json" in caplog.text
