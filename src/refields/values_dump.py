import json
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from .instrumentation import Cat
from .session import FormSession


def dump_values_json(
    values: Mapping[str, Optional[str]],
    out_path: Path,
    *,
    form_id: str | None = None,
    mount_state: Sequence[Mapping[str, Any]] | None = None,
    logger=None,
    session: FormSession | None = None,
) -> bool:
    """
    Write a best-effort value snapshot (e.g. FieldRegistry.get_all_values()) to JSON.
    Unmounted fields are written as null. `mount_state` (FieldRegistry.snapshot()["fields"])
    is written alongside when given. Returns False when the file could not be written.
    """
    def _emit(level: str, msg: str, **ctx: Any) -> None:
        if session:
            session.emit_signal(Cat.DUMP, msg, level=level, **ctx)
            return
        if logger:
            getattr(logger, level, logger.info)(msg)

    payload = {
        "form_id": form_id,
        "values": dict(values),
        "unmounted": [name for name, value in values.items() if value is None],
    }
    if mount_state is not None:
        payload["fields"] = [dict(entry) for entry in mount_state]

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        _emit("info", f"Wrote value snapshot to: {out_path}", form=form_id)
        return True
    except OSError as e:
        _emit("warning", f"Could not output to json. Message: {e!r}", form=form_id)
        return False
