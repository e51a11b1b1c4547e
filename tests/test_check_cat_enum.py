import importlib.util
from pathlib import Path


def _load_script():
    path = Path(__file__).parent.parent / "scripts" / "check_cat_enum.py"
    spec = importlib.util.spec_from_file_location("check_cat_enum", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_every_cat_reference_exists(monkeypatch, tmp_path, capsys):
    # runs from an unrelated cwd; the script finds the package next to itself
    monkeypatch.chdir(tmp_path)
    assert _load_script().main() == 0
    assert capsys.readouterr().out.startswith("OK")
