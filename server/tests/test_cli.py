import json
from pathlib import Path

from phpcity.run import main


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _project(tmp_path: Path) -> Path:
    root = tmp_path / "shop project"
    _write(root / "Cart" / "Cart.php", "<?php\nnamespace Shop\\Cart;\nfinal class Cart { private $items; public function add($i) {} }\n")
    _write(root / "Cart" / "Item.php", "<?php\nnamespace Shop\\Cart;\ninterface Item { public function price(); }\n")
    _write(root / "Base.php", "<?php\nnamespace Shop;\nabstract class Base {}\n")
    _write(root / "Money.php", "<?php\nnamespace Shop;\ntrait Money {}\n")
    return root


def test_run_writes_json_and_prints_summary(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path)
    out_dir = tmp_path / "out"

    code = main(["run", str(root), str(out_dir), "--workers", "1"])

    assert code == 0
    written = out_dir / "shop project.json"
    data = json.loads(written.read_text(encoding="utf-8"))
    assert sorted(item["name"] for item in data) == ["Base", "Cart", "Item", "Money"]

    out = capsys.readouterr().out
    assert "Successfully parsed 4 classes." in out
    assert "Classes: 3" in out
    assert "Interfaces: 1" in out
    assert "Abstract classes: 1" in out
    assert "Traits: 1" in out


def test_run_missing_directory_exits_with_error(tmp_path: Path, capsys) -> None:
    code = main(["run", str(tmp_path / "nope")])

    assert code == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: Directory")
    assert "does not exist" in err


def test_run_empty_project_is_not_an_error(tmp_path: Path, capsys) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    out_dir = tmp_path / "out"

    code = main(["run", str(empty), str(out_dir), "--workers", "1"])

    assert code == 0
    assert "No PHP classes found" in capsys.readouterr().out
    assert not out_dir.exists()


def test_run_unwritable_output_exits_with_error(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path)
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")

    code = main(["run", str(root), str(blocker), "--workers", "1"])

    assert code == 1
    err = capsys.readouterr().err
    assert "Failed to write JSON file" in err
    assert str(blocker / "shop project.json") in err


def test_layout_command_prints_layout(tmp_path: Path, capsys) -> None:
    root = _project(tmp_path)
    out_dir = tmp_path / "out"
    assert main(["run", str(root), str(out_dir), "--workers", "1"]) == 0
    capsys.readouterr()

    code = main(["layout", str(out_dir / "shop project.json")])

    assert code == 0
    layout = json.loads(capsys.readouterr().out)
    assert len(layout["buildings"]) == 4
    assert [p["full_path"] for p in layout["platforms"]] == ["Shop", "Shop\\Cart"]
    assert layout["buildings"][0]["record"]["no_lines"] >= 0
    assert layout["camera"]["distance"] >= 1000


def test_layout_command_writes_file(tmp_path: Path) -> None:
    records = tmp_path / "records.json"
    records.write_text("[]")
    target = tmp_path / "layouts" / "city.json"

    assert main(["layout", str(records), "-o", str(target)]) == 0

    layout = json.loads(target.read_text(encoding="utf-8"))
    assert layout["buildings"] == []
    assert layout["camera"]["distance"] == 1000.0


def test_layout_command_rejects_invalid_file(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")

    assert main(["layout", str(bad)]) == 1
    assert "Error:" in capsys.readouterr().err
