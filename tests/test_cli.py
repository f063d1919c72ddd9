"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest

from sveltedoc.cli import main

COMPONENT = """<script>
  /** Greeting target */
  export let name = 'world';
</script>

<h1>Hello {name}!</h1>
"""


def _write(tmp_path: Path, text: str, file_name: str = "Hello.svelte") -> Path:
    path = tmp_path / file_name
    path.write_text(text, encoding="utf-8")
    return path


def test_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify the documentation is printed as JSON."""
    path = _write(tmp_path, COMPONENT)
    assert main([str(path)]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["name"] == "Hello"
    assert doc["data"][0]["name"] == "name"
    assert doc["data"][0]["value"] == "world"
    assert "loc" not in doc["data"][0]


def test_writes_out_file(tmp_path: Path) -> None:
    """Verify --out writes the JSON file and locations on request."""
    path = _write(tmp_path, COMPONENT)
    out = tmp_path / "docs" / "hello.json"
    assert main([str(path), "--out", str(out), "--include-locations"]) == 0
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["data"][0]["loc"]["start"] == COMPONENT.index("name = ")


def test_dialect_from_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Verify the config file selects the dialect."""
    path = _write(
        tmp_path,
        "<script>\n  export default { data() { return { a: 1 }; } };\n</script>",
    )
    config = tmp_path / "sveltedoc.yml"
    config.write_text("options:\n  dialect_version: 2\n", encoding="utf-8")
    assert main([str(path), "--config", str(config)]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["version"] == 2
    assert [d["name"] for d in doc["data"]] == ["a"]


def test_failure_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify extraction failures are reported on stderr with status 1."""
    path = _write(tmp_path, "<script>\n  let a;\n  let a;\n</script>")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "DuplicateNameError" in captured.err


def test_missing_file(tmp_path: Path) -> None:
    """Verify a missing input file stops the command."""
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.svelte")])
