"""Tests for the rulegraph command line interface."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from rulegraph.cli import EXIT_BAD_INPUT, EXIT_IO_ERROR, EXIT_OK, format_outline, main
from rulegraph.tree import TreeBuilder

RULE = {"if": [{">": [{"var": "age"}, 18]}, "adult", "minor"]}


@pytest.fixture
def rule_file(tmp_path: Path) -> Path:
    path = tmp_path / "rule.json"
    path.write_text(json.dumps(RULE), encoding="utf-8")
    return path


class TestFlowchartCommand:
    def test_prints_document(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["flowchart", str(rule_file)]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("flowchart TD\n")
        assert 'n1{"age #gt; 18"}' in out

    def test_options(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["flowchart", str(rule_file), "--orientation", "LR", "--theme", "forest"])
        assert code == EXIT_OK
        lines = capsys.readouterr().out.split("\n")
        assert lines[0] == '%%{init: {"theme": "forest"}}%%'
        assert lines[1] == "flowchart LR"

    def test_no_values(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert main(["flowchart", str(path), "--no-values"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "-->" not in out

    def test_bad_orientation_exits(self, rule_file: Path) -> None:
        with pytest.raises(SystemExit):
            main(["flowchart", str(rule_file), "--orientation", "UP"])


class TestTreeCommand:
    def test_outline(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["tree", str(rule_file)]) == EXIT_OK
        assert capsys.readouterr().out.split("\n")[:3] == [
            "[operator] $age > 18",
            '  [true_branch] "adult"',
            '  [false_branch] "minor"',
        ]

    def test_depth_limit(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["tree", str(rule_file), "--depth", "0"]) == EXIT_OK
        assert capsys.readouterr().out == "[operator] $age > 18\n"

    def test_format_outline_relative_to_root(self) -> None:
        root = TreeBuilder().build([1], depth=5)
        assert format_outline(root) == '[array_literal] [1 items]\n  [literal] 1'


class TestLayoutCommand:
    def test_json_output(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["layout", str(rule_file)]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert [n["id"] for n in data["nodes"]] == ["node-1", "node-2", "node-3"]
        assert [e["target"] for e in data["edges"]] == ["node-2", "node-3"]
        assert data["width"] > 0
        assert data["nodes"][0]["kind"] == "operator"

    def test_horizontal(self, rule_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["layout", str(rule_file), "--horizontal"]) == EXIT_OK
        nodes = json.loads(capsys.readouterr().out)["nodes"]
        assert nodes[1]["x"] == nodes[2]["x"]


class TestInput:
    def test_stdin_dash(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO('{"var": "age"}'))
        assert main(["tree", "-"]) == EXIT_OK
        assert capsys.readouterr().out == "[variable] $age\n"

    def test_stdin_when_omitted(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("42"))
        assert main(["flowchart"]) == EXIT_OK
        assert 'n1(["42"])' in capsys.readouterr().out

    def test_invalid_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["tree", str(path)]) == EXIT_BAD_INPUT
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "invalid JSON" in captured.err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["tree", str(tmp_path / "nope.json")]) == EXIT_IO_ERROR
        assert "Error reading input" in capsys.readouterr().err

    def test_non_utf8_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "latin1.json"
        path.write_bytes(b"\xff\xfe{")
        assert main(["tree", str(path)]) == EXIT_BAD_INPUT
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "not UTF-8" in captured.err

    def test_json_too_deep_to_decode(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "deep.json"
        path.write_text("[" * 100_000 + "]" * 100_000, encoding="utf-8")
        assert main(["flowchart", str(path)]) == EXIT_BAD_INPUT
        assert "nested too deeply" in capsys.readouterr().err

    @pytest.mark.parametrize("command", ["flowchart", "tree", "layout"])
    def test_deep_rule_renders(
        self, command: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "deep.json"
        path.write_text('{"!": ' * 400 + '{"var": "x"}' + "}" * 400, encoding="utf-8")
        assert main([command, str(path)]) == EXIT_OK
        assert "..." in capsys.readouterr().out
