"""Tests for github.py -- step outputs and log groups."""

from pathlib import Path

import pytest

from benchdiff.github import in_github_actions, log_group, set_output


class TestSetOutput:
    def test_without_output_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        assert set_output("units_compared", "2") is False

    def test_single_line(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        out = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(out))
        assert set_output("units_compared", "2")
        assert set_output("markdown_file_path", "/w/benchmark_diff.md")
        assert out.read_text() == "units_compared=2\nmarkdown_file_path=/w/benchmark_diff.md\n"

    def test_multiline_uses_delimiter(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        out = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(out))
        set_output("comparison_markdown", "# Title\n\nbody\n")

        lines = out.read_text().splitlines()
        name, delimiter = lines[0].split("<<")
        assert name == "comparison_markdown"
        assert delimiter.startswith("ghadelimiter_")
        assert lines[1:-1] == ["# Title", "", "body", ""]
        assert lines[-1] == delimiter


class TestLogGroup:
    def test_inside_actions(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        assert in_github_actions()
        with log_group("Comparing Contract: token"):
            print("work")
        assert capsys.readouterr().out == "::group::Comparing Contract: token\nwork\n::endgroup::\n"

    def test_group_closed_on_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        with pytest.raises(RuntimeError), log_group("x"):
            raise RuntimeError("boom")
        assert capsys.readouterr().out.endswith("::endgroup::\n")

    def test_outside_actions(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        with log_group("x"):
            pass
        assert capsys.readouterr().out == ""
