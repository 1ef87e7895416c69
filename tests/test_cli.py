"""Tests for the mealyqa command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from mealyqa.cli import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("MEALYQA_MAX_SEQUENCE_LENGTH", "MEALYQA_OUTPUT_FORMAT", "MEALYQA_VERBOSE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestUIOCommand:
    """Tests for `mealyqa uio`."""

    def test_text_output(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["uio", str(reference_file)])

        assert result.exit_code == 0
        assert "UIO sequences for reference" in result.output
        assert "4/5 states identified" in result.output

    def test_json_output(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["uio", str(reference_file), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["sequences"]["2"] == {"input": "b", "output": "t", "length": 1}
        assert data["unresolved"] == [1]

    def test_max_length_option(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["uio", str(reference_file), "--max-length", "1", "--format", "json"])

        data = json.loads(result.output)
        assert data["max_length"] == 1
        assert set(data["sequences"]) == {"2", "4"}

    def test_max_length_must_be_positive(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["uio", str(reference_file), "--max-length", "0"])
        assert result.exit_code == 2

    def test_config_file_sets_defaults(self, runner: CliRunner, reference_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "mealyqa.yaml"
        config.write_text("max_sequence_length: 1\noutput_format: json\n")

        result = runner.invoke(cli, ["-c", str(config), "uio", str(reference_file)])

        assert result.exit_code == 0
        assert json.loads(result.output)["max_length"] == 1

    def test_env_sets_format(
        self,
        runner: CliRunner,
        reference_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("MEALYQA_OUTPUT_FORMAT", "json")
        result = runner.invoke(cli, ["uio", str(reference_file)])
        assert json.loads(result.output)["machine"]["name"] == "reference"

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["uio", str(tmp_path / "absent.json")])

        assert result.exit_code == 2
        assert "E202" in result.output

    def test_invalid_definition(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"states": {"1": {"transitions": {"ab": {"toState": 1, "output": "x"}}}}}))

        result = runner.invoke(cli, ["uio", str(path)])

        assert result.exit_code == 2
        assert "E103" in result.output


class TestWMethodCommand:
    """Tests for `mealyqa wmethod`."""

    def test_text_output(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["wmethod", str(reference_file)])

        assert result.exit_code == 0
        assert "Splits:" in result.output
        assert "not a/z + b/t" in result.output
        assert "Indistinguishable" in result.output

    def test_no_steps(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["wmethod", str(reference_file), "--no-steps"])

        assert result.exit_code == 0
        assert "Splits:" not in result.output

    def test_json_output(self, runner: CliRunner, twin_file: Path) -> None:
        result = runner.invoke(cli, ["wmethod", str(twin_file), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["steps"] == []
        assert data["indistinguishable"] == [[1, 2]]
        assert data["tree"] == {"states": [1, 2], "terminal": True}


class TestReplayCommand:
    """Tests for `mealyqa replay`."""

    def test_replay(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["replay", str(reference_file), "1", "ab"])

        assert result.exit_code == 0
        assert result.output.strip() == "zt"

    def test_impossible(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["replay", str(reference_file), "1", "b"])

        assert result.exit_code == 1
        assert "IMPOSSIBLE" in result.output

    def test_json(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["replay", str(reference_file), "4", "ab", "--format", "json"])

        assert json.loads(result.output) == {"state": 4, "input": "ab", "output": "yt", "impossible": False}

    def test_unknown_state(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["replay", str(reference_file), "9", "a"])

        assert result.exit_code == 2
        assert "unknown state" in result.output

    def test_non_ascii_digit_state(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["replay", str(reference_file), "\u00b2", "a"])

        assert result.exit_code == 2
        assert "unknown state" in result.output


class TestAuditCommand:
    """Tests for `mealyqa audit`."""

    def test_audit_passes(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["audit", str(reference_file)])

        assert result.exit_code == 0
        assert "Audit passed" in result.output

    def test_audit_json(self, runner: CliRunner, reference_file: Path) -> None:
        result = runner.invoke(cli, ["audit", str(reference_file), "--format", "json"])

        data = json.loads(result.output)
        assert data["ok"] is True
        assert [entry["state"] for entry in data["states"]] == [2, 3, 4, 5]


class TestGroup:
    """Tests for group-level options."""

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("uio", "wmethod", "replay", "audit"):
            assert command in result.output

    def test_invalid_config_file(self, runner: CliRunner, reference_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "mealyqa.yaml"
        config.write_text("output_format: xml\n")

        result = runner.invoke(cli, ["-c", str(config), "uio", str(reference_file)])

        assert result.exit_code == 2
        assert "E301" in result.output
