"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ansispan.cache import cached_ansi_to_segments
from ansispan.cli import main

pytestmark = pytest.mark.unit

SAMPLE = "\x1b[1m\x1b[31mBOLD RED\x1b[0m normal"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sample_path(tmp_path: Path) -> Path:
    path = tmp_path / "sample.txt"
    path.write_text(SAMPLE, "utf-8")
    return path


def test_json(runner: CliRunner, sample_path: Path) -> None:
    result = runner.invoke(main, ["json", str(sample_path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"classes": ["text-[var(--red)]", "font-bold"], "content": "BOLD RED"},
        {"classes": [], "content": " normal"},
    ]


def test_json_textual_table(runner: CliRunner, sample_path: Path) -> None:
    result = runner.invoke(main, ["json", "--table", "textual", str(sample_path)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)[0]["classes"] == ["ansi_red", "bold"]


def test_json_stdin(runner: CliRunner) -> None:
    result = runner.invoke(main, ["json"], input="\x1b[32mok")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"classes": ["text-[var(--green)]"], "content": "ok"}
    ]


def test_html(runner: CliRunner, sample_path: Path) -> None:
    result = runner.invoke(main, ["html", str(sample_path)])
    assert result.exit_code == 0, result.output
    assert result.output.startswith('<div class="flex justify-center">')
    assert '<span class="text-[var(--red)] font-bold">BOLD RED</span>' in result.output


def test_html_uses_settings(
    runner: CliRunner, sample_path: Path, settings_path: Path
) -> None:
    settings_path.write_text(
        json.dumps({"render": {"pre-class": "text-xs", "separator": "|"}}), "utf-8"
    )
    result = runner.invoke(
        main, ["--settings", str(settings_path), "html", str(sample_path)]
    )
    assert result.exit_code == 0, result.output
    assert '<pre class="text-xs"' in result.output
    assert 'class="text-[var(--red)]|font-bold"' in result.output


def test_text(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "progress.txt"
    path.write_text("\x1b[33m10%\r100%\x1b[0m done\nab\x08c", "utf-8")
    result = runner.invoke(main, ["text", str(path)])
    assert result.exit_code == 0, result.output
    assert result.output == "100% done\nac"


def test_text_multiple_files(runner: CliRunner, tmp_path: Path) -> None:
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    first.write_text("\x1b[1mone\n", "utf-8")
    second.write_text("two\x1b[0m", "utf-8")
    result = runner.invoke(main, ["text", str(first), str(second), str(first)])
    assert result.exit_code == 0, result.output
    assert result.output == "one\ntwoone\n"


def test_bad_settings(runner: CliRunner, sample_path: Path, settings_path: Path) -> None:
    settings_path.write_text("{", "utf-8")
    result = runner.invoke(
        main, ["--settings", str(settings_path), "json", str(sample_path)]
    )
    assert result.exit_code != 0
    assert "Unable to read settings" in result.output


def test_settings_path(runner: CliRunner, settings_path: Path) -> None:
    result = runner.invoke(main, ["--settings", str(settings_path), "settings"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == str(settings_path)


def test_settings_defaults(runner: CliRunner) -> None:
    result = runner.invoke(main, ["settings", "--defaults"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["render"]["table"] == "tailwind"


def test_missing_file(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(main, ["json", str(tmp_path / "nope.txt")])
    assert result.exit_code == 2


def test_settings_directory(runner: CliRunner, sample_path: Path, tmp_path: Path) -> None:
    result = runner.invoke(main, ["--settings", str(tmp_path), "json", str(sample_path)])
    assert result.exit_code == 1
    assert "Unable to read settings" in result.output


def test_cache_size_setting(
    runner: CliRunner, sample_path: Path, settings_path: Path
) -> None:
    settings_path.write_text(json.dumps({"cache": {"size": 8}}), "utf-8")
    result = runner.invoke(
        main, ["--settings", str(settings_path), "json", str(sample_path)]
    )
    assert result.exit_code == 0, result.output
    assert cached_ansi_to_segments.cache.maxsize == 8  # type: ignore[attr-defined]


class TestSettingsSet:
    def test_set(self, runner: CliRunner, settings_path: Path) -> None:
        result = runner.invoke(
            main, ["--settings", str(settings_path), "settings", "set", "cache.size", "64"]
        )
        assert result.exit_code == 0, result.output
        assert "Saved settings" in result.output
        assert json.loads(settings_path.read_text("utf-8")) == {"cache": {"size": 64}}

    def test_set_keeps_other_settings(
        self, runner: CliRunner, settings_path: Path, sample_path: Path
    ) -> None:
        settings_path.write_text(json.dumps({"cache": {"size": 8}}), "utf-8")
        result = runner.invoke(
            main,
            ["--settings", str(settings_path), "settings", "set", "render.table", "textual"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(settings_path.read_text("utf-8")) == {
            "cache": {"size": 8},
            "render": {"table": "textual"},
        }
        result = runner.invoke(
            main, ["--settings", str(settings_path), "json", str(sample_path)]
        )
        assert json.loads(result.output)[0]["classes"] == ["ansi_red", "bold"]

    def test_unchanged(self, runner: CliRunner, settings_path: Path) -> None:
        result = runner.invoke(
            main,
            ["--settings", str(settings_path), "settings", "set", "render.table", "tailwind"],
        )
        assert result.exit_code == 0, result.output
        assert "already" in result.output
        assert not settings_path.exists()

    @pytest.mark.parametrize(
        "key, value",
        [("cache.size", "0"), ("cache.size", "big"), ("render.table", "bootstrap"), ("nope", "1")],
    )
    def test_invalid(
        self, runner: CliRunner, settings_path: Path, key: str, value: str
    ) -> None:
        result = runner.invoke(
            main, ["--settings", str(settings_path), "settings", "set", key, value]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not settings_path.exists()
