"""Tests for the command-line interface."""

import sys

import pytest

from cavegen.cli import main


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["cavegen", *args])
    main()


class TestCli:
    """Tests for main()."""

    def test_single_level(self, monkeypatch, capsys) -> None:
        _run(monkeypatch, "--width", "24", "--height", "24", "--seed", "3")
        out = capsys.readouterr().out

        assert "Level 24x24 rock" in out
        assert "Validation: passed" in out
        assert "Generated 1 level(s)" in out

    def test_preset_with_override(self, monkeypatch, capsys) -> None:
        _run(monkeypatch, "--config", "lava", "--width", "30", "--height", "30")
        out = capsys.readouterr().out
        assert "Level 30x30 lava" in out

    def test_batch(self, monkeypatch, capsys) -> None:
        _run(monkeypatch, "--width", "16", "--height", "16", "--count", "3", "--workers", "2")
        out = capsys.readouterr().out
        assert out.count("Level 16x16") == 3
        assert "Generated 3 level(s)" in out

    def test_missing_config(self, monkeypatch) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--config", "no-such-preset")
        assert exc_info.value.code == 1

    def test_invalid_option(self, monkeypatch) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--width", "0")
        assert exc_info.value.code == 2
