"""Tests for domevents.__main__ entrypoint functions."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

SCENARIOS = Path(__file__).resolve().parent.parent / "scenarios"

# ---------------------------------------------------------------------------
# setup_logging
# ---------------------------------------------------------------------------


class TestSetupLogging:
    def test_removes_default_handler_and_adds_stderr(self, monkeypatch):
        """setup_logging configures loguru with the correct level."""
        from domevents.__main__ import setup_logging

        monkeypatch.delenv("LOG_LEVEL", raising=False)
        with patch("domevents.__main__.logger") as mock_logger:
            setup_logging(verbose=False)
            mock_logger.remove.assert_called_once()
            mock_logger.add.assert_called_once()
            call_kwargs = mock_logger.add.call_args
            # level should be INFO for non-verbose
            assert call_kwargs[1]["level"] == "INFO"

    def test_verbose_sets_debug_level(self):
        """setup_logging with verbose=True uses DEBUG level."""
        from domevents.__main__ import setup_logging

        with patch("domevents.__main__.logger") as mock_logger:
            setup_logging(verbose=True)
            call_kwargs = mock_logger.add.call_args
            assert call_kwargs[1]["level"] == "DEBUG"

    def test_log_level_env(self, monkeypatch):
        """LOG_LEVEL picks the level when not verbose."""
        from domevents.__main__ import setup_logging

        monkeypatch.setenv("LOG_LEVEL", "warning")
        with patch("domevents.__main__.logger") as mock_logger:
            setup_logging()
            assert mock_logger.add.call_args[1]["level"] == "WARNING"

    def test_format_includes_time_and_level(self):
        """Log format contains expected tokens."""
        from domevents.__main__ import setup_logging

        with patch("domevents.__main__.logger") as mock_logger:
            setup_logging()
            fmt = mock_logger.add.call_args[1]["format"]
            assert "{time:" in fmt
            assert "{level:" in fmt
            assert "{message}" in fmt

    def test_safe_message_filter_escapes(self):
        """Braces and tags in messages are escaped."""
        from domevents.__main__ import _safe_message_filter

        record = {"message": "bound {x} to <div#a>"}
        assert _safe_message_filter(record) is True
        assert record["message"] == "bound {{x}} to \\<div#a>"


# ---------------------------------------------------------------------------
# reload_config
# ---------------------------------------------------------------------------


class TestReloadConfig:
    def test_reload_config_calls_load_and_cfg_reload(self, tmp_path):
        """reload_config loads the file and calls cfg.reload."""
        from domevents.__main__ import reload_config

        config_file = tmp_path / "config.yaml"
        config_file.write_text("debounce_window_ms: 5\n")

        fake_data = {"debounce_window_ms": 5}
        with (
            patch("domevents.__main__.load_config_with_env", return_value=fake_data) as mock_load,
            patch("domevents.__main__.cfg") as mock_cfg,
        ):
            result = reload_config(config_file)

        mock_load.assert_called_once_with(config_file)
        mock_cfg.reload.assert_called_once_with(fake_data)
        assert result is mock_cfg

    def test_reload_config_updates_global(self, tmp_path, monkeypatch):
        """reload_config applies file values to the shared cfg."""
        from domevents.__main__ import reload_config

        monkeypatch.delenv("DOMEVENTS_DEBOUNCE_WINDOW_MS", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text("debounce_window_ms: 25\n")

        result = reload_config(config_file)

        assert result.debounce_window_ms == 25.0


# ---------------------------------------------------------------------------
# main(): argument parsing + replay
# ---------------------------------------------------------------------------


class TestMain:
    def test_main_prints_records(self, tmp_path, capsys):
        """main() replays the scenario and prints one line per handler call."""
        from domevents.__main__ import main

        with patch("domevents.__main__.setup_logging"):
            main([str(SCENARIOS / "menu.yaml"), "--config", str(tmp_path / "missing.yaml")])

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "tracker click menu"
        assert out[-1] == "item click first"
        assert len(out) == 7

    def test_main_loads_config_when_present(self, tmp_path):
        """main() reloads config only when the file exists."""
        from domevents.__main__ import main

        config_file = tmp_path / "config.yaml"
        config_file.write_text("debounce_window_ms: 10\n")

        with (
            patch("domevents.__main__.setup_logging"),
            patch("domevents.__main__.reload_config") as mock_reload,
        ):
            main([str(SCENARIOS / "menu.yaml"), "--config", str(config_file)])

        mock_reload.assert_called_once_with(config_file)

    def test_main_exits_when_scenario_missing(self, tmp_path):
        """main() sys.exit(1) when the scenario file doesn't exist."""
        from domevents.__main__ import main

        with (
            patch("domevents.__main__.setup_logging"),
            patch("domevents.__main__.logger") as mock_logger,
            pytest.raises(SystemExit) as exc_info,
        ):
            main([str(tmp_path / "nope.yaml"), "--config", str(tmp_path / "missing.yaml")])

        assert exc_info.value.code == 1
        mock_logger.error.assert_called_once()

    def test_main_exits_on_non_integer_times(self, tmp_path):
        """main() sys.exit(1) when a step's times is not a number."""
        from domevents.__main__ import main

        scenario = tmp_path / "bad.yaml"
        scenario.write_text("tree: {tag: body, id: root}\nsteps:\n  - {bind: click, times: twice}\n")

        with (
            patch("domevents.__main__.setup_logging"),
            patch("domevents.__main__.logger") as mock_logger,
            pytest.raises(SystemExit) as exc_info,
        ):
            main([str(scenario), "--config", str(tmp_path / "missing.yaml")])

        assert exc_info.value.code == 1
        mock_logger.error.assert_called_once()

    def test_main_exits_on_invalid_config(self, tmp_path):
        """main() sys.exit(1) when config validation fails."""
        from domevents.__main__ import main

        config_file = tmp_path / "config.yaml"
        config_file.write_text("debounce_tags: body\n")

        with (
            patch("domevents.__main__.setup_logging"),
            pytest.raises(SystemExit) as exc_info,
        ):
            main([str(SCENARIOS / "menu.yaml"), "--config", str(config_file)])

        assert exc_info.value.code == 1

    def test_version(self, capsys):
        """--version prints the package version."""
        from domevents import __version__
        from domevents.__main__ import main

        with pytest.raises(SystemExit):
            main(["--version"])

        assert __version__ in capsys.readouterr().out
