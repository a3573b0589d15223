"""Tests for configuration helpers."""

import logging

from tally import config


class TestProjectRoot:
    def test_defaults_to_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TALLY_HOME", raising=False)
        monkeypatch.chdir(tmp_path)

        assert config.get_project_root() == tmp_path.resolve()

    def test_tally_home_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TALLY_HOME", str(tmp_path / "ledger"))

        assert config.get_project_root() == tmp_path / "ledger"


class TestLogLevel:
    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "chatty")
        assert config.get_log_level() == logging.INFO

    def test_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "debug")
        assert config.get_log_level() == logging.DEBUG
