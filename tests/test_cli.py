"""Tests for CLI argument parsing and logging setup."""

import logging

from dotnet_launch.__main__ import configure_logging, parse_args


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self):
        """Test no flags."""
        args = parse_args([])
        assert args.project is None
        assert args.project_from_cwd is False

    def test_project(self, tmp_path):
        """Test --project."""
        args = parse_args(["--project", str(tmp_path)])
        assert args.project == str(tmp_path)

    def test_project_from_cwd(self):
        """Test --project-from-cwd."""
        assert parse_args(["--project-from-cwd"]).project_from_cwd is True


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_log_level_from_env(self, monkeypatch):
        """Test LOG_LEVEL selects the root level."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        root.handlers = []
        monkeypatch.setenv("LOG_LEVEL", "debug")
        try:
            configure_logging()
            assert root.level == logging.DEBUG
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

    def test_unknown_level_defaults_to_info(self, monkeypatch):
        """Test an unknown LOG_LEVEL falls back to INFO."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        root.handlers = []
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        try:
            configure_logging()
            assert root.level == logging.INFO
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
