"""
Tests for configuration parsing and the logging context filter.
"""

import logging

import pytest
from pydantic import ValidationError

from paas.core.logging import (
    LoggingContextFilter,
    app_context,
    app_name_var,
    configure_logging,
    correlation_id_var,
)
from paas.core.settings import PlatformSettings
from paas.db.config import Settings


class TestPlatformSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GIT_HOST", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        settings = PlatformSettings()
        assert settings.GIT_HOST == "tsuru.plataformas.glb.com"
        assert settings.LOG_LEVEL == logging.INFO

    def test_home_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert PlatformSettings().HOME == str(tmp_path)

    @pytest.mark.parametrize("raw,expected", [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("10", 10)])
    def test_log_level_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_LEVEL", raw)
        assert PlatformSettings().LOG_LEVEL == expected

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            PlatformSettings()

    def test_blank_git_host_rejected(self):
        with pytest.raises(ValidationError):
            PlatformSettings(GIT_HOST="  ")


class TestDatabaseSettings:

    def test_database_url_wins(self):
        s = Settings(DATABASE_URL="sqlite:///./paas.db", POSTGRES_URL="postgresql://u:p@h/db")
        assert s.database_url == "sqlite:///./paas.db"
        assert s.async_database_url == "sqlite+aiosqlite:///./paas.db"
        assert s.sync_database_url == "sqlite:///./paas.db"

    def test_postgres_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("POSTGRES_URL", raising=False)
        s = Settings(POSTGRES_USER="u", POSTGRES_PASSWORD="p", POSTGRES_DB="paas", POSTGRES_HOST="db")
        assert s.database_url == "postgresql://u:p@db:5432/paas"
        assert s.async_database_url == "postgresql+asyncpg://u:p@db:5432/paas"

    def test_async_driver_stripped_for_sync_url(self):
        s = Settings(DATABASE_URL="postgresql+asyncpg://u:p@db/paas")
        assert s.sync_database_url == "postgresql://u:p@db/paas"

    def test_missing_configuration(self, monkeypatch):
        for var in ("DATABASE_URL", "POSTGRES_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"):
            monkeypatch.delenv(var, raising=False)
        with pytest.raises(ValueError):
            Settings(_env_file=None).database_url


class TestLogging:

    def _record(self):
        return logging.LogRecord("paas", logging.INFO, __file__, 1, "msg", None, None)

    def test_filter_uses_placeholders(self):
        record = self._record()
        assert LoggingContextFilter().filter(record)
        assert record.correlation_id == "-"
        assert record.app_name == "-"

    def test_filter_reads_context(self):
        token = correlation_id_var.set("abc123")
        try:
            with app_context("myApp"):
                record = self._record()
                LoggingContextFilter().filter(record)
        finally:
            correlation_id_var.reset(token)
        assert record.correlation_id == "abc123"
        assert record.app_name == "myApp"
        assert app_name_var.get() is None

    def test_configure_logging_installs_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging(logging.DEBUG)
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
            assert any(isinstance(f, LoggingContextFilter) for f in root.handlers[0].filters)
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)


class TestMigrationRunner:

    def test_config_points_at_bundled_migrations(self, monkeypatch):
        from paas.db.run_migrations import build_config

        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./paas.db")
        cfg = build_config()
        assert cfg.get_main_option("script_location").endswith("migrations")
        assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///./paas.db"

    @pytest.mark.parametrize("cmd", ["history", "heads", "show"])
    def test_only_lifecycle_commands_supported(self, monkeypatch, cmd):
        from paas.db.run_migrations import main

        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./paas.db")
        with pytest.raises(SystemExit) as exc_info:
            main([cmd])
        assert exc_info.value.code == 2
