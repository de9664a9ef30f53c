import logging

import pytest

from recall import config


class TestDatabaseUrl:
    """DATABASE_URL handling."""

    def test_missing_url_raises(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValueError) as exc_info:
            config.get_database_url()
        assert "DATABASE_URL" in str(exc_info.value)

    def test_test_mode_swaps_database_name(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/review_db")
        monkeypatch.setenv("TEST_MODE", "true")
        assert config.get_database_url() == "postgresql://u:p@host:5432/test_review_db"

    def test_production_url_untouched(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/review_db")
        monkeypatch.setenv("TEST_MODE", "false")
        assert config.get_database_url().endswith("/review_db")
        assert not config.is_test_mode()


class TestSchedulingSettings:
    """Optional SRS_* settings."""

    def test_defaults(self, monkeypatch):
        for name in ("SRS_MAX_INTERVAL", "SRS_MAX_NEW_CARDS", "SRS_NEW_FIRST"):
            monkeypatch.delenv(name, raising=False)

        assert config.get_max_interval() is None
        assert config.get_max_new_cards() is None
        assert config.get_new_cards_first() is True

    def test_values_are_parsed(self, monkeypatch):
        monkeypatch.setenv("SRS_MAX_INTERVAL", "365")
        monkeypatch.setenv("SRS_MAX_NEW_CARDS", " 20 ")
        monkeypatch.setenv("SRS_NEW_FIRST", "FALSE")

        assert config.get_max_interval() == 365
        assert config.get_max_new_cards() == 20
        assert config.get_new_cards_first() is False

    @pytest.mark.parametrize("raw", ["soon", "0", "-3", "1.5"])
    def test_invalid_values_raise(self, monkeypatch, raw):
        monkeypatch.setenv("SRS_MAX_INTERVAL", raw)
        with pytest.raises(ValueError):
            config.get_max_interval()

    def test_default_user(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
        assert config.get_default_user_id() == "local"


class TestLogging:
    """configure_logging()."""

    def test_level_is_applied(self):
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, list(root.handlers)
        try:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            config.configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
