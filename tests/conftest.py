import logging
import os
from datetime import datetime, timezone

import pytest

# Set test environment variables
os.environ["TEST_MODE"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.setdefault("DEFAULT_USER_ID", "test-user")
for _name in ("SRS_MAX_INTERVAL", "SRS_MAX_NEW_CARDS", "SRS_NEW_FIRST"):
    os.environ.pop(_name, None)

from recall.sm2 import database  # noqa: E402


@pytest.fixture
def now():
    """Fixed review clock."""
    return datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh SQLite database per test, with tables created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cards.db'}")
    database.init_db()
    yield database
    database.dispose_engines()


@pytest.fixture(autouse=True)
def _quiet_sqlalchemy():
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    yield
