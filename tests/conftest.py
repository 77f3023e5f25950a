import os
import sys
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import database
import store.client as client
from store.client import _fallback


@pytest.fixture(autouse=True)
def clear_fallback(monkeypatch):
    """Wipe the in-memory cache before and after each test and keep the redis
    helpers on the in-memory store so tests never touch the network.
    """
    _fallback.clear()

    async def no_redis():
        return None

    monkeypatch.setattr(client, "get_redis", no_redis)
    yield
    _fallback.clear()


@pytest.fixture
def sqlite_db(tmp_path):
    """A fresh file-backed SQLite database with all tables created."""
    database.dispose_database()
    database.init_database(f"sqlite:///{tmp_path / 'solarwatch-test.db'}")
    database.init_db()
    yield
    database.dispose_database()
