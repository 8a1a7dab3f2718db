"""
Central pytest configuration for the practice planner tests.

Integration tests run against a fresh SQLite file database per test, built
through the real Store so foreign keys and BEGIN IMMEDIATE are active.
"""

from datetime import datetime, timezone

import pytest

from practice_planner.db.session import create_store
from practice_planner.main import create_app
from practice_planner.services import (
    AttendanceLedger,
    PracticeScheduler,
    ResourcePool,
    SetOrderingEngine,
)
from tests.config.markers import pytest_collection_modifyitems, pytest_configure  # noqa: F401
from tests.factories.planner_factories import FIXED_NOW, create_club, create_dogs


# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'planner_test.db'}"


@pytest.fixture
def store(database_url):
    """Store over an empty schema, disposed after the test."""
    test_store = create_store(database_url)
    yield test_store
    test_store.dispose()


@pytest.fixture
def fixed_clock():
    """Clock pinned to FIXED_NOW so "future" checks are deterministic."""
    return lambda: FIXED_NOW


# =====================================================
# SEED DATA
# =====================================================


@pytest.fixture
def club_id(store):
    return create_club(store, "Border Collie Club")


@pytest.fixture
def other_club_id(store):
    return create_club(store, "Sheepdog Club")


@pytest.fixture
def dog_ids(store, club_id):
    return create_dogs(store, club_id, ["Rex", "Luna", "Fido"])


# =====================================================
# SERVICE FIXTURES
# =====================================================


@pytest.fixture
def resource_pool(store):
    return ResourcePool(store)


@pytest.fixture
def scheduler(store, fixed_clock):
    return PracticeScheduler(store, clock=fixed_clock)


@pytest.fixture
def ordering(store):
    return SetOrderingEngine(store)


@pytest.fixture
def ledger(store):
    return AttendanceLedger(store)


@pytest.fixture
def practice(scheduler, club_id):
    return scheduler.create(club_id, datetime(2030, 2, 1, 18, 0, tzinfo=timezone.utc))


# =====================================================
# FLASK FIXTURES
# =====================================================


@pytest.fixture
def app(database_url, fixed_clock):
    flask_app = create_app(
        {
            "DATABASE_URL": database_url,
            "TESTING": True,
            "PLANNER_CLOCK": fixed_clock,
            "METRICS_ENABLED": False,
            "LOG_LEVEL": "WARNING",
        }
    )
    yield flask_app
    flask_app.extensions["practice_planner.store"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_store(app):
    """The Store the app writes to, for seeding data behind the API."""
    return app.extensions["practice_planner.store"]
