"""
Central pytest configuration for the library lending tests.

Provides the in-memory database, a controllable clock and the Flask test
client. Environment variables are set before any ``lending`` module is
imported so the lazy engine binds to in-memory SQLite.
"""

import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Add backend directory to sys.path for imports to work
backend_root = Path(__file__).parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("TZ", "UTC")

from tests.config.markers import pytest_collection_modifyitems, pytest_configure  # noqa: E402,F401
from tests.factories.repository_factories import (  # noqa: E402
    FakeClock,
    InMemoryCatalog,
    InMemoryMembership,
    make_book,
    make_user,
)


# =====================================================
# DOMAIN FIXTURES
# =====================================================


@pytest.fixture
def clock():
    """Clock pinned to a fixed date; tests move it with ``advance``/``set``."""
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def catalog():
    return InMemoryCatalog()


@pytest.fixture
def membership():
    return InMemoryMembership()


@pytest.fixture
def single_copy_book(catalog):
    book = make_book(isbn="111", title="Dune", total_stock=1)
    catalog.add(book)
    return book


@pytest.fixture
def member(membership):
    user = make_user(email="u@x.com", first_name="Una")
    membership.add(user)
    return user


@pytest.fixture
def second_member(membership):
    user = make_user(email="u2@x.com", first_name="Uri")
    membership.add(user)
    return user


# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def db_session():
    """Fresh schema per test on the shared in-memory engine."""
    from lending.db.session import SessionLocal, create_tables, drop_tables

    drop_tables()
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


# =====================================================
# APPLICATION FIXTURES
# =====================================================


@pytest.fixture
def app(db_session, clock):
    from lending.main import create_app

    flask_app = create_app(clock=clock)
    yield flask_app


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client
