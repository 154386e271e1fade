"""
Root test configuration and fixtures.

Provides database fixtures that can be used by all tests:
- db_engine / db_session: in-memory SQLite (or DATABASE_URL) with rollback
- make_owner / make_members: factories for billing fixtures
- temp_config_dir / make_yaml_config: YAML config files in a temp dir
"""

import os
import tempfile
import uuid
import pytest
import yaml
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set test environment
os.environ.setdefault("ENV", "test")


def _get_test_database_url() -> str:
    """Get database URL for tests."""
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        return database_url

    # Default to SQLite for unit tests if no PostgreSQL available
    return "sqlite:///:memory:"


def _is_postgres() -> bool:
    """Check if using PostgreSQL."""
    return _get_test_database_url().startswith("postgresql")


@pytest.fixture(scope="session")
def db_engine():
    """
    Create database engine for tests.

    Uses PostgreSQL if DATABASE_URL is set, otherwise SQLite in-memory.
    """
    database_url = _get_test_database_url()

    if _is_postgres():
        try:
            engine = create_engine(database_url, pool_pre_ping=True)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            pytest.skip(
                f"PostgreSQL not available. Set DATABASE_URL or use SQLite. Error: {e}"
            )
    else:
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    from clubcheck.db_base import Base
    from clubcheck.models import owner, member  # noqa: F401

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """
    Create database session with transaction rollback for test isolation.

    Each test gets a fresh session that rolls back after the test completes.
    """
    connection = db_engine.connect()
    transaction = connection.begin()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=connection)
    session = SessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# Billing fixtures
# =============================================================================


@pytest.fixture
def make_owner(db_session):
    """
    Factory fixture that inserts an Owner row.

    Usage:
        owner = make_owner(subscription_status="past_due", current_period_end=...)
    """
    from clubcheck.models.owner import Owner

    def _make(**fields) -> Owner:
        fields.setdefault("id", str(uuid.uuid4()))
        fields.setdefault("email", f"owner_{uuid.uuid4().hex[:8]}@example.com")
        fields.setdefault("email_verified", datetime(2026, 1, 1, tzinfo=timezone.utc))
        fields.setdefault("plan_type", "starter")
        owner = Owner(**fields)
        db_session.add(owner)
        db_session.flush()
        return owner

    return _make


@pytest.fixture
def make_members(db_session):
    """Factory fixture that inserts `count` members with the given status."""
    from clubcheck.models.member import Member, MemberStatus

    def _make(owner_id: str, count: int, status: str = MemberStatus.ACTIVE) -> None:
        for i in range(count):
            db_session.add(Member(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name=f"Member {i}",
                status=status,
            ))
        db_session.flush()

    return _make


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "security: mark test as security-focused")
    config.addinivalue_line("markers", "slow: mark test as slow-running")


# =============================================================================
# Shared Config Fixtures
# =============================================================================


@pytest.fixture
def temp_config_dir():
    """Create a temporary directory for YAML config files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_yaml_config(temp_config_dir):
    """
    Factory fixture that writes a YAML config file and returns its path.

    Usage:
        config_path = make_yaml_config("billing.yml", {"plans": {...}})
    """
    def _make(filename: str, config: dict) -> Path:
        config_path = temp_config_dir / filename
        with open(config_path, "w") as f:
            yaml.dump(config, f)
        return config_path
    return _make
