"""Pytest configuration and shared fixtures for Outwit tests.

Provides an isolated SQLite database per test, a session factory matching the
repository contract, and factories for debt records and simulator inputs.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from outwit.infra.database import create_session_factory
from outwit.infra.repositories.debt import SQLModelDebtRepository
from outwit.models import DebtRecord
from outwit.services.debts import Debt

START = date(2024, 1, 15)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep config, logs and the default database inside the test's tmp dir."""

    monkeypatch.setenv("OUTWIT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("OUTWIT_DATABASE_URL", f"sqlite:///{tmp_path / 'outwit.db'}")
    monkeypatch.delenv("OUTWIT_MAX_PAYOFF_MONTHS", raising=False)
    monkeypatch.delenv("OUTWIT_DEFAULT_STRATEGY", raising=False)
    monkeypatch.setenv("OUTWIT_DEV_MODE", "true")
    yield
    # setup_logging binds handlers to this test's streams and tmp dir
    logger = logging.getLogger("outwit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory returning transactional context managers."""

    return create_session_factory(db_engine)


@pytest.fixture
def debt_repository(session_factory) -> SQLModelDebtRepository:
    return SQLModelDebtRepository(session_factory)


@pytest.fixture
def owner() -> str:
    return "user-1"


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def debt_factory(debt_repository, owner):
    """Factory for persisted debt records.

    Returns:
        Callable: Function that creates and persists DebtRecord instances
    """

    def _create_debt(
        name: str = "Test Debt",
        balance: int = 100_000,
        interest: float = 18.0,
        min_payment: int = 2_500,
        owner_id: str | None = None,
    ) -> DebtRecord:
        """Create a debt with sensible defaults (amounts in cents)."""
        owner_id = owner_id or owner
        record = DebtRecord(
            owner_id=owner_id,
            name=name,
            balance=balance,
            interest=interest,
            min_payment=min_payment,
        )
        return debt_repository.create(record, owner_id=owner_id)

    return _create_debt


def make_debt(
    debt_id: str,
    balance: int,
    interest: float = 0.0,
    min_payment: int = 0,
    name: str | None = None,
) -> Debt:
    """Build simulator input with the id doubling as the name by default."""

    return Debt(
        id=debt_id,
        name=name or debt_id.title(),
        balance=balance,
        interest=interest,
        min_payment=min_payment,
    )
