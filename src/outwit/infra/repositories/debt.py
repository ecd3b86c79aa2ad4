"""SQLModel implementation of the debt repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.debt import DebtRecord


class SQLModelDebtRepository:
    """SQLModel-based debt repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, debt_id: str, *, owner_id: str) -> Optional[DebtRecord]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            return session.exec(
                select(DebtRecord).where(DebtRecord.id == debt_id, DebtRecord.owner_id == owner_id)
            ).first()

    def list_all(self, *, owner_id: str) -> list[DebtRecord]:
        """List all debts in creation order."""
        with self.session_factory() as session:
            statement = (
                select(DebtRecord)
                .where(DebtRecord.owner_id == owner_id)
                .order_by(DebtRecord.created_at, DebtRecord.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_active(self, *, owner_id: str) -> list[DebtRecord]:
        """List unarchived debts with non-zero balances."""
        with self.session_factory() as session:
            statement = (
                select(DebtRecord)
                .where(DebtRecord.owner_id == owner_id)
                .where(DebtRecord.balance > 0)
                .where(DebtRecord.archived_at.is_(None))  # type: ignore[union-attr]
                .order_by(DebtRecord.created_at, DebtRecord.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, debt: DebtRecord, *, owner_id: str) -> DebtRecord:
        """Create a new debt."""
        with self.session_factory() as session:
            debt.owner_id = owner_id
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def update(self, debt: DebtRecord, *, owner_id: str) -> DebtRecord:
        """Update an existing debt."""
        with self.session_factory() as session:
            debt.owner_id = owner_id
            debt.updated_at = datetime.now(timezone.utc)
            merged = session.merge(debt)
            session.commit()
            session.refresh(merged)
            return merged

    def delete(self, debt_id: str, *, owner_id: str) -> bool:
        """Delete a debt by ID."""
        with self.session_factory() as session:
            debt = session.exec(
                select(DebtRecord).where(DebtRecord.id == debt_id, DebtRecord.owner_id == owner_id)
            ).first()
            if debt is None:
                return False
            session.delete(debt)
            session.commit()
            return True

    def archive(self, debt_id: str, *, owner_id: str) -> Optional[DebtRecord]:
        """Stamp ``archived_at`` so the debt drops out of active listings."""
        with self.session_factory() as session:
            debt = session.exec(
                select(DebtRecord).where(DebtRecord.id == debt_id, DebtRecord.owner_id == owner_id)
            ).first()
            if debt is None:
                return None
            now = datetime.now(timezone.utc)
            debt.archived_at = now
            debt.updated_at = now
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def get_total_debt(self, *, owner_id: str) -> int:
        """Calculate total outstanding debt in cents."""
        return sum(debt.balance for debt in self.list_active(owner_id=owner_id))

    def get_total_min_payments(self, *, owner_id: str) -> int:
        """Sum minimum payments across active debts."""
        return sum(debt.min_payment for debt in self.list_active(owner_id=owner_id))

    def get_weighted_apr(self, *, owner_id: str) -> float:
        """Calculate balance-weighted average APR across active debts."""
        debts = self.list_active(owner_id=owner_id)
        total_balance = sum(debt.balance for debt in debts)
        if total_balance == 0:
            return 0.0
        weighted_sum = sum(debt.balance * debt.interest for debt in debts)
        return weighted_sum / total_balance
