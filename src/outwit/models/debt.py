"""Debt records owned by a user."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel

from ..services.debts import Debt


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class DebtRecord(SQLModel, table=True):
    """Installment or revolving debt tracked for one owner.

    Amounts are stored in cents; ``interest`` is the APR as a percentage.
    """

    __tablename__: ClassVar[str] = "debt"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    owner_id: str = Field(nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, max_length=80, index=True)
    balance: int = Field(default=0, nullable=False)
    interest: float = Field(default=0.0, nullable=False)
    min_payment: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
    archived_at: Optional[datetime] = Field(default=None)

    def to_debt(self) -> Debt:
        """Snapshot this record as simulator input."""

        return Debt(
            id=self.id,
            name=self.name,
            balance=self.balance,
            interest=self.interest,
            min_payment=self.min_payment,
        )
