"""Debt repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.debt import DebtRecord


class DebtRepository(Protocol):
    """Repository for managing a user's debt records."""

    def get_by_id(self, debt_id: str, *, owner_id: str) -> Optional[DebtRecord]:
        """Retrieve a debt by ID."""
        ...

    def list_all(self, *, owner_id: str) -> list[DebtRecord]:
        """List all debts, archived ones included."""
        ...

    def list_active(self, *, owner_id: str) -> list[DebtRecord]:
        """List unarchived debts with non-zero balances."""
        ...

    def create(self, debt: DebtRecord, *, owner_id: str) -> DebtRecord:
        """Create a new debt."""
        ...

    def update(self, debt: DebtRecord, *, owner_id: str) -> DebtRecord:
        """Update an existing debt."""
        ...

    def delete(self, debt_id: str, *, owner_id: str) -> bool:
        """Delete a debt by ID, returning whether a row was removed."""
        ...

    def archive(self, debt_id: str, *, owner_id: str) -> Optional[DebtRecord]:
        """Hide a debt from payoff plans without deleting it."""
        ...

    def get_total_debt(self, *, owner_id: str) -> int:
        """Total outstanding balance in cents."""
        ...

    def get_total_min_payments(self, *, owner_id: str) -> int:
        """Sum of minimum payments in cents."""
        ...

    def get_weighted_apr(self, *, owner_id: str) -> float:
        """Balance-weighted average APR."""
        ...
