"""Unit tests for the SQLModel debt repository."""

from __future__ import annotations

import pytest

from outwit.models import DebtRecord
from outwit.services.debts import Debt


class TestDebtRepository:
    """Tests for SQLModelDebtRepository."""

    def test_create_assigns_id_and_owner(self, debt_repository, owner):
        record = debt_repository.create(
            DebtRecord(owner_id="ignored", name="Visa", balance=50_000, interest=21.5, min_payment=2_000),
            owner_id=owner,
        )

        assert record.id
        assert record.owner_id == owner
        fetched = debt_repository.get_by_id(record.id, owner_id=owner)
        assert fetched is not None
        assert fetched.name == "Visa"
        assert fetched.balance == 50_000

    def test_records_are_scoped_by_owner(self, debt_repository, debt_factory, owner):
        mine = debt_factory(name="Mine")
        debt_factory(name="Theirs", owner_id="someone-else")

        assert [record.name for record in debt_repository.list_all(owner_id=owner)] == ["Mine"]
        assert debt_repository.get_by_id(mine.id, owner_id="someone-else") is None

    def test_list_active_skips_paid_and_archived(self, debt_repository, debt_factory, owner):
        open_debt = debt_factory(name="Open")
        debt_factory(name="Paid", balance=0)
        archived = debt_factory(name="Old")
        debt_repository.archive(archived.id, owner_id=owner)

        active = debt_repository.list_active(owner_id=owner)

        assert [record.id for record in active] == [open_debt.id]
        assert len(debt_repository.list_all(owner_id=owner)) == 3

    def test_update_persists_changes(self, debt_repository, debt_factory, owner):
        record = debt_factory(name="Auto", balance=900_000)

        record.balance = 850_000
        updated = debt_repository.update(record, owner_id=owner)

        assert updated.balance == 850_000
        assert debt_repository.get_by_id(record.id, owner_id=owner).balance == 850_000

    def test_delete(self, debt_repository, debt_factory, owner):
        record = debt_factory()

        assert debt_repository.delete(record.id, owner_id=owner) is True
        assert debt_repository.get_by_id(record.id, owner_id=owner) is None
        assert debt_repository.delete(record.id, owner_id=owner) is False

    def test_archive_unknown_returns_none(self, debt_repository, owner):
        assert debt_repository.archive("missing", owner_id=owner) is None

    def test_totals(self, debt_repository, debt_factory, owner):
        debt_factory(balance=100_000, interest=20.0, min_payment=3_000)
        debt_factory(balance=300_000, interest=4.0, min_payment=7_000)

        assert debt_repository.get_total_debt(owner_id=owner) == 400_000
        assert debt_repository.get_total_min_payments(owner_id=owner) == 10_000
        assert debt_repository.get_weighted_apr(owner_id=owner) == pytest.approx(8.0)

    def test_weighted_apr_without_debts(self, debt_repository, owner):
        assert debt_repository.get_weighted_apr(owner_id=owner) == 0.0

    def test_record_converts_to_simulator_input(self, debt_factory):
        record = debt_factory(name="Card", balance=12_345, interest=19.99, min_payment=500)

        assert record.to_debt() == Debt(
            id=record.id, name="Card", balance=12_345, interest=19.99, min_payment=500
        )
