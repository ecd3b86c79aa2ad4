"""Tests for the payoff planner service."""

from __future__ import annotations

import pytest

from outwit.config import BaseConfig
from outwit.forms import DebtForm, PayoffRequest
from outwit.services.debts import PayoffStrategy
from outwit.services.payoff_plan import PayoffPlanner
from tests.conftest import START


@pytest.fixture
def planner(debt_repository) -> PayoffPlanner:
    return PayoffPlanner(debt_repository, BaseConfig())


def test_add_update_remove_debt(planner, owner):
    record = planner.add_debt(owner, DebtForm(name="Visa", balance="1000", interest="19.99", min_payment="35"))

    assert record.balance == 100_000
    assert record.min_payment == 3_500

    updated = planner.update_debt(owner, record.id, DebtForm(name="Visa", balance="800", interest="19.99", min_payment="35"))
    assert updated.balance == 80_000
    assert planner.repository.get_by_id(record.id, owner_id=owner).balance == 80_000

    planner.remove_debt(owner, record.id)
    assert planner.repository.list_all(owner_id=owner) == []


def test_unknown_debt_raises_lookup_error(planner, owner):
    form = DebtForm(name="Ghost", balance="1")

    with pytest.raises(LookupError):
        planner.update_debt(owner, "missing", form)
    with pytest.raises(LookupError):
        planner.remove_debt(owner, "missing")
    with pytest.raises(LookupError):
        planner.archive_debt(owner, "missing")


def test_plan_uses_active_debts(planner, debt_factory, owner):
    card = debt_factory(name="Card", balance=200_000, interest=24.0, min_payment=6_000)
    archived = debt_factory(name="Closed", balance=50_000, interest=10.0, min_payment=2_000)
    planner.archive_debt(owner, archived.id)

    summary = planner.plan(owner, PayoffRequest(extra_payment="100", method="avalanche"), start_date=START)

    assert {entry.debt_id for entry in summary.schedule} == {card.id}
    assert summary.strategy is PayoffStrategy.AVALANCHE
    assert summary.schedule[0].payment == 16_000
    assert summary.schedule[-1].ending_balance == 0


def test_plan_without_debts_raises(planner, owner):
    with pytest.raises(ValueError, match="No debts to calculate payoff for"):
        planner.plan(owner, PayoffRequest())


def test_plan_respects_configured_cap(debt_repository, debt_factory, owner, monkeypatch):
    monkeypatch.setenv("OUTWIT_MAX_PAYOFF_MONTHS", "12")
    planner = PayoffPlanner(debt_repository, BaseConfig())
    debt_factory(balance=10_000_000, interest=5.0, min_payment=1_000)

    summary = planner.plan(owner, PayoffRequest(), start_date=START)

    assert summary.total_months == 12
    assert summary.truncated is True


def test_compare_recommends_avalanche_for_spread_rates(planner, debt_factory, owner):
    debt_factory(name="High", balance=500_000, interest=25.0, min_payment=10_000)
    debt_factory(name="Low", balance=100_000, interest=5.0, min_payment=2_500)

    comparison = planner.compare(owner, 20_000, start_date=START)

    assert comparison.savings.interest > 0
    assert comparison.recommendation is PayoffStrategy.AVALANCHE


def test_versus_minimum_reports_savings(planner, debt_factory, owner):
    debt_factory(name="Card", balance=300_000, interest=19.0, min_payment=9_000)

    result = planner.versus_minimum(owner, PayoffRequest(extra_payment="250"), start_date=START)

    assert result.baseline.total_months > result.plan.total_months
    assert result.interest_saved == result.baseline.total_interest - result.plan.total_interest
    assert result.months_saved == result.baseline.total_months - result.plan.total_months
    assert result.interest_saved > 0


def test_default_request_uses_configured_strategy(debt_repository, monkeypatch):
    monkeypatch.setenv("OUTWIT_DEFAULT_STRATEGY", "snowball")
    planner = PayoffPlanner(debt_repository, BaseConfig())

    request = planner.default_request("25")

    assert request.method is PayoffStrategy.SNOWBALL
    assert request.extra_payment_cents == 2_500


def test_plan_applies_lump_sum(planner, debt_factory, owner):
    debt_factory(name="Loan", balance=100_000, interest=0.0, min_payment=10_000)

    plain = planner.plan(owner, PayoffRequest(), start_date=START)
    boosted = planner.plan(
        owner, PayoffRequest(lump_sum="500", lump_sum_date="2024-02-01"), start_date=START
    )

    assert plain.total_months == 10
    assert boosted.total_months == 5
    assert boosted.schedule[0].payment == 60_000
    assert [milestone.debt_name for milestone in boosted.milestones] == ["Loan"]


def test_versus_minimum_serializes(planner, debt_factory, owner):
    debt_factory(name="Loan", balance=30_000, interest=0.0, min_payment=10_000)

    payload = planner.versus_minimum(owner, PayoffRequest(extra_payment="100"), start_date=START).to_dict()

    assert payload["plan"]["total_months"] == 2
    assert payload["baseline"]["total_months"] == 3
    assert payload["months_saved"] == 1
    assert payload["interest_saved"] == 0
