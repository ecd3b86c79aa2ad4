"""Avalanche vs snowball comparison tests."""

from __future__ import annotations

import json

from outwit.services.debts import PayoffStrategy, compare_strategies, simulate
from tests.conftest import START, make_debt


def test_comparison_matches_individual_runs():
    debts = [
        make_debt("card", balance=500_000, interest=18, min_payment=10_000),
        make_debt("store", balance=100_000, interest=12, min_payment=5_000),
        make_debt("loan", balance=300_000, interest=15, min_payment=7_500),
    ]

    comparison = compare_strategies(debts, 20_000, start_date=START)

    assert comparison.avalanche == simulate(debts, 20_000, "avalanche", start_date=START)
    assert comparison.snowball == simulate(debts, 20_000, "snowball", start_date=START)
    assert comparison.savings.months == comparison.snowball.total_months - comparison.avalanche.total_months
    assert (
        comparison.savings.interest
        == comparison.snowball.total_interest - comparison.avalanche.total_interest
    )
    assert (
        comparison.savings.total_payments
        == comparison.snowball.total_payments - comparison.avalanche.total_payments
    )


def test_recommends_avalanche_when_savings_are_significant():
    debts = [
        make_debt("high", balance=500_000, interest=25, min_payment=10_000),
        make_debt("low", balance=100_000, interest=5, min_payment=2_500),
    ]

    comparison = compare_strategies(debts, 20_000, start_date=START)

    assert comparison.recommendation is PayoffStrategy.AVALANCHE


def test_recommends_snowball_when_rates_are_close():
    debts = [
        make_debt("first", balance=100_000, interest=10, min_payment=5_000),
        make_debt("second", balance=200_000, interest=10.25, min_payment=7_500),
    ]

    comparison = compare_strategies(debts, 10_000, start_date=START)

    assert comparison.recommendation is PayoffStrategy.SNOWBALL


def test_recommends_snowball_when_there_is_no_interest():
    debts = [
        make_debt("a", balance=10_000, min_payment=1_000),
        make_debt("b", balance=5_000, min_payment=1_000),
    ]

    comparison = compare_strategies(debts, 0, start_date=START)

    assert comparison.avalanche.total_interest == 0
    assert comparison.recommendation is PayoffStrategy.SNOWBALL


def test_empty_comparison_has_no_savings():
    comparison = compare_strategies([], 10_000, start_date=START)

    assert comparison.savings.months == 0
    assert comparison.savings.interest == 0
    assert comparison.savings.total_payments == 0


def test_comparison_serializes_to_json():
    debts = [make_debt("a", balance=10_000, interest=20, min_payment=1_000)]

    payload = compare_strategies(debts, 500, start_date=START).to_dict()

    assert set(payload) == {"avalanche", "snowball", "savings", "recommendation"}
    assert payload["savings"] == {"months": 0, "interest": 0, "total_payments": 0}
    assert payload["avalanche"]["strategy"] == "avalanche"
    assert payload["snowball"]["strategy"] == "snowball"
    json.dumps(payload)
