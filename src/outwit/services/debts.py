"""Debt payoff simulator (avalanche and snowball).

Monetary values are integer cents throughout. Interest is the only place
rounding happens: each period's charge is ``balance * apr / 1200`` rounded
half-up to the nearest cent, and principal is always derived by subtraction.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, Sequence

from ..logging_config import get_logger

logger = get_logger(__name__)

MAX_PAYOFF_MONTHS = 600
RECOMMENDATION_THRESHOLD = Decimal("0.03")


class PayoffStrategy(str, Enum):
    """Supported orderings for directing surplus payments."""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


class InvalidDebtInput(ValueError):
    """Raised when a debt or payment amount cannot be simulated."""

    def __init__(self, message: str, *, debt_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.debt_id = debt_id
        self.field = field


@dataclass(frozen=True, slots=True)
class Debt:
    """Represents a liability input for payoff projections."""

    id: str
    name: str
    balance: int  # cents
    interest: float  # APR as a percentage, e.g. 4.5
    min_payment: int  # cents


@dataclass(slots=True)
class PayoffScheduleEntry:
    """One payment made against one debt in one period."""

    month: int
    date: date
    debt_id: str
    debt_name: str
    starting_balance: int
    payment: int
    interest: int
    principal: int
    ending_balance: int


@dataclass(frozen=True, slots=True)
class PayoffMilestone:
    """The period in which a debt's balance first reaches zero."""

    month: int
    date: date
    debt_id: str
    debt_name: str


@dataclass(frozen=True, slots=True)
class LumpSum:
    """A one-time payment (cents) added to the surplus in the month of ``date``."""

    amount: int
    date: date

    def applies_to(self, period_date: date) -> bool:
        return (self.date.year, self.date.month) == (period_date.year, period_date.month)


@dataclass(slots=True)
class PayoffSummary:
    """Result of a single simulation run."""

    strategy: PayoffStrategy
    total_months: int
    total_interest: int
    total_payments: int
    debt_free_date: date
    schedule: list[PayoffScheduleEntry] = field(default_factory=list)
    milestones: list[PayoffMilestone] = field(default_factory=list)
    truncated: bool = False

    def entries_for(self, debt_id: str) -> list[PayoffScheduleEntry]:
        """Return the schedule rows for a single debt, in month order."""

        return [entry for entry in self.schedule if entry.debt_id == debt_id]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["strategy"] = self.strategy.value
        payload["debt_free_date"] = self.debt_free_date.isoformat()
        for row in payload["schedule"]:
            row["date"] = row["date"].isoformat()
        for milestone in payload["milestones"]:
            milestone["date"] = milestone["date"].isoformat()
        return payload


@dataclass(frozen=True, slots=True)
class PayoffSavings:
    """Snowball minus avalanche, per aggregate."""

    months: int
    interest: int
    total_payments: int


@dataclass(slots=True)
class StrategyComparison:
    """Avalanche and snowball results for the same input."""

    avalanche: PayoffSummary
    snowball: PayoffSummary
    savings: PayoffSavings

    @property
    def recommendation(self) -> PayoffStrategy:
        """Recommend avalanche only when it saves more than 3% in interest."""

        if self.avalanche.total_interest <= 0:
            return PayoffStrategy.SNOWBALL
        ratio = Decimal(self.savings.interest) / Decimal(self.avalanche.total_interest)
        if ratio > RECOMMENDATION_THRESHOLD:
            return PayoffStrategy.AVALANCHE
        return PayoffStrategy.SNOWBALL

    def to_dict(self) -> dict[str, Any]:
        return {
            "avalanche": self.avalanche.to_dict(),
            "snowball": self.snowball.to_dict(),
            "savings": asdict(self.savings),
            "recommendation": self.recommendation.value,
        }


def add_months(start: date, months: int) -> date:
    """Return the first day of the month ``months`` after ``start``."""

    index = start.year * 12 + (start.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def monthly_interest(balance: int, apr: float) -> int:
    """Interest charged on ``balance`` for one month, rounded half-up to a cent."""

    charge = Decimal(balance) * Decimal(str(apr)) / Decimal(1200)
    return int(charge.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _coerce_lump_sum(lump_sum: LumpSum | tuple[int, date] | None) -> LumpSum | None:
    if lump_sum is None or isinstance(lump_sum, LumpSum):
        return lump_sum
    amount, when = lump_sum
    return LumpSum(amount=amount, date=when)


def _coerce_strategy(strategy: PayoffStrategy | str) -> PayoffStrategy:
    try:
        return PayoffStrategy(strategy)
    except ValueError:
        raise ValueError("Invalid debt payoff strategy.") from None


def validate_debts(
    debts: Iterable[Debt], extra_monthly_payment: int = 0, lump_sum: LumpSum | None = None
) -> None:
    """Reject negative or non-finite amounts and duplicate ids before simulating."""

    if extra_monthly_payment < 0:
        raise InvalidDebtInput(
            "Extra monthly payment cannot be negative.", field="extra_monthly_payment"
        )
    if lump_sum is not None and lump_sum.amount < 0:
        raise InvalidDebtInput("Lump sum cannot be negative.", field="lump_sum")

    seen: set[str] = set()
    for debt in debts:
        if debt.id in seen:
            raise InvalidDebtInput(f"Duplicate debt id {debt.id!r}.", debt_id=debt.id, field="id")
        seen.add(debt.id)
        for name in ("balance", "interest", "min_payment"):
            value = getattr(debt, name)
            if not math.isfinite(value):
                raise InvalidDebtInput(
                    f"Debt {debt.id!r} has a non-finite {name}.", debt_id=debt.id, field=name
                )
            if value < 0:
                raise InvalidDebtInput(
                    f"Debt {debt.id!r} has a negative {name}.", debt_id=debt.id, field=name
                )


def _payment_order(
    strategy: PayoffStrategy, debts: Sequence[Debt], balances: Sequence[int]
) -> list[int]:
    """Indexes of debts with a balance, in the order they should be paid.

    ``sorted`` is stable, so ties keep the caller's input order.
    """

    active = [index for index, balance in enumerate(balances) if balance > 0]
    if strategy is PayoffStrategy.AVALANCHE:
        return sorted(active, key=lambda index: -debts[index].interest)
    return sorted(active, key=lambda index: balances[index])


class _PeriodLedger:
    """Schedule rows for one period, upserted by debt id."""

    def __init__(self, month: int, period_date: date, schedule: list[PayoffScheduleEntry]):
        self.month = month
        self.date = period_date
        self.schedule = schedule
        self.entries: dict[str, PayoffScheduleEntry] = {}

    def record(self, debt: Debt, opening: int, interest: int, ending: int, amount: int) -> None:
        """Add ``amount`` to the debt's row for this period, creating it on first payment.

        The period's interest is attributed to whichever row is created first.
        """

        entry = self.entries.get(debt.id)
        if entry is None:
            entry = PayoffScheduleEntry(
                month=self.month,
                date=self.date,
                debt_id=debt.id,
                debt_name=debt.name,
                starting_balance=opening,
                payment=0,
                interest=interest,
                principal=0,
                ending_balance=opening,
            )
            self.entries[debt.id] = entry
            self.schedule.append(entry)
        entry.payment += amount
        entry.principal = max(0, entry.payment - entry.interest)
        entry.ending_balance = ending


def simulate(
    debts: Iterable[Debt],
    extra_monthly_payment: int = 0,
    strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE,
    *,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    lump_sum: LumpSum | tuple[int, date] | None = None,
) -> PayoffSummary:
    """Simulate month-by-month payoff of ``debts`` under ``strategy``.

    Every period accrues interest on all open debts, pays each debt's
    minimum from a shared pool (all minimums plus the extra payment), and
    sends whatever is left to the first debt in strategy order. The loop
    stops once every balance is zero or after ``max_months`` periods; in the
    latter case the partial result is returned with ``truncated`` set.

    A ``lump_sum`` joins the surplus in the calendar month of its date only.
    """

    chosen = _coerce_strategy(strategy)
    debt_list = list(debts)
    lump = _coerce_lump_sum(lump_sum)
    validate_debts(debt_list, extra_monthly_payment, lump)
    start = start_date or date.today()

    balances = [debt.balance for debt in debt_list]
    budget = sum(debt.min_payment for debt in debt_list) + extra_monthly_payment
    schedule: list[PayoffScheduleEntry] = []
    milestones: list[PayoffMilestone] = []
    month = 0

    while any(balance > 0 for balance in balances) and month < max_months:
        month += 1
        period_date = add_months(start, month)
        opening = list(balances)

        charges = [0] * len(debt_list)
        for index, balance in enumerate(balances):
            if balance > 0:
                charges[index] = monthly_interest(balance, debt_list[index].interest)
                balances[index] = balance + charges[index]

        order = _payment_order(chosen, debt_list, balances)
        ledger = _PeriodLedger(month, period_date, schedule)

        remaining = budget
        if lump is not None and lump.applies_to(period_date):
            remaining += lump.amount
        for index in order:
            if remaining <= 0:
                break
            payment = min(debt_list[index].min_payment, balances[index], remaining)
            if payment > 0:
                balances[index] -= payment
                remaining -= payment
                ledger.record(
                    debt_list[index], opening[index], charges[index], balances[index], payment
                )

        if remaining > 0:
            target = next((index for index in order if balances[index] > 0), None)
            if target is not None:
                extra = min(remaining, balances[target])
                balances[target] -= extra
                ledger.record(
                    debt_list[target], opening[target], charges[target], balances[target], extra
                )

        for index in order:
            if balances[index] == 0:
                debt = debt_list[index]
                milestones.append(PayoffMilestone(month, period_date, debt.id, debt.name))

    truncated = any(balance > 0 for balance in balances)
    if truncated:
        logger.warning(
            "Payoff simulation hit the period cap",
            extra={"strategy": chosen.value, "max_months": max_months, "debts": len(debt_list)},
        )

    return PayoffSummary(
        strategy=chosen,
        total_months=month,
        total_interest=sum(entry.interest for entry in schedule),
        total_payments=sum(entry.payment for entry in schedule),
        debt_free_date=add_months(start, month),
        schedule=schedule,
        milestones=milestones,
        truncated=truncated,
    )


def compare_strategies(
    debts: Iterable[Debt],
    extra_monthly_payment: int = 0,
    *,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
    lump_sum: LumpSum | tuple[int, date] | None = None,
) -> StrategyComparison:
    """Run both strategies on the same input and report snowball's extra cost."""

    debt_list = list(debts)
    start = start_date or date.today()
    avalanche = simulate(
        debt_list, extra_monthly_payment, PayoffStrategy.AVALANCHE,
        start_date=start, max_months=max_months, lump_sum=lump_sum,
    )
    snowball = simulate(
        debt_list, extra_monthly_payment, PayoffStrategy.SNOWBALL,
        start_date=start, max_months=max_months, lump_sum=lump_sum,
    )
    savings = PayoffSavings(
        months=snowball.total_months - avalanche.total_months,
        interest=snowball.total_interest - avalanche.total_interest,
        total_payments=snowball.total_payments - avalanche.total_payments,
    )
    return StrategyComparison(avalanche=avalanche, snowball=snowball, savings=savings)


def minimum_payment_scenario(
    debts: Iterable[Debt],
    *,
    start_date: date | None = None,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PayoffSummary:
    """Baseline run paying only the minimums."""

    return simulate(
        debts, 0, PayoffStrategy.AVALANCHE, start_date=start_date, max_months=max_months
    )


__all__ = [
    "Debt",
    "InvalidDebtInput",
    "LumpSum",
    "MAX_PAYOFF_MONTHS",
    "PayoffMilestone",
    "PayoffScheduleEntry",
    "PayoffSavings",
    "PayoffStrategy",
    "PayoffSummary",
    "StrategyComparison",
    "add_months",
    "compare_strategies",
    "minimum_payment_scenario",
    "monthly_interest",
    "simulate",
    "validate_debts",
]
