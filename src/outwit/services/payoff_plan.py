"""Debt management and payoff planning on top of the debt store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..config import BaseConfig
from ..domain.repositories.debt import DebtRepository
from ..forms import DebtForm, PayoffRequest
from ..logging_config import get_logger
from ..models.debt import DebtRecord
from .debts import (
    Debt,
    PayoffStrategy,
    PayoffSummary,
    StrategyComparison,
    compare_strategies,
    minimum_payment_scenario,
    simulate,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MinimumPaymentSavings:
    """How much a plan improves on paying only the minimums."""

    plan: PayoffSummary
    baseline: PayoffSummary
    interest_saved: int
    months_saved: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan": self.plan.to_dict(),
            "baseline": self.baseline.to_dict(),
            "interest_saved": self.interest_saved,
            "months_saved": self.months_saved,
        }


class PayoffPlanner:
    """Coordinates the debt store with the payoff simulator for one user at a time."""

    def __init__(self, repository: DebtRepository, config: BaseConfig | None = None):
        self.repository = repository
        self.config = config or BaseConfig()

    @property
    def max_months(self) -> int:
        return self.config.MAX_PAYOFF_MONTHS

    # Debt records -----------------------------------------------------------

    def add_debt(self, owner_id: str, form: DebtForm) -> DebtRecord:
        record = self.repository.create(DebtRecord(owner_id=owner_id, **form.to_cents()), owner_id=owner_id)
        logger.info("Debt added", extra={"owner_id": owner_id, "debt_id": record.id})
        return record

    def update_debt(self, owner_id: str, debt_id: str, form: DebtForm) -> DebtRecord:
        record = self._require(owner_id, debt_id)
        for key, value in form.to_cents().items():
            setattr(record, key, value)
        updated = self.repository.update(record, owner_id=owner_id)
        logger.info("Debt updated", extra={"owner_id": owner_id, "debt_id": debt_id})
        return updated

    def remove_debt(self, owner_id: str, debt_id: str) -> None:
        if not self.repository.delete(debt_id, owner_id=owner_id):
            raise LookupError(f"Debt {debt_id} not found")
        logger.info("Debt removed", extra={"owner_id": owner_id, "debt_id": debt_id})

    def archive_debt(self, owner_id: str, debt_id: str) -> DebtRecord:
        record = self.repository.archive(debt_id, owner_id=owner_id)
        if record is None:
            raise LookupError(f"Debt {debt_id} not found")
        return record

    def _require(self, owner_id: str, debt_id: str) -> DebtRecord:
        record = self.repository.get_by_id(debt_id, owner_id=owner_id)
        if record is None:
            raise LookupError(f"Debt {debt_id} not found")
        return record

    def active_debts(self, owner_id: str) -> list[Debt]:
        return [record.to_debt() for record in self.repository.list_active(owner_id=owner_id)]

    def _require_debts(self, owner_id: str) -> list[Debt]:
        debts = self.active_debts(owner_id)
        if not debts:
            raise ValueError("No debts to calculate payoff for")
        return debts

    # Payoff plans ------------------------------------------------------------

    def plan(
        self, owner_id: str, request: PayoffRequest, *, start_date: date | None = None
    ) -> PayoffSummary:
        """Simulate the requested strategy over the owner's active debts."""

        debts = self._require_debts(owner_id)
        summary = simulate(
            debts,
            request.extra_payment_cents,
            request.method,
            start_date=start_date,
            max_months=self.max_months,
            lump_sum=request.lump_sum_cents,
        )
        logger.info(
            "Payoff plan calculated",
            extra={
                "owner_id": owner_id,
                "strategy": summary.strategy.value,
                "total_months": summary.total_months,
                "truncated": summary.truncated,
            },
        )
        return summary

    def compare(
        self, owner_id: str, extra_payment_cents: int, *, start_date: date | None = None
    ) -> StrategyComparison:
        debts = self._require_debts(owner_id)
        comparison = compare_strategies(
            debts, extra_payment_cents, start_date=start_date, max_months=self.max_months
        )
        logger.info(
            "Strategies compared",
            extra={
                "owner_id": owner_id,
                "interest_savings": comparison.savings.interest,
                "recommendation": comparison.recommendation.value,
            },
        )
        return comparison

    def versus_minimum(
        self, owner_id: str, request: PayoffRequest, *, start_date: date | None = None
    ) -> MinimumPaymentSavings:
        """Compare the requested plan with a minimum-payments-only baseline."""

        debts = self._require_debts(owner_id)
        plan = simulate(
            debts,
            request.extra_payment_cents,
            request.method,
            start_date=start_date,
            max_months=self.max_months,
            lump_sum=request.lump_sum_cents,
        )
        baseline = minimum_payment_scenario(debts, start_date=start_date, max_months=self.max_months)
        return MinimumPaymentSavings(
            plan=plan,
            baseline=baseline,
            interest_saved=max(0, baseline.total_interest - plan.total_interest),
            months_saved=max(0, baseline.total_months - plan.total_months),
        )

    def default_request(self, extra_payment: str | int = 0) -> PayoffRequest:
        return PayoffRequest(
            extra_payment=extra_payment, method=PayoffStrategy(self.config.DEFAULT_STRATEGY)
        )


__all__ = ["MinimumPaymentSavings", "PayoffPlanner"]
