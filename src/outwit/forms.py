"""Validation models for debt records and payoff requests.

Amounts arrive in dollars (as typed by a user) and are converted to integer
cents before they reach the store or the simulator.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .services.debts import LumpSum, PayoffStrategy

CENT = Decimal("0.01")


def dollars_to_cents(amount: Decimal | float | int | str) -> int:
    """Convert a dollar amount to integer cents, rounding half-up."""

    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def _structured_errors(exc: ValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


class DebtForm(BaseModel):
    """User-supplied fields for creating or editing a debt."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="", max_length=80, description="Creditor or account name")
    balance: Decimal = Field(default=Decimal("0"), ge=0, description="Outstanding balance in dollars")
    interest: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="APR percentage")
    min_payment: Decimal = Field(default=Decimal("0"), ge=0, description="Minimum payment in dollars")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value:
            raise ValueError("Debt name is required")
        return value

    @field_validator("balance", "interest", "min_payment", mode="before")
    @classmethod
    def blank_as_zero(cls, value: Any) -> Any:
        """Empty form inputs count as zero."""

        if value is None or (isinstance(value, str) and not value.strip()):
            return Decimal("0")
        return value

    @classmethod
    def validation_errors(cls, payload: dict[str, Any]) -> dict[str, list[str]]:
        """Return ``{field: [messages]}`` for ``payload``, empty when it is valid."""

        try:
            cls.model_validate(payload)
        except ValidationError as exc:
            return _structured_errors(exc)
        return {}

    def to_cents(self) -> dict[str, Any]:
        """Fields ready for ``DebtRecord``: amounts in cents, APR as float."""

        return {
            "name": self.name,
            "balance": dollars_to_cents(self.balance),
            "interest": float(self.interest),
            "min_payment": dollars_to_cents(self.min_payment),
        }


class PayoffRequest(BaseModel):
    """Parameters for a payoff calculation."""

    extra_payment: Decimal = Field(default=Decimal("0"), ge=0, description="Extra per month in dollars")
    method: PayoffStrategy = PayoffStrategy.AVALANCHE
    lump_sum: Decimal | None = Field(default=None, ge=0, description="One-time payment in dollars")
    lump_sum_date: date | None = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def lump_sum_needs_date(self) -> "PayoffRequest":
        if (self.lump_sum is None) != (self.lump_sum_date is None):
            raise ValueError("Lump sum and lump sum date must be given together")
        return self

    @classmethod
    def validation_errors(cls, payload: dict[str, Any]) -> dict[str, list[str]]:
        try:
            cls.model_validate(payload)
        except ValidationError as exc:
            return _structured_errors(exc)
        return {}

    @property
    def extra_payment_cents(self) -> int:
        return dollars_to_cents(self.extra_payment)

    @property
    def lump_sum_cents(self) -> LumpSum | None:
        if self.lump_sum is None or self.lump_sum_date is None:
            return None
        return LumpSum(amount=dollars_to_cents(self.lump_sum), date=self.lump_sum_date)


__all__ = ["DebtForm", "PayoffRequest", "dollars_to_cents"]
