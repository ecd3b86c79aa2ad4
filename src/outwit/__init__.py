"""Outwit Budget debt payoff planning package."""

from __future__ import annotations

from .config import BaseConfig
from .services.debts import Debt, PayoffStrategy, compare_strategies, simulate

__all__ = ["BaseConfig", "Debt", "PayoffStrategy", "compare_strategies", "simulate"]
