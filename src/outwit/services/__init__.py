"""Service module exports.

``payoff_plan`` is imported directly by callers; it depends on the models,
which in turn depend on ``debts``.
"""

from . import debts, formatting

__all__ = ["debts", "formatting"]
