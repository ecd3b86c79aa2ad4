"""SQLModel table exports."""

from .debt import DebtRecord

__all__ = ["DebtRecord"]
