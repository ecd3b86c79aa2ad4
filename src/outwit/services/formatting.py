"""Display helpers for cents and month counts."""

from __future__ import annotations


def format_currency(cents: int) -> str:
    """Render an amount in cents as dollars, e.g. ``123456 -> "$1,234.56"``.

    The sign is dropped; callers label debits and credits themselves.
    """

    return f"${abs(cents) / 100:,.2f}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(months: int) -> str:
    """Render a month count as years and months."""

    if months <= 0:
        return "0 months"

    years, remainder = divmod(months, 12)
    if years == 0:
        return _plural(months, "month")
    if remainder == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} {_plural(remainder, 'month')}"
