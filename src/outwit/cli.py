"""Command line interface for Outwit Budget."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .config import BaseConfig
from .forms import DebtForm, PayoffRequest
from .infra.database import bootstrap_database
from .infra.repositories.debt import SQLModelDebtRepository
from .logging_config import get_logger, setup_logging
from .services.debts import (
    Debt,
    InvalidDebtInput,
    PayoffSummary,
    StrategyComparison,
    compare_strategies,
    simulate,
)
from .services.formatting import format_currency, format_duration
from .services.payoff_plan import MinimumPaymentSavings, PayoffPlanner

logger = get_logger(__name__)

STRATEGY_CHOICE = click.Choice(BaseConfig.STRATEGIES, case_sensitive=False)


def _form_error(exc: ValidationError) -> click.ClickException:
    messages = []
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        field = str(loc[0]) if loc else "input"
        messages.append(f"{field}: {error.get('msg', 'Invalid value')}")
    return click.ClickException("; ".join(messages))


def _planner(ctx: click.Context) -> PayoffPlanner:
    """Build the planner on first use so ``simulate`` never touches the database."""

    state = ctx.ensure_object(dict)
    if "planner" not in state:
        config: BaseConfig = state["config"]
        _, session_factory = bootstrap_database(config)
        state["planner"] = PayoffPlanner(SQLModelDebtRepository(session_factory), config)
    return state["planner"]


def _echo_summary(summary: PayoffSummary, *, show_schedule: bool) -> None:
    click.echo(f"Strategy:        {summary.strategy.value}")
    click.echo(f"Debt free in:    {format_duration(summary.total_months)}")
    click.echo(f"Debt free date:  {summary.debt_free_date.isoformat()}")
    click.echo(f"Total interest:  {format_currency(summary.total_interest)}")
    click.echo(f"Total payments:  {format_currency(summary.total_payments)}")
    if summary.truncated:
        click.echo(f"Warning: payoff not reached within {summary.total_months} months.")
    for milestone in summary.milestones:
        click.echo(
            f"Paid off:        {milestone.debt_name} in month {milestone.month} ({milestone.date.isoformat()})"
        )
    if show_schedule:
        for entry in summary.schedule:
            click.echo(
                f"{entry.month:>4}  {entry.date.isoformat()}  {entry.debt_name:<24} "
                f"pay {format_currency(entry.payment):>12}  "
                f"int {format_currency(entry.interest):>10}  "
                f"left {format_currency(entry.ending_balance):>12}"
            )


def _echo_comparison(comparison: StrategyComparison) -> None:
    for summary in (comparison.avalanche, comparison.snowball):
        _echo_summary(summary, show_schedule=False)
        click.echo("")
    savings = comparison.savings
    if savings.interest == 0:
        click.echo("Both strategies cost the same interest.")
    else:
        leader = "Avalanche" if savings.interest > 0 else "Snowball"
        click.echo(f"{leader} saves {format_currency(savings.interest)} in interest.")
    if savings.months == 0:
        click.echo("Both strategies finish in the same month.")
    else:
        leader = "Avalanche" if savings.months > 0 else "Snowball"
        click.echo(f"{leader} finishes {format_duration(abs(savings.months))} sooner.")
    click.echo(f"Recommended: {comparison.recommendation.value}")


def _echo_versus_minimum(result: MinimumPaymentSavings) -> None:
    click.echo(
        f"Versus minimums: saves {format_currency(result.interest_saved)} in interest "
        f"and {format_duration(result.months_saved)}"
    )


def _whole_cents(value: Any, field: str) -> int:
    """Amounts in debt files are integer cents; fractions are rejected, not truncated."""

    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{field} must be a number of cents, got {value!r}") from None
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"{field} must be a whole number of cents, got {value!r}")
    return int(amount)


def _load_debts_file(path: Path) -> list[Debt]:
    """Read a JSON list of debts with amounts in cents."""

    try:
        rows: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(rows, list):
        raise click.ClickException(f"{path} must contain a JSON list of debts.")

    debts: list[Debt] = []
    for position, row in enumerate(rows, start=1):
        try:
            debts.append(
                Debt(
                    id=str(row.get("id", position)),
                    name=str(row.get("name", f"Debt {position}")),
                    balance=_whole_cents(row["balance"], "balance"),
                    interest=float(row.get("interest", 0)),
                    min_payment=_whole_cents(row.get("min_payment", row.get("minPayment", 0)), "min_payment"),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise click.ClickException(f"Debt #{position} in {path} is malformed: {exc}") from exc
    return debts


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Plan debt payoff with the avalanche or snowball strategy."""

    config = BaseConfig()
    setup_logging(config)
    ctx.ensure_object(dict)["config"] = config


@cli.group()
def debts() -> None:
    """Manage stored debts."""


@debts.command("add")
@click.option("--owner", required=True, help="Owner of the debt")
@click.option("--name", required=True)
@click.option("--balance", required=True, help="Balance in dollars")
@click.option("--interest", default="0", show_default=True, help="APR percentage")
@click.option("--min-payment", default="0", show_default=True, help="Minimum payment in dollars")
@click.pass_context
def add_debt(ctx: click.Context, owner: str, name: str, balance: str, interest: str, min_payment: str) -> None:
    """Store a new debt."""

    try:
        form = DebtForm(name=name, balance=balance, interest=interest, min_payment=min_payment)
    except ValidationError as exc:
        raise _form_error(exc) from exc
    record = _planner(ctx).add_debt(owner, form)
    click.echo(f"Added {record.name} ({record.id})")


@debts.command("list")
@click.option("--owner", required=True)
@click.option("--all", "include_archived", is_flag=True, help="Include archived and paid-off debts")
@click.pass_context
def list_debts(ctx: click.Context, owner: str, include_archived: bool) -> None:
    """List stored debts."""

    repository = _planner(ctx).repository
    records = (
        repository.list_all(owner_id=owner) if include_archived else repository.list_active(owner_id=owner)
    )
    if not records:
        click.echo("No debts.")
        return
    for record in records:
        click.echo(
            f"{record.id}  {record.name:<24} {format_currency(record.balance):>12}  "
            f"{record.interest:>6.2f}%  min {format_currency(record.min_payment)}"
        )
    click.echo(f"Total: {format_currency(repository.get_total_debt(owner_id=owner))}")


@debts.command("update")
@click.option("--owner", required=True)
@click.argument("debt_id")
@click.option("--name", default=None)
@click.option("--balance", default=None, help="Balance in dollars")
@click.option("--interest", default=None, help="APR percentage")
@click.option("--min-payment", default=None, help="Minimum payment in dollars")
@click.pass_context
def update_debt(
    ctx: click.Context,
    owner: str,
    debt_id: str,
    name: str | None,
    balance: str | None,
    interest: str | None,
    min_payment: str | None,
) -> None:
    """Change fields of a stored debt; omitted fields keep their value."""

    planner = _planner(ctx)
    current = planner.repository.get_by_id(debt_id, owner_id=owner)
    if current is None:
        raise click.ClickException(f"Debt {debt_id} not found")
    try:
        form = DebtForm(
            name=current.name if name is None else name,
            balance=Decimal(current.balance).scaleb(-2) if balance is None else balance,
            interest=str(current.interest) if interest is None else interest,
            min_payment=Decimal(current.min_payment).scaleb(-2) if min_payment is None else min_payment,
        )
    except ValidationError as exc:
        raise _form_error(exc) from exc
    try:
        record = planner.update_debt(owner, debt_id, form)
    except LookupError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Updated {record.name} ({record.id})")


@debts.command("remove")
@click.option("--owner", required=True)
@click.argument("debt_id")
@click.pass_context
def remove_debt(ctx: click.Context, owner: str, debt_id: str) -> None:
    """Delete a stored debt."""

    try:
        _planner(ctx).remove_debt(owner, debt_id)
    except LookupError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Removed {debt_id}")


@debts.command("archive")
@click.option("--owner", required=True)
@click.argument("debt_id")
@click.pass_context
def archive_debt(ctx: click.Context, owner: str, debt_id: str) -> None:
    """Hide a debt from payoff plans."""

    try:
        record = _planner(ctx).archive_debt(owner, debt_id)
    except LookupError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Archived {record.name}")


@cli.command()
@click.option("--owner", required=True)
@click.option("--extra", default="0", show_default=True, help="Extra monthly payment in dollars")
@click.option("--strategy", type=STRATEGY_CHOICE, default=None, help="Defaults to OUTWIT_DEFAULT_STRATEGY")
@click.option("--lump-sum", default=None, help="One-time extra payment in dollars")
@click.option(
    "--lump-sum-date",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m"]),
    default=None,
    help="Month the lump sum is paid",
)
@click.option("--schedule", "show_schedule", is_flag=True, help="Print every schedule row")
@click.option("--vs-minimum", is_flag=True, help="Also compare with paying only the minimums")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def payoff(
    ctx: click.Context,
    owner: str,
    extra: str,
    strategy: str | None,
    lump_sum: str | None,
    lump_sum_date: Any,
    show_schedule: bool,
    vs_minimum: bool,
    as_json: bool,
) -> None:
    """Simulate payoff of the owner's stored debts."""

    planner = _planner(ctx)
    try:
        request = PayoffRequest(
            extra_payment=extra,
            method=strategy or planner.config.DEFAULT_STRATEGY,
            lump_sum=lump_sum,
            lump_sum_date=lump_sum_date.date() if lump_sum_date else None,
        )
        if vs_minimum:
            versus = planner.versus_minimum(owner, request)
            summary = versus.plan
        else:
            versus = None
            summary = planner.plan(owner, request)
    except ValidationError as exc:
        raise _form_error(exc) from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        payload = versus.to_dict() if versus is not None else summary.to_dict()
        click.echo(json.dumps(payload, indent=2))
        return
    _echo_summary(summary, show_schedule=show_schedule)
    if versus is not None:
        _echo_versus_minimum(versus)


@cli.command()
@click.option("--owner", required=True)
@click.option("--extra", default="0", show_default=True, help="Extra monthly payment in dollars")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def compare(ctx: click.Context, owner: str, extra: str, as_json: bool) -> None:
    """Compare avalanche and snowball for the owner's stored debts."""

    planner = _planner(ctx)
    try:
        request = planner.default_request(extra)
        comparison = planner.compare(owner, request.extra_payment_cents)
    except ValidationError as exc:
        raise _form_error(exc) from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(comparison.to_dict(), indent=2))
        return
    _echo_comparison(comparison)


@cli.command("simulate")
@click.argument("debts_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--extra", default=0, show_default=True, type=int, help="Extra monthly payment in cents")
@click.option("--strategy", type=STRATEGY_CHOICE, default="avalanche", show_default=True)
@click.option("--compare", "compare_both", is_flag=True, help="Run both strategies")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def simulate_file(
    ctx: click.Context, debts_file: Path, extra: int, strategy: str, compare_both: bool, as_json: bool
) -> None:
    """Simulate payoff for debts read from a JSON file (amounts in cents)."""

    config: BaseConfig = ctx.obj["config"]
    debt_list = _load_debts_file(debts_file)
    try:
        if compare_both:
            result: Any = compare_strategies(debt_list, extra, max_months=config.MAX_PAYOFF_MONTHS)
        else:
            result = simulate(debt_list, extra, strategy, max_months=config.MAX_PAYOFF_MONTHS)
    except InvalidDebtInput as exc:
        raise click.ClickException(str(exc)) from exc
    logger.info("File simulation finished", extra={"debts_file": str(debts_file), "debts": len(debt_list)})

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif compare_both:
        _echo_comparison(result)
    else:
        _echo_summary(result, show_schedule=False)


def main() -> None:  # pragma: no cover - console script entry point
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
