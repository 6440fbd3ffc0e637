"""Command-line entry points for FinanceManager."""

from __future__ import annotations

from datetime import date

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .domain.errors import InvalidWindow
from .domain.month import Month
from .domain.records import Expense, Income, Record
from .logging_config import setup_logging
from .services.monthly import load_monthly_series, recent_anchor_months


class MonthParamType(click.ParamType):
    """Accept ``YYYY-MM`` or ``YYYY-MM-DD`` and yield a ``Month``."""

    name = "month"

    def convert(self, value, param, ctx):
        if isinstance(value, Month):
            return value
        try:
            return Month.parse(value)
        except ValueError:
            self.fail(f"{value!r} is not a YYYY-MM month", param, ctx)


MONTH = MonthParamType()


def _app(ctx: click.Context) -> AppContext:
    """Return the injected context or build one from the environment."""

    app = ctx.obj.get("app")
    if app is None:
        config = BaseConfig()
        setup_logging(config)
        app = create_app_context(config)
        ctx.obj["app"] = app
        ctx.call_on_close(app.close)
    return app


def _insert(app: AppContext, record: Record) -> None:
    result = app.repository(record.kind).insert(record)
    if not result.ok:
        raise click.ClickException(f"Could not save {record.kind.value}: {result.error}")
    click.echo(f"Saved {record.kind.value} for {record.month}: total {record.total:.2f}")


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track monthly expenses and income."""

    ctx.ensure_object(dict)


@cli.command("add-expense")
@click.option("--month", "month", type=MONTH, required=True, help="Month of the expense (YYYY-MM)")
@click.option("--housing", type=float, default=0.0, show_default=True)
@click.option("--food", type=float, default=0.0, show_default=True)
@click.option("--going-out", "going_out", type=float, default=0.0, show_default=True)
@click.option("--transportation", type=float, default=0.0, show_default=True)
@click.option("--travel", type=float, default=0.0, show_default=True)
@click.option("--tax", type=float, default=0.0, show_default=True)
@click.option("--other", type=float, default=0.0, show_default=True)
@click.pass_context
def add_expense(ctx: click.Context, month: Month, **amounts: float) -> None:
    """Record one month of expenses."""

    _insert(_app(ctx), Expense(date=month.first_day(), **amounts))


@cli.command("add-income")
@click.option("--month", "month", type=MONTH, required=True, help="Month of the income (YYYY-MM)")
@click.option("--salary", type=float, default=0.0, show_default=True)
@click.option("--help-amount", "help_amount", type=float, default=0.0, show_default=True)
@click.option("--entrepreneur", type=float, default=0.0, show_default=True)
@click.option("--passive", type=float, default=0.0, show_default=True)
@click.option("--other", type=float, default=0.0, show_default=True)
@click.pass_context
def add_income(ctx: click.Context, month: Month, help_amount: float, **amounts: float) -> None:
    """Record one month of income."""

    _insert(_app(ctx), Income(date=month.first_day(), help=help_amount, **amounts))


@cli.command("summary")
@click.option("--anchor", type=MONTH, default=None, help="Last month of the window (default: current month)")
@click.option("--window", type=int, default=None, help="Number of months (default: config WINDOW_MONTHS)")
@click.pass_context
def summary(ctx: click.Context, anchor: Month | None, window: int | None) -> None:
    """Print month-by-month expense and income totals."""

    app = _app(ctx)
    anchor = anchor or Month.of(date.today())
    window = window if window is not None else app.config.WINDOW_MONTHS
    try:
        series = load_monthly_series(app.expense_repo, app.income_repo, anchor, window)
    except InvalidWindow as exc:
        raise click.BadParameter(str(exc), param_hint="--window") from exc

    click.echo(f"{'month':<8} {'expenses':>12} {'income':>12} {'net':>12}")
    for label, bucket in zip(series.labels(), series):
        click.echo(
            f"{label:<8} {bucket.expense_total:>12.2f} "
            f"{bucket.income_total:>12.2f} {bucket.net:>12.2f}"
        )
    click.echo(
        f"{'total':<8} {series.expense_total:>12.2f} "
        f"{series.income_total:>12.2f} {series.net_total:>12.2f}"
    )

    snapshot = series.category_snapshot
    if snapshot is None:
        click.echo("No expenses in this window.")
        return
    click.echo(f"Latest expense split ({snapshot.month}):")
    for name, amount in snapshot.amounts:
        click.echo(f"  {name:<15} {amount:>10.2f}")


@cli.command("periods")
@click.option("--count", type=int, default=12, show_default=True)
def periods(count: int) -> None:
    """List the selectable anchor months, newest first."""

    try:
        months = recent_anchor_months(date.today(), count)
    except InvalidWindow as exc:
        raise click.BadParameter(str(exc), param_hint="--count") from exc
    for month in months:
        click.echo(month.isoformat())


def main() -> None:  # pragma: no cover - console script
    cli(obj={})
