import typer
from pathlib import Path
from typing import Dict, Optional
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from finance_tracker.config.settings import ConfigLoader
from finance_tracker.database.connection import DatabaseConfig, DatabaseManager
from finance_tracker.domain.enums import TimeUnit, TransactionCategory, TransactionType
from finance_tracker.domain.models import (
    CategoryKey,
    CustomCategory,
    InvalidTransactionError,
    validate_custom_label,
)
from finance_tracker.grouping import CategoryTotals, Summary
from finance_tracker.logging_setup import configure_logging, get_logger
from finance_tracker.repositories.sqlite_transaction_repository import SQLiteTransactionRepository
from finance_tracker.services.models import TransactionInput
from finance_tracker.services.transaction_service import TransactionService

app = typer.Typer(
    name="finance-tracker",
    help="Record income and expenses and see where the money goes",
    add_completion=False,
)

console = Console()
logger = get_logger("finance_tracker.cli")


class State:
    verbose: bool = False
    owner: str = "default"
    default_time_unit: str = "Month"
    db_manager: Optional[DatabaseManager] = None
    service: Optional[TransactionService] = None


state = State()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
    user: Optional[str] = typer.Option(
        None,
        "--user", "-u",
        help="Whose transactions to work with",
    ),
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Path to the SQLite database file",
        dir_okay=False,
    ),
):
    """
    Finance Tracker - record, group and summarize personal transactions.
    """
    config = ConfigLoader.load_app_config()
    configure_logging("DEBUG" if verbose else config.get("log_level"))

    if state.db_manager is not None:
        state.db_manager.close()

    state.db_manager = DatabaseManager(DatabaseConfig(db or config["database_path"]))
    state.db_manager.initialize_schema()
    state.service = TransactionService(SQLiteTransactionRepository(state.db_manager))

    state.owner = user or config.get("default_owner", "default")
    state.default_time_unit = config.get("default_time_unit", "Month")
    state.verbose = verbose
    logger.debug("Using %s for %s", state.db_manager.config.connection_string, state.owner)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)


def _money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def _signed_money(amount: Decimal) -> str:
    color = "green" if amount >= 0 else "red"
    return f"[{color}]{_money(amount)}[/{color}]"


def _category_name(key: CategoryKey) -> str:
    if isinstance(key, CustomCategory):
        return f"{key.label} (custom)"
    return key.value


def _parse_amount(amount: str) -> Decimal:
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise InvalidTransactionError(f"Invalid amount: '{amount}'")
    if not value.is_finite():
        raise InvalidTransactionError(f"Invalid amount: '{amount}'")
    return value


def _resolve_category(category: Optional[str], custom: Optional[str]) -> tuple:
    if category and custom:
        raise InvalidTransactionError("Use either --category or --custom, not both")
    if custom is not None:
        return TransactionCategory.CUSTOM, custom
    if category is None:
        return TransactionCategory.OTHER, None

    parsed = TransactionCategory.parse(category)
    if parsed == TransactionCategory.CUSTOM:
        raise InvalidTransactionError("Give the custom category label with --custom")
    return parsed, None


def _add(
    transaction_type: TransactionType,
    amount: str,
    on: Optional[datetime],
    description: Optional[str],
    category: Optional[str],
    custom: Optional[str],
) -> None:
    try:
        selected, label = _resolve_category(category, custom)
        data = TransactionInput(
            date=on.date() if on else date.today(),
            amount=_parse_amount(amount),
            category=selected,
            custom_category=label,
            description=description,
        )
        saved = state.service.add_transaction(data, transaction_type, state.owner)
    except Exception as e:
        _fail(e)

    console.print(
        f"[bold green]✓ {transaction_type.value} added:[/bold green] "
        f"{saved.date} {saved.category_label} {_money(saved.amount)} ({saved.description})"
    )


AMOUNT_ARG = typer.Argument(..., help="Amount, e.g. 12.50")
DATE_OPT = typer.Option(
    None, "--date", "-d",
    formats=["%Y-%m-%d"],
    help="Date as yyyy-mm-dd (defaults to today)",
)
DESCRIPTION_OPT = typer.Option(None, "--description", "-m", help="Up to 40 characters")
CATEGORY_OPT = typer.Option(None, "--category", "-c", help="One of the fixed categories (default: Other)")
CUSTOM_OPT = typer.Option(None, "--custom", help="Custom category label, up to 15 characters")


@app.command(name="income")
def add_income(
    amount: str = AMOUNT_ARG,
    on: Optional[datetime] = DATE_OPT,
    description: Optional[str] = DESCRIPTION_OPT,
    category: Optional[str] = CATEGORY_OPT,
    custom: Optional[str] = CUSTOM_OPT,
):
    """
    Record an income.

    Examples:
        finance-tracker income 2500 -c Savings -m "Salary"
        finance-tracker income 40 --custom Gifts --date 2024-12-24
    """
    _add(TransactionType.INCOME, amount, on, description, category, custom)


@app.command(name="expense")
def add_expense(
    amount: str = AMOUNT_ARG,
    on: Optional[datetime] = DATE_OPT,
    description: Optional[str] = DESCRIPTION_OPT,
    category: Optional[str] = CATEGORY_OPT,
    custom: Optional[str] = CUSTOM_OPT,
):
    """
    Record an expense.

    Examples:
        finance-tracker expense 12.50 -c Food -m "Lunch"
    """
    _add(TransactionType.EXPENSE, amount, on, description, category, custom)


def _print_totals(summary: Summary, title: str) -> None:
    summary_text = (
        f"[bold]Transactions:[/bold] {summary.transaction_count}\n\n"
        f"[green]💰 Income:[/green]    {_money(summary.total_income):>14}\n"
        f"[red]💸 Expenses:[/red]  {_money(summary.total_expense):>14}\n"
        f"{'─' * 30}\n"
        f"[bold]Net:[/bold]         {_signed_money(summary.net_result)}"
    )
    console.print(Panel(summary_text, title=f"[bold]{title}[/bold]", border_style="cyan", padding=(1, 2)))


def _print_buckets(summary: Summary) -> None:
    number = 0
    for bucket in summary.buckets:
        txn_table = Table(
            title=f"[bold cyan]{bucket.key}[/bold cyan]",
            title_justify="left",
            show_header=True,
            padding=(0, 1),
        )
        txn_table.add_column("#", justify="right", style="dim", width=4)
        txn_table.add_column("Date", style="cyan", width=12)
        txn_table.add_column("Category", style="magenta", width=16)
        txn_table.add_column("Description", style="white", max_width=40)
        txn_table.add_column("Amount", justify="right", width=14)

        for txn in bucket.transactions:
            number += 1
            if txn.type == TransactionType.EXPENSE:
                amount_str = f"[red]-{_money(txn.amount)}[/red]"
            else:
                amount_str = f"[green]+{_money(txn.amount)}[/green]"
            txn_table.add_row(str(number), str(txn.date), txn.category_label, txn.description, amount_str)

        console.print(txn_table)
        console.print(
            f"  [dim]Income {_money(bucket.total_income)} · "
            f"Expenses {_money(bucket.total_expense)} · Net[/dim] {_signed_money(bucket.net_result)}\n"
        )


def _print_categories(summary: Summary) -> None:
    for bucket in summary.buckets:
        category_table = Table(
            title=f"[bold cyan]{bucket.key}[/bold cyan]",
            title_justify="left",
            show_header=True,
            box=None,
            padding=(0, 2),
        )
        category_table.add_column("Category", style="cyan", no_wrap=True)
        category_table.add_column("Income", justify="right", style="green")
        category_table.add_column("Expenses", justify="right", style="red")

        categories = list(bucket.incomes_by_category)
        categories += [c for c in bucket.expenses_by_category if c not in bucket.incomes_by_category]
        for key in categories:
            income = bucket.incomes_by_category.get(key)
            expense = bucket.expenses_by_category.get(key)
            category_table.add_row(
                _category_name(key),
                _money(income) if income is not None else "",
                _money(expense) if expense is not None else "",
            )

        console.print(category_table)
        console.print("")


def _print_category_totals(totals: Dict[CategoryKey, CategoryTotals]) -> None:
    category_table = Table(
        title="[bold cyan]All time[/bold cyan]",
        title_justify="left",
        show_header=True,
        box=None,
        padding=(0, 2),
    )
    category_table.add_column("Category", style="cyan", no_wrap=True)
    category_table.add_column("Income", justify="right", style="green")
    category_table.add_column("Expenses", justify="right", style="red")
    category_table.add_column("Net", justify="right")

    for key, totals_for_key in totals.items():
        category_table.add_row(
            _category_name(key),
            _money(totals_for_key.income),
            _money(totals_for_key.expense),
            _signed_money(totals_for_key.net),
        )

    console.print(category_table)
    console.print("")


@app.command(name="show")
def show(
    by: Optional[str] = typer.Option(
        None,
        "--by", "-b",
        help="Group by Day, Week, Month or Year",
    ),
    categories: bool = typer.Option(
        False,
        "--categories",
        help="Show per-category totals instead of single transactions",
    ),
    all_time: bool = typer.Option(
        False,
        "--all",
        help="With --categories, one table over the whole history",
    ),
):
    """
    Show transactions grouped by time period.

    Examples:
        finance-tracker show
        finance-tracker show --by week
        finance-tracker show --by year --categories
        finance-tracker show --categories --all
    """
    if all_time and not categories:
        _fail(ValueError("--all only applies together with --categories"))

    try:
        summary = state.service.summarize(state.owner, by or state.default_time_unit)
        totals = state.service.category_totals(state.owner) if all_time else None
    except Exception as e:
        _fail(e)

    title = f"{state.owner} · by {summary.time_unit.value}"
    if summary.is_empty:
        console.print(Panel(
            "[yellow]No transactions recorded yet[/yellow]",
            title=title,
            border_style="yellow"
        ))
        return

    if all_time:
        title = f"{state.owner} · all time"
        _print_category_totals(totals)
    elif categories:
        _print_categories(summary)
    else:
        _print_buckets(summary)

    _print_totals(summary, title)

    if state.verbose:
        console.print(f"\n[dim]→ {len(summary.buckets)} group(s)[/dim]")


@app.command(name="balance")
def balance():
    """
    Show the account balance: all income minus all expenses.

    Examples:
        finance-tracker balance
        finance-tracker --user bob balance
    """
    try:
        amount = state.service.account_balance(state.owner)
    except Exception as e:
        _fail(e)

    console.print(f"[bold]Balance for {state.owner}:[/bold] {_signed_money(amount)}")


@app.command(name="categories")
def list_categories():
    """List the fixed categories."""
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category", style="cyan")

    for index, category in enumerate(TransactionCategory, start=1):
        if category == TransactionCategory.CUSTOM:
            continue
        table.add_row(str(index), category.value)

    console.print(table)
    console.print("[dim]Anything else: use --custom LABEL[/dim]")


@app.command(name="remove")
def remove(
    index: int = typer.Argument(..., help="Row number as printed by 'show'", min=1),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """
    Remove a single transaction by its number.

    Examples:
        finance-tracker remove 3
    """
    if not yes and not typer.confirm(f"Remove transaction #{index}?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        removed = state.service.remove_by_index(state.owner, index)
    except Exception as e:
        _fail(e)

    console.print(f"[bold green]✓ Removed[/bold green] {removed.date} {removed.category_label} {_money(removed.amount)}")


@app.command(name="delete")
def delete(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Delete a fixed category"),
    custom: Optional[str] = typer.Option(None, "--custom", help="Delete a custom category"),
    start: Optional[datetime] = typer.Option(None, "--from", formats=["%Y-%m-%d"], help="Start date (inclusive)"),
    end: Optional[datetime] = typer.Option(None, "--to", formats=["%Y-%m-%d"], help="End date (inclusive)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """
    Delete transactions by category or by date range.

    Examples:
        finance-tracker delete --category Food
        finance-tracker delete --custom Gifts
        finance-tracker delete --from 2024-01-01 --to 2024-01-31
    """
    by_category = category is not None or custom is not None
    by_dates = start is not None or end is not None

    if by_category == by_dates:
        _fail(ValueError("Give either a category (--category/--custom) or a date range (--from/--to)"))
    if by_dates and (start is None or end is None):
        _fail(ValueError("A date range needs both --from and --to"))

    try:
        if by_category:
            if category and custom:
                raise ValueError("Use either --category or --custom, not both")
            if custom is not None:
                key = CustomCategory(validate_custom_label(custom))
            else:
                key = TransactionCategory.parse(category)
            prompt = f"Delete all transactions for category {_category_name(key)}?"
        else:
            prompt = f"Delete all transactions from {start:%Y-%m-%d} to {end:%Y-%m-%d}?"
    except Exception as e:
        _fail(e)

    if not yes and not typer.confirm(prompt):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        if by_category:
            result = state.service.delete_by_category(state.owner, key)
        else:
            result = state.service.delete_by_date_range(state.owner, start.date(), end.date())
    except Exception as e:
        _fail(e)

    style = "bold green" if result.success else "yellow"
    console.print(f"[{style}]{result}[/{style}]")


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
