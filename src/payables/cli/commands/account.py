"""Account management commands."""

from datetime import datetime

import click
from payables.cli.date_filters import parse_date_or_exit
from payables.cli.error_handling import handle_domain_error
from payables.cli.supplier_resolution import resolve_supplier_or_exit
from payables.domain.account import AccountService
from payables.domain.supplier import SupplierService
from payables.utils.amount_parser import parse_amount, parse_cost_center


def _parse_cost_centers_or_exit(ctx, values: tuple[str, ...]):
    try:
        return [parse_cost_center(v) for v in values]
    except ValueError as e:
        handle_domain_error(ctx, e)


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        handle_domain_error(ctx, e)


def _format_cost_centers(account) -> str:
    if not account.cost_centers:
        return "-"
    return ", ".join(f"{cc.code} {cc.percent}%" for cc in account.cost_centers)


@click.group()
def account_group():
    """Manage recurring accounts."""
    pass


@account_group.command("create")
@click.option("--supplier", required=True, help="Supplier name or ID")
@click.option("--description", required=True, help="Account description")
@click.option(
    "--amount",
    required=True,
    help="Monthly amount (e.g., 1500.00 or 'R$ 1.500,00'). A dot before exactly three digits groups thousands.",
)
@click.option("--issue-day", required=True, type=int, help="Day of month the invoice is issued (1-31)")
@click.option("--due-day", required=True, type=int, help="Day of month the invoice is due (1-31)")
@click.option("--end-date", help="Last date of the recurrence (YYYY-MM-DD)")
@click.option("--start-date", help="Start of the recurrence (defaults to today)")
@click.option(
    "--cost-center",
    "cost_centers",
    multiple=True,
    help="Cost center share as CODE:PERCENT (repeatable, must sum to 100)",
)
@click.pass_context
def create_account(
    ctx,
    supplier: str,
    description: str,
    amount: str,
    issue_day: int,
    due_day: int,
    end_date: str | None,
    start_date: str | None,
    cost_centers: tuple[str, ...],
):
    """Create a new recurring account.

    When the issue day is after the due day, each invoice is due in the
    month following its issue.

    Examples:
        payables account create --supplier "Energia SA" --description "Electricity" --amount 850.00 --issue-day 5 --due-day 15
        payables account create --supplier 2 --description "Rent" --amount 4000 --issue-day 25 --due-day 10 --cost-center ADM:60 --cost-center OPS:40
    """
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]
    service = AccountService(db)

    supplier_id = resolve_supplier_or_exit(ctx, SupplierService(db), tenant, supplier)
    value = _parse_amount_or_exit(ctx, amount)
    shares = _parse_cost_centers_or_exit(ctx, cost_centers)
    end = parse_date_or_exit(ctx, end_date, "end date")
    start = parse_date_or_exit(ctx, start_date, "start date")

    try:
        account_id = service.create_account(
            tenant,
            supplier_id=supplier_id,
            description=description,
            amount=value,
            issue_day=issue_day,
            due_day=due_day,
            end_date=end,
            cost_centers=shares,
            created_at=datetime(start.year, start.month, start.day) if start else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{description.strip()}' (ID: {account_id})")


@account_group.command("list")
@click.option("--supplier", help="Only accounts of this supplier (name or ID)")
@click.pass_context
def list_accounts(ctx, supplier: str | None):
    """List recurring accounts."""
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]
    supplier_service = SupplierService(db)

    supplier_id = None
    if supplier is not None:
        supplier_id = resolve_supplier_or_exit(ctx, supplier_service, tenant, supplier)

    accounts = AccountService(db).list_accounts(tenant, supplier_id=supplier_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    names = {s.id: s.name for s in supplier_service.list_suppliers(tenant)}
    click.echo("\nAccounts:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<5} {'Supplier':<20} {'Description':<30} {'Amount':>12} {'Issue':>6} {'Due':>4}  {'Ends':<10}"
    )
    click.echo("-" * 100)
    for acc in accounts:
        click.echo(
            f"{acc.id:<5} {names.get(acc.supplier_id, 'Unknown')[:20]:<20} {acc.description[:30]:<30} "
            f"{acc.amount:>12,.2f} {acc.issue_day:>6} {acc.due_day:>4}  "
            f"{acc.end_date.isoformat() if acc.end_date else '-':<10}"
        )


@account_group.command("show")
@click.argument("account_id", type=int)
@click.pass_context
def show_account(ctx, account_id: int):
    """Show one account in detail."""
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]

    account = AccountService(db).get_account(tenant, account_id)
    if account is None:
        click.echo(f"Error: Account {account_id} not found", err=True)
        ctx.exit(1)
    supplier = SupplierService(db).get_supplier(tenant, account.supplier_id)

    click.echo(f"\nAccount ID: {account.id}")
    click.echo(f"  Supplier: {supplier.name if supplier else 'Unknown'} (ID: {account.supplier_id})")
    click.echo(f"  Description: {account.description}")
    click.echo(f"  Amount: {account.amount:,.2f}")
    click.echo(f"  Issue day: {account.issue_day}")
    click.echo(f"  Due day: {account.due_day}")
    click.echo(f"  Started: {account.created_at.date().isoformat()}")
    click.echo(f"  Ends: {account.end_date.isoformat() if account.end_date else 'open-ended'}")
    click.echo(f"  Cost centers: {_format_cost_centers(account)}")


@account_group.command("edit")
@click.argument("account_id", type=int)
@click.option("--supplier", help="New supplier name or ID")
@click.option("--description", help="New description")
@click.option("--amount", help="New monthly amount")
@click.option("--issue-day", type=int, help="New issue day (1-31)")
@click.option("--due-day", type=int, help="New due day (1-31)")
@click.option("--end-date", help="New end date (YYYY-MM-DD)")
@click.option("--clear-end-date", is_flag=True, help="Make the recurrence open-ended")
@click.option(
    "--cost-center",
    "cost_centers",
    multiple=True,
    help="Replace cost centers, CODE:PERCENT (repeatable, must sum to 100)",
)
@click.option("--clear-cost-centers", is_flag=True, help="Remove all cost centers")
@click.pass_context
def edit_account(
    ctx,
    account_id: int,
    supplier: str | None,
    description: str | None,
    amount: str | None,
    issue_day: int | None,
    due_day: int | None,
    end_date: str | None,
    clear_end_date: bool,
    cost_centers: tuple[str, ...],
    clear_cost_centers: bool,
):
    """Edit an account.

    Payments already recorded keep the cost center split they were made with.

    Examples:
        payables account edit 3 --amount 920.00
        payables account edit 3 --cost-center ADM:50 --cost-center OPS:50
    """
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]
    service = AccountService(db)

    if end_date and clear_end_date:
        click.echo("Error: Cannot use --end-date with --clear-end-date", err=True)
        ctx.exit(1)
    if cost_centers and clear_cost_centers:
        click.echo("Error: Cannot use --cost-center with --clear-cost-centers", err=True)
        ctx.exit(1)

    changes = {}
    if supplier is not None:
        changes["supplier_id"] = resolve_supplier_or_exit(ctx, SupplierService(db), tenant, supplier)
    if amount is not None:
        changes["amount"] = _parse_amount_or_exit(ctx, amount)
    if end_date:
        changes["end_date"] = parse_date_or_exit(ctx, end_date, "end date")
    elif clear_end_date:
        changes["end_date"] = None
    if cost_centers:
        changes["cost_centers"] = _parse_cost_centers_or_exit(ctx, cost_centers)
    elif clear_cost_centers:
        changes["cost_centers"] = []

    try:
        service.update_account(
            tenant,
            account_id,
            description=description,
            issue_day=issue_day,
            due_day=due_day,
            **changes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {account_id}")


@account_group.command("end")
@click.argument("account_id", type=int)
@click.option("--date", "end_date", default="today", show_default=True, help="Last date of the recurrence")
@click.pass_context
def end_account(ctx, account_id: int, end_date: str):
    """End an account's recurrence.

    No occurrences are generated for months after the end date.
    """
    end = parse_date_or_exit(ctx, end_date, "end date")
    try:
        AccountService(ctx.obj["db"]).end_account(ctx.obj["tenant"], account_id, end)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account {account_id} ends on {end.isoformat()}")


@account_group.command("delete")
@click.argument("account_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account_id: int, yes: bool):
    """Delete an account.

    Only accounts without payment history can be deleted; end the
    recurrence instead to keep its history.
    """
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]
    service = AccountService(db)

    account = service.get_account(tenant, account_id)
    if account is None:
        click.echo(f"Error: Account {account_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account.description}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(tenant, account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account.description}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
