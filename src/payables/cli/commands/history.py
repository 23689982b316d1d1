"""Payment history commands."""

import click
from payables.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from payables.cli.supplier_resolution import resolve_supplier_or_exit
from payables.domain.payment import PaymentService
from payables.domain.supplier import SupplierService


@click.command("history")
@click.option("--supplier", help="Supplier name or ID")
@click.option("--due-from", help="Earliest due date (YYYY-MM-DD)")
@click.option("--due-to", help="Latest due date (YYYY-MM-DD)")
@click.option("--paid-from", help="Earliest payment date (YYYY-MM-DD)")
@click.option("--paid-to", help="Latest payment date (YYYY-MM-DD)")
@click.option("--this-month", is_flag=True, help="Payments made this month")
@click.option("--this-year", is_flag=True, help="Payments made this year")
@click.option("--last-month", is_flag=True, help="Payments made last month")
@click.option("--last-year", is_flag=True, help="Payments made last year")
@click.option("--search", help="Text in description, supplier, invoice number or recipient")
@click.option("--verbose", "-v", is_flag=True, help="Show cost center split of each payment")
@click.pass_context
def show_history(
    ctx,
    supplier: str | None,
    due_from: str | None,
    due_to: str | None,
    paid_from: str | None,
    paid_to: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    search: str | None,
    verbose: bool,
):
    """Browse payment history.

    Period flags (--this-month etc.) filter on the payment date.

    Examples:
        payables history --last-month
        payables history --supplier "Energia SA" --due-from 2024-01-01 --due-to 2024-06-30
        payables history --search NF-100 -v
    """
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]

    paid_start, paid_end = resolve_cli_date_range(
        ctx,
        start_date=paid_from,
        end_date=paid_to,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
        label="payment date",
    )
    due_start = parse_date_or_exit(ctx, due_from, "start due date")
    due_end = parse_date_or_exit(ctx, due_to, "end due date")

    supplier_id = None
    if supplier is not None:
        supplier_id = resolve_supplier_or_exit(ctx, SupplierService(db), tenant, supplier)

    entries = PaymentService(db).list_history(
        tenant,
        supplier_id=supplier_id,
        due_start=due_start,
        due_end=due_end,
        paid_start=paid_start,
        paid_end=paid_end,
        search=search,
    )
    if not entries:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {len(entries)} payment(s):")
    if verbose:
        click.echo("=" * 100)
        for entry in entries:
            click.echo(f"\nPayment ID: {entry.payment_id}")
            click.echo(f"  Supplier: {entry.supplier_name}")
            click.echo(f"  Account: {entry.description} (ID: {entry.account_id})")
            click.echo(f"  Period: {entry.paid_month}")
            click.echo(f"  Due: {entry.due_date.isoformat()}")
            click.echo(f"  Paid: {entry.paid_date.isoformat()}")
            click.echo(f"  Amount: {entry.amount:,.2f}")
            click.echo(f"  Recipient: {entry.recipient}")
            click.echo(f"  Invoices: {', '.join(entry.invoice_numbers)}")
            if entry.cost_centers_snapshot:
                click.echo("  Cost centers:")
                for cc in entry.cost_centers_snapshot:
                    click.echo(f"    {cc.code:<12} {cc.percent:>6}%  {cc.value:>12,.2f}")
                total_percent = sum(cc.percent for cc in entry.cost_centers_snapshot)
                total_value = sum(cc.value for cc in entry.cost_centers_snapshot)
                click.echo(f"    {'Total':<12} {total_percent:>6}%  {total_value:>12,.2f}")
            else:
                click.echo("  Cost centers: -")
            click.echo("-" * 100)
    else:
        click.echo("-" * 110)
        click.echo(
            f"{'ID':<6} {'Period':<8} {'Paid':<11} {'Supplier':<20} {'Description':<25} "
            f"{'Amount':>12}  {'Recipient':<12} {'Invoices'}"
        )
        click.echo("-" * 110)
        for entry in entries:
            click.echo(
                f"{entry.payment_id:<6} {entry.paid_month:<8} {entry.paid_date.isoformat():<11} "
                f"{entry.supplier_name[:20]:<20} {entry.description[:25]:<25} {entry.amount:>12,.2f}  "
                f"{entry.recipient[:12]:<12} {', '.join(entry.invoice_numbers)}"
            )


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(show_history)
