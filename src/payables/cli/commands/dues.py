"""Dashboard of overdue, upcoming and paid occurrences."""

import click
from payables.cli.date_filters import parse_date_or_exit
from payables.domain.occurrence import OccurrenceService
from payables.domain.supplier import SupplierService


def _echo_section(title: str, occurrences, suppliers: dict[int, str], paid: bool = False) -> None:
    click.echo(f"\n{title} ({len(occurrences)}):")
    click.echo("-" * 100)
    if not occurrences:
        click.echo("  none")
        return

    for occ in occurrences:
        supplier_name = suppliers.get(occ.supplier_id, "Unknown")
        line = (
            f"{occ.period:<8} #{occ.account_id:<4} {supplier_name[:20]:<20} {occ.description[:28]:<28} "
            f"{occ.amount:>12,.2f}  issue {occ.issue_date.isoformat()}  due {occ.due_date.isoformat()}"
        )
        click.echo(line)
        if paid:
            click.echo(
                f"         paid {occ.paid_date.isoformat()} to {occ.recipient} "
                f"(NF {', '.join(occ.invoice_numbers)})"
            )


@click.command("dues")
@click.option("--as-of", default="today", show_default=True, help="Reference date")
@click.option("--hide-paid", is_flag=True, help="Only show overdue and upcoming occurrences")
@click.pass_context
def show_dues(ctx, as_of: str, hide_paid: bool):
    """Show monthly occurrences grouped as overdue, upcoming and paid.

    Examples:
        payables dues
        payables dues --as-of 2024-03-31
    """
    db = ctx.obj["db"]
    tenant = ctx.obj["tenant"]
    reference = parse_date_or_exit(ctx, as_of, "as-of date")

    groups = OccurrenceService(db).list_occurrences(tenant, reference)
    if len(groups) == 0:
        click.echo("No occurrences found.")
        return

    suppliers = {s.id: s.name for s in SupplierService(db).list_suppliers(tenant)}
    click.echo(f"Occurrences as of {reference.isoformat()}")
    _echo_section("Overdue", groups.overdue, suppliers)
    _echo_section("Upcoming", groups.upcoming, suppliers)
    if not hide_paid:
        _echo_section("Paid", groups.paid, suppliers, paid=True)


def register_commands(cli):
    """Register dues command with main CLI."""
    cli.add_command(show_dues)
