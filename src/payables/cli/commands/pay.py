"""Record payment command."""

import click
from payables.cli.date_filters import parse_date_or_exit
from payables.cli.error_handling import handle_domain_error
from payables.domain.payment import PaymentService
from payables.utils.amount_parser import parse_cost_center


@click.command("pay")
@click.argument("account_id", type=int)
@click.option("--period", required=True, help="Settled period (YYYY-MM, or 'this month')")
@click.option(
    "--invoice",
    "invoices",
    multiple=True,
    required=True,
    help="Invoice/NF number (repeatable)",
)
@click.option("--recipient", required=True, help="Who received the invoice")
@click.option("--date", "paid_date", default="today", show_default=True, help="Payment date")
@click.option(
    "--cost-center",
    "cost_centers",
    multiple=True,
    help="Override the account's cost centers for this payment, CODE:PERCENT",
)
@click.pass_context
def record_payment(
    ctx,
    account_id: int,
    period: str,
    invoices: tuple[str, ...],
    recipient: str,
    paid_date: str,
    cost_centers: tuple[str, ...],
):
    """Mark one monthly occurrence of an account as paid.

    Each period can only be paid once.

    Examples:
        payables pay 3 --period 2024-02 --invoice NF-100 --recipient "Finance"
        payables pay 3 --period "this month" --invoice 881 --invoice 882 --recipient Ana --date yesterday
    """
    service = PaymentService(ctx.obj["db"])
    paid_on = parse_date_or_exit(ctx, paid_date, "payment date")

    shares = None
    if cost_centers:
        try:
            shares = [parse_cost_center(v) for v in cost_centers]
        except ValueError as e:
            handle_domain_error(ctx, e)

    try:
        payment_id = service.record_payment(
            ctx.obj["tenant"],
            account_id=account_id,
            period=period,
            invoice_numbers=invoices,
            recipient=recipient,
            paid_date=paid_on,
            cost_centers=shares,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    record = service.get_payment(ctx.obj["tenant"], payment_id)
    click.echo(f"Recorded payment {payment_id} for account {account_id}, period {record.paid_month}")


def register_commands(cli):
    """Register pay command with main CLI."""
    cli.add_command(record_payment)
