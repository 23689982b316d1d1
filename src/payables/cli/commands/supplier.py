"""Supplier management commands."""

import click
from payables.cli.error_handling import handle_domain_error
from payables.cli.supplier_resolution import resolve_supplier_or_exit
from payables.domain.supplier import SupplierService


@click.group()
def supplier_group():
    """Manage suppliers."""
    pass


@supplier_group.command("create")
@click.argument("name", metavar="SUPPLIER_NAME")
@click.option("--tax-id", help="CPF/CNPJ of the supplier")
@click.option("--email", "invoice_by_email", is_flag=True, help="Invoices arrive by e-mail")
@click.option("--portal", "invoice_by_portal", is_flag=True, help="Invoices are fetched from a portal")
@click.option("--portal-url", help="Supplier portal address (with --portal)")
@click.option("--notes", help="Free-text notes")
@click.pass_context
def create_supplier(
    ctx,
    name: str,
    tax_id: str | None,
    invoice_by_email: bool,
    invoice_by_portal: bool,
    portal_url: str | None,
    notes: str | None,
):
    """Create a new supplier.

    Examples:
        payables supplier create "Energia SA"
        payables supplier create "Telecom" --tax-id 00.000.000/0001-00 --portal --portal-url https://portal.example.com
    """
    service = SupplierService(ctx.obj["db"])
    tenant = ctx.obj["tenant"]

    try:
        supplier_id = service.create_supplier(
            tenant,
            name=name,
            tax_id=tax_id,
            invoice_by_email=invoice_by_email,
            invoice_by_portal=invoice_by_portal,
            portal_url=portal_url,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created supplier '{name.strip()}' (ID: {supplier_id})")
    if portal_url and not invoice_by_portal:
        click.echo("Portal URL ignored (use --portal to keep it)")


@supplier_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive suppliers")
@click.pass_context
def list_suppliers(ctx, active_only: bool):
    """List suppliers."""
    service = SupplierService(ctx.obj["db"])

    suppliers = service.list_suppliers(ctx.obj["tenant"], include_inactive=not active_only)
    if not suppliers:
        click.echo("No suppliers found.")
        return

    click.echo("\nSuppliers:")
    click.echo("-" * 70)
    for sup in suppliers:
        channels = []
        if sup.invoice_by_email:
            channels.append("e-mail")
        if sup.invoice_by_portal:
            channels.append("portal")
        status = "active" if sup.active else "inactive"
        click.echo(
            f"ID: {sup.id:3d} | {sup.name:25s} | {status:8s} | "
            f"Invoices: {', '.join(channels) or '-'}"
        )


@supplier_group.command("edit")
@click.argument("supplier", metavar="SUPPLIER")
@click.option("--name", help="New supplier name")
@click.option("--tax-id", help="New CPF/CNPJ (empty string clears it)")
@click.option("--email/--no-email", "invoice_by_email", default=None, help="Invoices arrive by e-mail")
@click.option("--portal/--no-portal", "invoice_by_portal", default=None, help="Invoices are fetched from a portal")
@click.option("--portal-url", help="New portal address (empty string clears it)")
@click.option("--notes", help="New notes (empty string clears them)")
@click.pass_context
def edit_supplier(
    ctx,
    supplier: str,
    name: str | None,
    tax_id: str | None,
    invoice_by_email: bool | None,
    invoice_by_portal: bool | None,
    portal_url: str | None,
    notes: str | None,
):
    """Edit a supplier.

    SUPPLIER can be a supplier name or ID.

    Examples:
        payables supplier edit "Energia SA" --name "Energia S.A."
        payables supplier edit 3 --no-portal
    """
    service = SupplierService(ctx.obj["db"])
    tenant = ctx.obj["tenant"]
    supplier_id = resolve_supplier_or_exit(ctx, service, tenant, supplier)

    changes = {}
    if tax_id is not None:
        changes["tax_id"] = tax_id
    if portal_url is not None:
        changes["portal_url"] = portal_url
    if notes is not None:
        changes["notes"] = notes

    try:
        service.update_supplier(
            tenant,
            supplier_id,
            name=name,
            invoice_by_email=invoice_by_email,
            invoice_by_portal=invoice_by_portal,
            **changes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated supplier {supplier_id}")


def _set_active(ctx, supplier: str, active: bool) -> None:
    service = SupplierService(ctx.obj["db"])
    tenant = ctx.obj["tenant"]
    supplier_id = resolve_supplier_or_exit(ctx, service, tenant, supplier)
    try:
        service.set_active(tenant, supplier_id, active)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Supplier {supplier_id} is now {'active' if active else 'inactive'}")


@supplier_group.command("activate")
@click.argument("supplier", metavar="SUPPLIER")
@click.pass_context
def activate_supplier(ctx, supplier: str):
    """Mark a supplier as active."""
    _set_active(ctx, supplier, True)


@supplier_group.command("deactivate")
@click.argument("supplier", metavar="SUPPLIER")
@click.pass_context
def deactivate_supplier(ctx, supplier: str):
    """Mark a supplier as inactive.

    Its accounts and payment history are kept.
    """
    _set_active(ctx, supplier, False)


def register_commands(cli):
    """Register supplier commands with main CLI."""
    cli.add_command(supplier_group, name="supplier")
