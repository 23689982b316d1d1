"""CLI helpers for supplier resolution."""

from __future__ import annotations

import click
from payables.cli.error_handling import handle_domain_error
from payables.domain.supplier import SupplierService
from payables.utils.supplier_resolver import resolve_supplier


def resolve_supplier_or_exit(
    ctx: click.Context, supplier_service: SupplierService, tenant_id: str, supplier: str | int
) -> int:
    """Resolve supplier name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_supplier(supplier_service, tenant_id, supplier)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
