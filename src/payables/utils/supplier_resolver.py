"""Utility for resolving supplier names to IDs."""

from payables.domain.errors import NotFoundError, supplier_not_found
from payables.domain.supplier import SupplierService


def resolve_supplier(supplier_service: SupplierService, tenant_id: str, supplier: str | int) -> int:
    """Resolve supplier name or ID to supplier ID.

    Args:
        supplier_service: SupplierService instance
        tenant_id: Tenant key
        supplier: Supplier name (str) or ID (int or string representation of int)

    Returns:
        Supplier ID

    Raises:
        NotFoundError: If supplier is not found in the tenant
    """
    # If it's already an integer, use it as ID
    if isinstance(supplier, int):
        if supplier_service.get_supplier(tenant_id, supplier) is None:
            raise NotFoundError(supplier_not_found(supplier))
        return supplier

    # Try to parse as integer (handles string IDs like "1")
    try:
        supplier_id = int(supplier)
    except (ValueError, TypeError):
        supplier_id = None

    if supplier_id is not None:
        if supplier_service.get_supplier(tenant_id, supplier_id) is None:
            raise NotFoundError(supplier_not_found(supplier_id))
        return supplier_id

    # Try to find by name
    found = supplier_service.get_supplier_by_name(tenant_id, supplier)
    if found is None:
        raise NotFoundError(supplier_not_found(supplier))
    return found.id
