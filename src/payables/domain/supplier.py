"""Supplier domain service."""

import logging
from typing import Optional

from payables.database.base import Database
from payables.domain.entities import Supplier as SupplierEntity
from payables.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_supplier_name,
    supplier_not_found,
)

logger = logging.getLogger(__name__)

_UNSET = object()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SupplierService:
    """Service for managing suppliers."""

    def __init__(self, db: Database):
        """Initialize supplier service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_name(self, tenant_id: str, name: str, supplier_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Supplier name is required")
        existing = self.db.get_supplier_by_name(tenant_id, name)
        if existing is not None and existing.id != supplier_id:
            raise ConflictError(duplicate_supplier_name(name))
        return name

    def create_supplier(
        self,
        tenant_id: str,
        name: str,
        tax_id: Optional[str] = None,
        invoice_by_email: bool = False,
        invoice_by_portal: bool = False,
        portal_url: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a new supplier.

        Args:
            tenant_id: Tenant key
            name: Supplier name
            tax_id: Optional CPF/CNPJ
            invoice_by_email: Invoices arrive by e-mail
            invoice_by_portal: Invoices are fetched from a supplier portal
            portal_url: Portal address, only kept when invoice_by_portal is set
            notes: Optional free-text notes

        Returns:
            Supplier ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If a supplier with the same name exists in the tenant
        """
        name = self._check_name(tenant_id, name)
        supplier_id = self.db.create_supplier(
            tenant_id=tenant_id,
            name=name,
            tax_id=_clean(tax_id),
            invoice_by_email=invoice_by_email,
            invoice_by_portal=invoice_by_portal,
            portal_url=_clean(portal_url) if invoice_by_portal else None,
            notes=_clean(notes),
        )
        logger.info("Created supplier %s '%s' for tenant %s", supplier_id, name, tenant_id)
        return supplier_id

    def get_supplier(self, tenant_id: str, supplier_id: int) -> Optional[SupplierEntity]:
        """Get supplier by ID, or None if not found."""
        return self.db.get_supplier(tenant_id, supplier_id)

    def get_supplier_by_name(self, tenant_id: str, name: str) -> Optional[SupplierEntity]:
        """Get supplier by exact name, or None if not found."""
        return self.db.get_supplier_by_name(tenant_id, name)

    def list_suppliers(self, tenant_id: str, include_inactive: bool = True) -> list[SupplierEntity]:
        """List suppliers ordered by name."""
        return self.db.list_suppliers(tenant_id, include_inactive=include_inactive)

    def update_supplier(
        self,
        tenant_id: str,
        supplier_id: int,
        name: Optional[str] = None,
        tax_id=_UNSET,
        invoice_by_email: Optional[bool] = None,
        invoice_by_portal: Optional[bool] = None,
        portal_url=_UNSET,
        notes=_UNSET,
    ) -> None:
        """Update supplier fields.

        Arguments left out keep their current value. Optional text fields
        (tax_id, portal_url, notes) are cleared by passing None.

        Raises:
            NotFoundError: If supplier doesn't exist
            ValidationError: If the new name is blank
            ConflictError: If the new name is taken
        """
        supplier = self.db.get_supplier(tenant_id, supplier_id)
        if supplier is None:
            raise NotFoundError(supplier_not_found(supplier_id))

        new_name = supplier.name if name is None else self._check_name(tenant_id, name, supplier_id)
        by_portal = supplier.invoice_by_portal if invoice_by_portal is None else invoice_by_portal
        url = supplier.portal_url if portal_url is _UNSET else _clean(portal_url)

        self.db.update_supplier(
            tenant_id,
            supplier_id,
            name=new_name,
            tax_id=supplier.tax_id if tax_id is _UNSET else _clean(tax_id),
            invoice_by_email=supplier.invoice_by_email if invoice_by_email is None else invoice_by_email,
            invoice_by_portal=by_portal,
            portal_url=url if by_portal else None,
            notes=supplier.notes if notes is _UNSET else _clean(notes),
            active=supplier.active,
        )
        logger.info("Updated supplier %s for tenant %s", supplier_id, tenant_id)

    def set_active(self, tenant_id: str, supplier_id: int, active: bool) -> None:
        """Activate or deactivate a supplier.

        Inactive suppliers keep their accounts and history; they are only
        hidden from supplier pickers.
        """
        supplier = self.db.get_supplier(tenant_id, supplier_id)
        if supplier is None:
            raise NotFoundError(supplier_not_found(supplier_id))
        if supplier.active == active:
            return

        self.db.update_supplier(
            tenant_id,
            supplier_id,
            name=supplier.name,
            tax_id=supplier.tax_id,
            invoice_by_email=supplier.invoice_by_email,
            invoice_by_portal=supplier.invoice_by_portal,
            portal_url=supplier.portal_url,
            notes=supplier.notes,
            active=active,
        )
        logger.info(
            "%s supplier %s for tenant %s",
            "Activated" if active else "Deactivated",
            supplier_id,
            tenant_id,
        )
