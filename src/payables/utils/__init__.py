"""Utility functions for payables."""

from payables.utils.date_parser import parse_date, parse_period
from payables.utils.amount_parser import parse_amount, parse_cost_center
from payables.utils.supplier_resolver import resolve_supplier

__all__ = ["parse_date", "parse_period", "parse_amount", "parse_cost_center", "resolve_supplier"]
