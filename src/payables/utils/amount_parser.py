"""Amount and cost center parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from payables.domain.entities import CostCenterShare

_DOT_THOUSANDS_RE = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "R$ 123.45"
    - "$1,234.56"
    - "1.234,56" or "99,90" (comma as decimal separator when it is the
      last separator)
    - "1.500" or "R$ 1.500.000" (dot groups of exactly three digits with no
      comma are thousands separators, so write "1,5" or "1.50" for one and a half)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols and whitespace
    cleaned = re.sub(r"R\$|[$€£]", "", amount_str.strip()).strip()

    # "1.500": dots group thousands
    if "," not in cleaned and _DOT_THOUSANDS_RE.match(cleaned):
        cleaned = cleaned.replace(".", "")
    # "1.234,56": dots group thousands, comma is the decimal separator
    elif "," in cleaned and ("." not in cleaned or cleaned.rfind(",") > cleaned.rfind(".")):
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_cost_center(text: str) -> CostCenterShare:
    """Parse a ``CODE:PERCENT`` string into a cost center share.

    Examples: "ADM:60", "OPS:40.5", "1.01:25%"
    """
    code, sep, percent = text.rpartition(":")
    if not sep or not code.strip():
        raise ValueError(f"Invalid cost center '{text}': expected CODE:PERCENT")
    try:
        value = parse_amount(percent.strip().rstrip("%"))
    except ValueError:
        raise ValueError(f"Invalid cost center '{text}': percent is not a number")
    return CostCenterShare(code=code.strip(), percent=value)
