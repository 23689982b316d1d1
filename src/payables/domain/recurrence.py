"""Recurrence expansion for monthly supplier invoices.

An account defines a recurrence by nominal day-of-month for issuance and due
date. ``expand`` turns a tenant's accounts and payment records into the list
of monthly occurrences that should currently be visible, each labelled
overdue, upcoming or paid.

Everything in this module is pure: no I/O, no clock reads. ``as_of`` is always
passed in by the caller.
"""

import calendar
import logging
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Sequence

from dateutil.relativedelta import relativedelta

from payables.domain.entities import (
    Account,
    Occurrence,
    OccurrenceGroups,
    OccurrenceStatus,
    PaymentRecord,
)

logger = logging.getLogger(__name__)

Month = tuple[int, int]


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a calendar month (month is 1-12)."""
    return calendar.monthrange(year, month)[1]


def _clamped(year: int, month: int, day: int) -> date:
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def compute_issue_date(year: int, month: int, issue_day: int) -> date:
    """Return the issue date of the occurrence for ``year``/``month``.

    ``issue_day`` is clamped to the length of the month, so day 31 in
    February gives the 28th (29th in leap years).
    """
    return _clamped(year, month, issue_day)


def compute_due_date(year: int, month: int, due_day: int, issue_day: int) -> date:
    """Return the due date of the occurrence for ``year``/``month``.

    When ``issue_day`` is greater than ``due_day`` the invoice is due in the
    following calendar month. Equal days stay in the same month. The due day
    is clamped to the length of the target month.
    """
    if issue_day > due_day:
        target = date(year, month, 1) + relativedelta(months=1)
        return _clamped(target.year, target.month, due_day)
    return _clamped(year, month, due_day)


def period_key(value: date | Month) -> str:
    """Return the ``YYYY-MM`` period key for a date or (year, month) pair."""
    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}"
    year, month = value
    return f"{year:04d}-{month:02d}"


def month_of(value: date | datetime) -> Month:
    return (value.year, value.month)


def iter_months(start: Month, end: Month) -> Iterator[Month]:
    """Yield (year, month) pairs from ``start`` to ``end`` inclusive."""
    current = date(start[0], start[1], 1)
    last = date(end[0], end[1], 1)
    while current <= last:
        yield (current.year, current.month)
        current += relativedelta(months=1)


def recurrence_window(account: Account, as_of: date) -> Optional[tuple[Month, Month]]:
    """Return the first and last month an account recurs in, up to ``as_of``.

    Returns None when the account's end date falls before the month it was
    created in.
    """
    start = month_of(account.created_at)
    end = month_of(as_of)
    if account.end_date is not None:
        end = min(end, month_of(account.end_date))
    if end < start:
        return None
    return start, end


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def classify(is_paid: bool, issue_date: date | datetime, as_of: date | datetime) -> OccurrenceStatus:
    """Return the presentation group of an occurrence.

    Unpaid occurrences issued strictly before ``as_of`` are overdue; times of
    day are ignored.
    """
    if is_paid:
        return OccurrenceStatus.PAID
    if _as_date(issue_date) < _as_date(as_of):
        return OccurrenceStatus.OVERDUE
    return OccurrenceStatus.UPCOMING


def _expand_account(
    account: Account,
    paid: dict[tuple[int, str], PaymentRecord],
    as_of: date,
    seen: set[tuple[int, str]],
) -> list[Occurrence]:
    window = recurrence_window(account, as_of)
    if window is None:
        return []

    current_month = month_of(as_of)
    occurrences = []
    for year, month in iter_months(*window):
        issue_date = compute_issue_date(year, month, account.issue_day)
        due_date = compute_due_date(year, month, account.due_day, account.issue_day)

        # Earlier months only once issued; the current month is always shown.
        if not (issue_date <= as_of or (year, month) == current_month):
            continue

        period = period_key(issue_date)
        key = (account.id, period)
        if key in seen:
            continue
        seen.add(key)

        record = paid.get(key)
        if record is None:
            occurrences.append(
                Occurrence(
                    account_id=account.id,
                    supplier_id=account.supplier_id,
                    description=account.description,
                    period=period,
                    issue_date=issue_date,
                    due_date=due_date,
                    amount=account.amount,
                    is_paid=False,
                    status=classify(False, issue_date, as_of),
                )
            )
        else:
            occurrences.append(
                Occurrence(
                    account_id=account.id,
                    supplier_id=account.supplier_id,
                    description=account.description,
                    period=period,
                    issue_date=issue_date,
                    due_date=due_date,
                    amount=account.amount,
                    is_paid=True,
                    status=OccurrenceStatus.PAID,
                    invoice_numbers=tuple(record.invoice_numbers),
                    recipient=record.recipient,
                    paid_date=record.paid_date,
                    payment_id=record.id,
                )
            )
    return occurrences


def sort_occurrences(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Order occurrences as overdue, upcoming, then paid.

    Overdue and upcoming ascend by issue date. Paid descend by period, ties
    ascending by issue date. Sorting is stable, so remaining ties keep input
    order.
    """
    items = list(occurrences)
    overdue = sorted(
        (o for o in items if o.status is OccurrenceStatus.OVERDUE),
        key=lambda o: o.issue_date,
    )
    upcoming = sorted(
        (o for o in items if o.status is OccurrenceStatus.UPCOMING),
        key=lambda o: o.issue_date,
    )
    paid = sorted(
        sorted(
            (o for o in items if o.status is OccurrenceStatus.PAID),
            key=lambda o: o.issue_date,
        ),
        key=lambda o: o.period,
        reverse=True,
    )
    return overdue + upcoming + paid


def expand(
    accounts: Sequence[Account],
    payments: Sequence[PaymentRecord],
    as_of: date | datetime,
) -> list[Occurrence]:
    """Expand account recurrences into the occurrences visible on ``as_of``.

    Args:
        accounts: Tenant-scoped account definitions
        payments: Tenant-scoped payment records
        as_of: Reference date (a datetime is truncated to its date)

    Returns:
        Occurrences ordered as described in ``sort_occurrences``, with no two
        sharing the same (account_id, period).
    """
    as_of = _as_date(as_of)
    paid = {(p.account_id, p.paid_month): p for p in payments}

    seen: set[tuple[int, str]] = set()
    occurrences: list[Occurrence] = []
    for account in accounts:
        occurrences.extend(_expand_account(account, paid, as_of, seen))

    result = sort_occurrences(occurrences)
    logger.debug(
        "Expanded %d account(s) into %d occurrence(s) as of %s",
        len(accounts),
        len(result),
        as_of,
    )
    return result


def group_occurrences(occurrences: Iterable[Occurrence]) -> OccurrenceGroups:
    """Split expanded occurrences into overdue, upcoming and paid sections."""
    overdue, upcoming, paid = [], [], []
    for occurrence in occurrences:
        if occurrence.status is OccurrenceStatus.OVERDUE:
            overdue.append(occurrence)
        elif occurrence.status is OccurrenceStatus.UPCOMING:
            upcoming.append(occurrence)
        else:
            paid.append(occurrence)
    return OccurrenceGroups(overdue=tuple(overdue), upcoming=tuple(upcoming), paid=tuple(paid))
