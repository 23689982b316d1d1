"""Tests for settlement recording, payment history and occurrence listing."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from payables.domain.entities import CostCenterAllocation, CostCenterShare, OccurrenceStatus
from payables.domain.errors import ConflictError, NotFoundError, ValidationError
from payables.domain.payment import allocate_cost_centers

TENANT = "acme"
OTHER_TENANT = "globex"


def _pay(payment_service, account_id, period, **overrides):
    fields = dict(
        account_id=account_id,
        period=period,
        invoice_numbers=["NF-100"],
        recipient="Finance",
        paid_date=date(2024, 2, 12),
    )
    fields.update(overrides)
    return payment_service.record_payment(TENANT, **fields)


class TestAllocateCostCenters:
    """Tests for splitting an amount across cost centers."""

    def test_simple_split(self):
        allocations = allocate_cost_centers(
            Decimal("1000.00"),
            [
                CostCenterShare(code="ADM", percent=Decimal("60")),
                CostCenterShare(code="OPS", percent=Decimal("40")),
            ],
        )
        assert allocations == (
            CostCenterAllocation(code="ADM", percent=Decimal("60"), value=Decimal("600.00")),
            CostCenterAllocation(code="OPS", percent=Decimal("40"), value=Decimal("400.00")),
        )

    def test_last_share_absorbs_rounding(self):
        allocations = allocate_cost_centers(
            Decimal("100.00"),
            [
                CostCenterShare(code="A", percent=Decimal("33.33")),
                CostCenterShare(code="B", percent=Decimal("33.33")),
                CostCenterShare(code="C", percent=Decimal("33.34")),
            ],
        )
        assert [a.value for a in allocations] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        assert sum(a.value for a in allocations) == Decimal("100.00")

    def test_leftover_cent_goes_to_earlier_share_on_tie(self):
        allocations = allocate_cost_centers(
            Decimal("0.05"),
            [
                CostCenterShare(code="A", percent=Decimal("50")),
                CostCenterShare(code="B", percent=Decimal("50")),
            ],
        )
        assert [a.value for a in allocations] == [Decimal("0.03"), Decimal("0.02")]

    def test_leftover_cent_goes_to_largest_remainder(self):
        allocations = allocate_cost_centers(
            Decimal("1.00"),
            [
                CostCenterShare(code="A", percent=Decimal("33.2")),
                CostCenterShare(code="B", percent=Decimal("33.3")),
                CostCenterShare(code="C", percent=Decimal("33.5")),
            ],
        )
        assert [a.value for a in allocations] == [Decimal("0.33"), Decimal("0.33"), Decimal("0.34")]

    def test_small_amount_never_goes_negative(self):
        allocations = allocate_cost_centers(
            Decimal("0.02"),
            [CostCenterShare(code=code, percent=Decimal("25")) for code in ("A", "B", "C", "D")],
        )
        assert [a.value for a in allocations] == [
            Decimal("0.01"),
            Decimal("0.01"),
            Decimal("0.00"),
            Decimal("0.00"),
        ]
        assert all(a.value >= 0 for a in allocations)
        assert sum(a.value for a in allocations) == Decimal("0.02")

    def test_no_shares(self):
        assert allocate_cost_centers(Decimal("10.00"), []) == ()


class TestRecordPayment:
    """Tests for recording settlements."""

    def test_record_payment(self, payment_service, sample_account):
        payment_id = _pay(payment_service, sample_account.id, "2024-02", invoice_numbers=[" NF-100 ", "", "NF-101"])

        record = payment_service.get_payment(TENANT, payment_id)
        assert record.account_id == sample_account.id
        assert record.paid_month == "2024-02"
        assert record.paid_date == date(2024, 2, 12)
        assert record.invoice_numbers == ("NF-100", "NF-101")
        assert record.recipient == "Finance"
        assert record.amount == Decimal("1000.00")
        assert [(cc.code, cc.value) for cc in record.cost_centers_snapshot] == [
            ("ADM", Decimal("600.00")),
            ("OPS", Decimal("400.00")),
        ]

    def test_period_is_normalized(self, payment_service, sample_account):
        payment_id = _pay(payment_service, sample_account.id, "2024-2")
        assert payment_service.get_payment(TENANT, payment_id).paid_month == "2024-02"

    def test_second_payment_for_same_period_conflicts(self, payment_service, sample_account):
        _pay(payment_service, sample_account.id, "2024-02")

        with pytest.raises(ConflictError, match="already paid"):
            _pay(payment_service, sample_account.id, "2024-02", invoice_numbers=["NF-200"])

        assert len(payment_service.list_payments(TENANT, account_id=sample_account.id)) == 1

    def test_store_unique_constraint_conflicts(self, temp_db, sample_account):
        temp_db.create_payment_record(
            tenant_id=TENANT,
            account_id=sample_account.id,
            paid_month="2024-02",
            paid_date=date(2024, 2, 12),
            invoice_numbers=["NF-1"],
            recipient="Finance",
            amount=Decimal("1000.00"),
        )

        with pytest.raises(ConflictError):
            temp_db.create_payment_record(
                tenant_id=TENANT,
                account_id=sample_account.id,
                paid_month="2024-02",
                paid_date=date(2024, 2, 13),
                invoice_numbers=["NF-2"],
                recipient="Finance",
                amount=Decimal("1000.00"),
            )

        # The session is usable after the rollback
        assert len(temp_db.list_payment_records(TENANT)) == 1

    def test_other_periods_are_independent(self, payment_service, sample_account):
        _pay(payment_service, sample_account.id, "2024-01")
        _pay(payment_service, sample_account.id, "2024-02")
        assert len(payment_service.list_payments(TENANT)) == 2

    def test_custom_cost_centers(self, payment_service, sample_account):
        payment_id = _pay(
            payment_service,
            sample_account.id,
            "2024-02",
            cost_centers=[CostCenterShare(code="FIN", percent=Decimal("100"))],
        )
        snapshot = payment_service.get_payment(TENANT, payment_id).cost_centers_snapshot
        assert snapshot == (CostCenterAllocation(code="FIN", percent=Decimal("100"), value=Decimal("1000.00")),)

    def test_custom_cost_centers_are_validated(self, payment_service, sample_account):
        with pytest.raises(ValidationError):
            _pay(
                payment_service,
                sample_account.id,
                "2024-02",
                cost_centers=[CostCenterShare(code="FIN", percent=Decimal("90"))],
            )

    def test_snapshot_survives_account_edit(self, payment_service, account_service, sample_account):
        payment_id = _pay(payment_service, sample_account.id, "2024-02")

        account_service.update_account(
            TENANT,
            sample_account.id,
            amount=Decimal("2000.00"),
            cost_centers=[CostCenterShare(code="NEW", percent=Decimal("100"))],
        )

        record = payment_service.get_payment(TENANT, payment_id)
        assert record.amount == Decimal("1000.00")
        assert [cc.code for cc in record.cost_centers_snapshot] == ["ADM", "OPS"]
        assert sum(cc.value for cc in record.cost_centers_snapshot) == Decimal("1000.00")

    @pytest.mark.parametrize("period", ["2023-12", "2024-13", "Feb 2024", ""])
    def test_rejects_invalid_period(self, payment_service, sample_account, period):
        with pytest.raises(ValidationError):
            _pay(payment_service, sample_account.id, period)

    def test_rejects_period_after_end_date(self, payment_service, account_service, sample_account):
        account_service.end_account(TENANT, sample_account.id, date(2024, 3, 15))
        with pytest.raises(ValidationError, match="outside the recurrence"):
            _pay(payment_service, sample_account.id, "2024-04")

    def test_requires_invoice_number(self, payment_service, sample_account):
        with pytest.raises(ValidationError, match="invoice number"):
            _pay(payment_service, sample_account.id, "2024-02", invoice_numbers=["", "  "])

    def test_requires_recipient(self, payment_service, sample_account):
        with pytest.raises(ValidationError, match="Recipient"):
            _pay(payment_service, sample_account.id, "2024-02", recipient="  ")

    def test_unknown_account(self, payment_service):
        with pytest.raises(NotFoundError):
            _pay(payment_service, 999, "2024-02")

    def test_other_tenant_cannot_settle(self, payment_service, sample_account):
        with pytest.raises(NotFoundError):
            payment_service.record_payment(
                OTHER_TENANT,
                account_id=sample_account.id,
                period="2024-02",
                invoice_numbers=["NF-1"],
                recipient="Finance",
                paid_date=date(2024, 2, 12),
            )


class TestHistory:
    """Tests for payment history queries."""

    @pytest.fixture
    def history_data(self, supplier_service, account_service, payment_service, sample_account):
        water_id = supplier_service.create_supplier(TENANT, name="Water Co")
        rent_id = account_service.create_account(
            TENANT,
            supplier_id=water_id,
            description="Office rent",
            amount=Decimal("3000.00"),
            issue_day=25,
            due_day=10,
            created_at=datetime(2024, 1, 1),
        )
        _pay(payment_service, sample_account.id, "2024-01", paid_date=date(2024, 1, 9), invoice_numbers=["NF-1"])
        _pay(payment_service, sample_account.id, "2024-02", paid_date=date(2024, 2, 8), invoice_numbers=["NF-2"])
        _pay(
            payment_service,
            rent_id,
            "2024-01",
            paid_date=date(2024, 2, 5),
            invoice_numbers=["RENT-77"],
            recipient="Landlord",
        )
        return {"water_id": water_id, "rent_id": rent_id, "electricity_id": sample_account.id}

    def test_lists_most_recent_first(self, payment_service, history_data):
        entries = payment_service.list_history(TENANT)

        assert [e.paid_date for e in entries] == [date(2024, 2, 8), date(2024, 2, 5), date(2024, 1, 9)]
        first = entries[0]
        assert first.supplier_name == "Energia SA"
        assert first.description == "Electricity"
        assert first.paid_month == "2024-02"
        assert first.due_date == date(2024, 2, 10)
        assert first.amount == Decimal("1000.00")
        assert len(first.cost_centers_snapshot) == 2

    def test_due_date_rolls_over(self, payment_service, history_data):
        entries = payment_service.list_history(TENANT, supplier_id=history_data["water_id"])

        assert len(entries) == 1
        assert entries[0].due_date == date(2024, 2, 10)

    def test_filter_by_supplier(self, payment_service, history_data, sample_supplier):
        entries = payment_service.list_history(TENANT, supplier_id=sample_supplier.id)
        assert {e.account_id for e in entries} == {history_data["electricity_id"]}

    def test_filter_by_paid_date(self, payment_service, history_data):
        entries = payment_service.list_history(TENANT, paid_start=date(2024, 2, 1), paid_end=date(2024, 2, 6))
        assert [e.invoice_numbers for e in entries] == [("RENT-77",)]

    def test_filter_by_due_date(self, payment_service, history_data):
        entries = payment_service.list_history(TENANT, due_start=date(2024, 2, 1), due_end=date(2024, 2, 28))
        assert sorted(e.invoice_numbers[0] for e in entries) == ["NF-2", "RENT-77"]

    @pytest.mark.parametrize(
        "search, expected",
        [
            ("rent-77", ["RENT-77"]),
            ("landlord", ["RENT-77"]),
            ("water", ["RENT-77"]),
            ("ELECTRIC", ["NF-2", "NF-1"]),
            ("finance", ["NF-2", "NF-1"]),
            ("nothing", []),
        ],
    )
    def test_search(self, payment_service, history_data, search, expected):
        entries = payment_service.list_history(TENANT, search=search)
        assert [e.invoice_numbers[0] for e in entries] == expected

    def test_history_keeps_snapshot_after_edit(self, payment_service, account_service, history_data):
        account_service.update_account(
            TENANT,
            history_data["electricity_id"],
            cost_centers=[CostCenterShare(code="NEW", percent=Decimal("100"))],
        )

        entries = payment_service.list_history(TENANT, search="NF-1")
        assert [cc.code for cc in entries[0].cost_centers_snapshot] == ["ADM", "OPS"]

    def test_other_tenant_sees_nothing(self, payment_service, history_data):
        assert payment_service.list_history(OTHER_TENANT) == []


class TestOccurrenceService:
    """Tests for listing occurrences from stored data."""

    def test_paid_period_is_reported(self, occurrence_service, payment_service, sample_account):
        _pay(payment_service, sample_account.id, "2024-02", invoice_numbers=["NF-100"])

        groups = occurrence_service.list_occurrences(TENANT, date(2024, 3, 20))

        assert [o.period for o in groups.overdue] == ["2024-01", "2024-03"]
        assert groups.upcoming == ()
        assert len(groups.paid) == 1
        paid = groups.paid[0]
        assert paid.period == "2024-02"
        assert paid.invoice_numbers == ("NF-100",)
        assert paid.status is OccurrenceStatus.PAID

    def test_current_month_before_issue_day_is_upcoming(self, occurrence_service, sample_account):
        groups = occurrence_service.list_occurrences(TENANT, date(2024, 3, 2))

        assert [o.period for o in groups.overdue] == ["2024-01", "2024-02"]
        assert [o.period for o in groups.upcoming] == ["2024-03"]

    def test_ended_account_stops(self, occurrence_service, account_service, sample_account):
        account_service.end_account(TENANT, sample_account.id, date(2024, 2, 1))

        groups = occurrence_service.list_occurrences(TENANT, date(2024, 12, 1))

        assert [o.period for o in groups.overdue] == ["2024-01", "2024-02"]

    def test_other_tenant_sees_nothing(self, occurrence_service, sample_account):
        assert len(occurrence_service.list_occurrences(OTHER_TENANT, date(2024, 3, 2))) == 0
