"""SQLAlchemy models for payables database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Supplier(Base):
    """Supplier model."""

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    tax_id = Column(String, nullable=True)
    invoice_by_email = Column(Boolean, default=False, nullable=False)
    invoice_by_portal = Column(Boolean, default=False, nullable=False)
    portal_url = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_supplier_tenant_name"),)

    # Relationships
    accounts = relationship("Account", back_populates="supplier")


class Account(Base):
    """Recurring invoice account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    issue_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    end_date = Column(Date, nullable=True)
    # Local time: the recurrence window starts in this month
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    # Relationships
    supplier = relationship("Supplier", back_populates="accounts")
    cost_centers = relationship(
        "AccountCostCenter",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="AccountCostCenter.position",
    )
    payments = relationship("PaymentRecord", back_populates="account")


class AccountCostCenter(Base):
    """Cost center share of an account, kept in entry order."""

    __tablename__ = "account_cost_centers"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    position = Column(Integer, nullable=False)
    code = Column(String, nullable=False)
    percent = Column(Numeric(5, 2), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="cost_centers")


class PaymentRecord(Base):
    """Settlement of one monthly period of an account."""

    __tablename__ = "payment_records"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String, nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    paid_month = Column(String(7), nullable=False)
    paid_date = Column(Date, nullable=False)
    invoice_numbers = Column(JSON, nullable=False)
    recipient = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    # List of {"code", "percent", "value"} with decimals stored as strings
    cost_centers_snapshot = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One settlement per account and period
    __table_args__ = (UniqueConstraint("account_id", "paid_month", name="uq_account_paid_month"),)

    # Relationships
    account = relationship("Account", back_populates="payments")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
