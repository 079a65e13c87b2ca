"""SQLAlchemy Core table definitions for the invoicectl database.

Two tables: ``customers`` and ``invoices``. Amounts are stored as
integer cents; dates as ``YYYY-MM-DD`` text.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("image_url", Text),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", Text, primary_key=True),
    Column("customer_id", Text, ForeignKey("customers.id"), nullable=False),
    Column("amount", Integer, nullable=False),  # cents
    Column("status", Text, nullable=False),
    Column("date", Text, nullable=False),
    CheckConstraint("amount >= 0", name="ck_invoices_amount_non_negative"),
    CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
)

Index("ix_invoices_customer", invoices.c.customer_id)
Index("ix_invoices_status", invoices.c.status)
Index("ix_invoices_date", invoices.c.date)
