"""
Module: ledger_kernel.db.base
Responsibility: Declarative base classes for the ledger's SQLAlchemy ORM
    models.  Provides the string primary key convention, the type annotation
    map for consistent column types, and the TrackedBase timestamp mixin.
Architecture position: Kernel > DB.  Lowest-level import target within the
    persistence adapter.  MUST NOT import from models/, selectors/, or outer
    layers.

Invariants enforced:
    - String primary keys: records arrive from a document store whose ids are
      opaque strings, so ``id`` is String(64) and supplied by the caller.
    - Decimal precision: type_annotation_map maps Python Decimal to
      Numeric(38, 9).  NEVER use float for monetary amounts.
    - Timestamps: TrackedBase provides created_at and updated_at; they order
      records deterministically when loaded back into a snapshot.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import Date, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all ledger models.

    Guarantees:
        - id is a caller-supplied String(64) primary key.
        - Decimal maps to Numeric(38, 9).
        - datetime maps to DateTime(timezone=True); date maps to Date.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        date: Date,
    }

    id: Mapped[str] = mapped_column(String(64), primary_key=True)


class TrackedBase(Base):
    """
    Abstract base with row timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set on INSERT and refreshed on every UPDATE.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
