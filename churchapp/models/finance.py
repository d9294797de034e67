from datetime import date
from enum import Enum as PyEnum
from sqlalchemy import String, Numeric, ForeignKey, Date, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column
from churchapp.models.base import Base, TimestampMixin, generate_id


class FinanceType(str, PyEnum):
    """Direction of a finance entry"""

    ENTRY = "ENTRY"
    EXIT = "EXIT"


class FinanceEntry(Base, TimestampMixin):
    """
    Income or expense recorded for a branch.

    Amount is always positive; the direction comes from `type`.
    """

    __tablename__ = "finance_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Tenant filter
    )
    branch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_by_member_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    type: Mapped[FinanceType] = mapped_column(Enum(FinanceType, native_enum=False), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("ix_finance_entries_church_branch", "church_id", "branch_id"),
    )
