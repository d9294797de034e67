from enum import Enum as PyEnum
from sqlalchemy import String, ForeignKey, Text, Enum, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from churchapp.models.base import Base, TimestampMixin, generate_id


class AuditAction(str, PyEnum):
    """Recorded administrative actions"""

    MEMBER_ROLE_CHANGED = "MEMBER_ROLE_CHANGED"
    MEMBER_PERMISSIONS_CHANGED = "MEMBER_PERMISSIONS_CHANGED"


class AuditLog(Base, TimestampMixin):
    """
    Who changed what inside a church.

    Actor fields are copied at write time so the row survives the actor's
    removal.
    """

    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Tenant filter
    )
    branch_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    action: Mapped[AuditAction] = mapped_column(Enum(AuditAction, native_enum=False), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_role: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    details: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)

    __table_args__ = (
        Index("ix_audit_logs_church_created", "church_id", "created_at"),
    )
