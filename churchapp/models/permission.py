from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from churchapp.models.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from churchapp.models.member import Member


class Permission(Base, TimestampMixin):
    """
    Permission grant held by a member.

    Rows are created and deleted, never updated in place.
    """

    __tablename__ = "permissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    member: Mapped["Member"] = relationship("Member", back_populates="permissions")

    __table_args__ = (
        UniqueConstraint("member_id", "type", name="uq_permission_member_type"),
    )

    def __repr__(self) -> str:
        return f"<Permission(member_id={self.member_id}, type='{self.type}')>"
