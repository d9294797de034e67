"""Member model binding a user to one branch of one church with a role."""

from sqlalchemy import String, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from churchapp.models.base import Base, TimestampMixin, generate_id
from churchapp.models.role import Role

if TYPE_CHECKING:
    from churchapp.models.user import User
    from churchapp.models.branch import Branch
    from churchapp.models.permission import Permission


class Member(Base, TimestampMixin):
    """
    Tenant membership record.

    church_id is denormalized from the branch so tenant filters never need
    a join; the service layer keeps it equal to branch.church_id.

    Constraints:
    - user_id is unique: one membership per user
    - Unique(church_id, user_id): one membership per tenant per user
    """

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    branch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("branches.id"),
        nullable=False,
        index=True,
    )
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=Role.MEMBER,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="member")
    branch: Mapped["Branch"] = relationship("Branch", back_populates="members")
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        back_populates="member",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("church_id", "user_id", name="uq_member_church_user"),
    )

    @property
    def permission_types(self) -> list[str]:
        return sorted(p.type for p in self.permissions)

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, church_id={self.church_id}, role={self.role.value})>"
