"""Church model: the tenant root."""

from sqlalchemy import String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from churchapp.models.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from churchapp.models.branch import Branch


class Church(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    A church and its branches form one tenant. Every member, permission
    grant and tenant-scoped resource resolves to exactly one church.

    created_by_user_id is unique: church creation is idempotent per
    founding user.
    """

    __tablename__ = "churches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by_user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        unique=True,
    )

    # Relationships
    branches: Mapped[list["Branch"]] = relationship(
        "Branch",
        back_populates="church",
        cascade="all, delete-orphan",
        order_by="Branch.created_at",
    )

    @property
    def main_branch(self) -> "Branch | None":
        return next((b for b in self.branches if b.is_main_branch), None)

    def __repr__(self) -> str:
        return f"<Church(id={self.id}, name='{self.name}')>"
