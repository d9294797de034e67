"""Branch model: sub-tenant unit inside a church."""

from sqlalchemy import String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from churchapp.models.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from churchapp.models.church import Church
    from churchapp.models.member import Member


class Branch(Base, TimestampMixin):
    """
    A congregation of a church. Exactly one branch per church is the main
    branch, created together with the church.
    """

    __tablename__ = "branches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    church_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_main_branch: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="branches")
    members: Mapped[list["Member"]] = relationship("Member", back_populates="branch")

    def __repr__(self) -> str:
        return f"<Branch(id={self.id}, church_id={self.church_id}, main={self.is_main_branch})>"
