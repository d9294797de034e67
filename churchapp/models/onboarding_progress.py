from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from churchapp.models.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from churchapp.models.user import User


class OnboardingProgress(Base, TimestampMixin):
    """Onboarding checklist of a user. One row per user."""

    __tablename__ = "onboarding_progress"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    church_configured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    branches_configured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    settings_configured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="onboarding_progress")
