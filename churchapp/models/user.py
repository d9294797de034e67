from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from churchapp.models.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from churchapp.models.member import Member
    from churchapp.models.onboarding_progress import OnboardingProgress


class User(Base, TimestampMixin):
    """
    Global identity, created at registration.

    Never carries role or permissions: those live on the Member row that
    binds the user to a church. A user without a Member is still
    onboarding (token type "user").
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Relationships
    member: Mapped["Member | None"] = relationship(
        "Member", back_populates="user", uselist=False
    )
    onboarding_progress: Mapped["OnboardingProgress | None"] = relationship(
        "OnboardingProgress",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.last_name or ""]
        return " ".join(p for p in parts if p).strip() or "User"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
