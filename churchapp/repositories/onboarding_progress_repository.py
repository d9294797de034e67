from sqlalchemy.orm import Session
from churchapp.models.onboarding_progress import OnboardingProgress


class OnboardingProgressRepository:
    """Repository for OnboardingProgress rows"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> OnboardingProgress | None:
        return (
            self.db.query(OnboardingProgress)
            .filter(OnboardingProgress.user_id == user_id)
            .first()
        )

    def get_or_create(self, user_id: str) -> OnboardingProgress:
        """
        Get a user's progress row or create an empty one.

        Users registered before progress tracking existed get a row on
        first access.
        """
        progress = self.get_by_user(user_id)

        if not progress:
            progress = OnboardingProgress(user_id=user_id)
            self.db.add(progress)
            self.db.commit()
            self.db.refresh(progress)

        return progress

    def update(self, progress: OnboardingProgress) -> OnboardingProgress:
        self.db.commit()
        self.db.refresh(progress)
        return progress
