"""
Onboarding state classification and progress tracking.

State is derived, never stored:
- NEW: user without a Member
- PENDING: Member exists, progress not completed
- COMPLETE: Member exists and progress.completed
"""

from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import ValidationException
from churchapp.core.logging import get_logger
from churchapp.models.base import utcnow
from churchapp.models.onboarding_progress import OnboardingProgress
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.branch_repository import BranchRepository
from churchapp.repositories.church_repository import ChurchRepository
from churchapp.repositories.member_repository import MemberRepository
from churchapp.repositories.onboarding_progress_repository import OnboardingProgressRepository
from churchapp.schemas.onboarding_schemas import OnboardingStatus
from churchapp.services.token_service import TokenService

logger = get_logger(__name__)

STEP_FIELDS = {
    "church": "church_configured",
    "branches": "branches_configured",
    "settings": "settings_configured",
}


def classify(has_member: bool, progress: OnboardingProgress | None) -> OnboardingStatus:
    if not has_member:
        return OnboardingStatus.NEW
    if progress is not None and progress.completed:
        return OnboardingStatus.COMPLETE
    return OnboardingStatus.PENDING


class OnboardingService:
    """Service layer for onboarding endpoints (incomplete contexts accepted)"""

    def __init__(self, db: Session):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.church_repo = ChurchRepository(db)
        self.branch_repo = BranchRepository(db)
        self.progress_repo = OnboardingProgressRepository(db)
        self.tokens = TokenService(db)

    def get_state(self, context: TenantContext) -> dict:
        """
        Classify the caller's onboarding state.

        Looks the membership up in the store rather than trusting token
        claims, so a stale "user" token still reports PENDING/COMPLETE.

        Returns:
            Dict with status plus church/branch/member payloads when present
        """
        access.authorize(context, requires_tenant=False)

        member = self.member_repo.get_by_user(context.user_id)
        progress = self.progress_repo.get_by_user(context.user_id)
        state: dict = {"status": classify(member is not None, progress)}
        if member is None:
            return state

        church = self.church_repo.get_by_id(member.church_id)
        branch = self.branch_repo.get_by_id(member.branch_id)
        state["church"] = {"id": church.id, "name": church.name, "address": church.address}
        state["branch"] = {"id": branch.id, "name": branch.name}
        state["member"] = {"id": member.id, "role": member.role, "branch_id": member.branch_id}
        return state

    def get_progress(self, context: TenantContext) -> OnboardingProgress:
        access.authorize(context, requires_tenant=False)
        return self.progress_repo.get_or_create(context.user_id)

    def mark_step_complete(self, step: str, context: TenantContext) -> OnboardingProgress:
        """
        Mark one checklist step as done.

        Raises:
            ValidationException: If step is not church, branches or settings
        """
        access.authorize(context, requires_tenant=False)
        field = STEP_FIELDS.get(step)
        if field is None:
            raise ValidationException(f"Invalid step: {step}. Use: church, branches or settings")

        progress = self.progress_repo.get_or_create(context.user_id)
        setattr(progress, field, True)
        return self.progress_repo.update(progress)

    def complete(self, context: TenantContext) -> tuple[OnboardingProgress, str]:
        """
        Mark onboarding as completed and re-issue the caller's token.

        Returns:
            (progress, fresh token with onboardingCompleted=true)
        """
        access.authorize(context, requires_tenant=False)
        progress = self.progress_repo.get_or_create(context.user_id)
        if not progress.completed:
            progress.completed = True
            progress.completed_at = utcnow()
            progress = self.progress_repo.update(progress)
            logger.info("Onboarding completed", user_id=context.user_id)

        return progress, self.tokens.issue_for_user_id(context.user_id)
