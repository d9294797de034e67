"""
Plan/subscription limits collaborator.

This service only consults limits; plans and subscriptions are owned
elsewhere. The default provider reads fixed limits from settings.
"""

from sqlalchemy.orm import Session

from churchapp.config import settings
from churchapp.core.exceptions import PlanLimitExceededException
from churchapp.core.logging import get_logger
from churchapp.repositories.branch_repository import BranchRepository
from churchapp.repositories.member_repository import MemberRepository

logger = get_logger(__name__)


class PlanLimits:
    """Maximum branches/members for a church. None means unlimited."""

    def __init__(self, max_branches: int | None = None, max_members: int | None = None):
        self._max_branches = max_branches
        self._max_members = max_members

    def max_branches(self, church_id: str) -> int | None:
        return self._max_branches

    def max_members(self, church_id: str) -> int | None:
        return self._max_members


def get_plan_limits() -> PlanLimits:
    """FastAPI dependency; override to plug a subscription-backed provider"""
    return PlanLimits(
        max_branches=settings.PLAN_MAX_BRANCHES,
        max_members=settings.PLAN_MAX_MEMBERS,
    )


def check_branches_limit(db: Session, limits: PlanLimits, church_id: str) -> None:
    """
    Raises:
        PlanLimitExceededException: If the church already has max_branches branches
    """
    maximum = limits.max_branches(church_id)
    if maximum is None:
        return
    count = BranchRepository(db).count_by_church(church_id)
    if count >= maximum:
        logger.warning("Plan branch limit reached", church_id=church_id, maximum=maximum)
        raise PlanLimitExceededException(
            f"Plan limit reached: maximum of {maximum} branches. You have {count} branches."
        )


def check_members_limit(db: Session, limits: PlanLimits, church_id: str) -> None:
    """
    Raises:
        PlanLimitExceededException: If the church already has max_members members
    """
    maximum = limits.max_members(church_id)
    if maximum is None:
        return
    count = MemberRepository(db).count_by_church(church_id)
    if count >= maximum:
        logger.warning("Plan member limit reached", church_id=church_id, maximum=maximum)
        raise PlanLimitExceededException(
            f"Plan limit reached: maximum of {maximum} members. You have {count} members."
        )
