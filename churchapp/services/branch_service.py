from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import NotFoundException, ValidationException
from churchapp.core.logging import get_logger
from churchapp.models.branch import Branch
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.branch_repository import BranchRepository
from churchapp.schemas.branch_schemas import BranchCreate
from churchapp.services.plan_limits import PlanLimits, check_branches_limit

logger = get_logger(__name__)


class BranchService:
    """Service for branch business logic"""

    def __init__(self, db: Session, limits: PlanLimits | None = None):
        self.db = db
        self.repo = BranchRepository(db)
        self.limits = limits or PlanLimits()

    def create_branch(self, data: BranchCreate, context: TenantContext) -> Branch:
        """
        Create a branch in the caller's church (ADMINGERAL only).

        Raises:
            PlanLimitExceededException: If the plan allows no more branches
        """
        access.authorize(context, min_role=Role.ADMINGERAL)
        check_branches_limit(self.db, self.limits, context.church_id)

        branch = self.repo.create(
            Branch(church_id=context.church_id, name=data.name, is_main_branch=False)
        )
        logger.info("Branch created", branch_id=branch.id, church_id=branch.church_id)
        return branch

    def list_branches(self, context: TenantContext) -> list[Branch]:
        """All branches of the caller's church"""
        scope = access.list_scope(context, church_wide=True)
        return self.repo.get_by_church(scope.church_id)

    def get_branch(self, branch_id: str, context: TenantContext) -> Branch:
        """
        Get a branch by ID.

        Raises:
            NotFoundException: If no branch has this ID
            ForbiddenException: If it belongs to another church
        """
        access.authorize(context)
        branch = self.repo.get_by_id(branch_id)
        if not branch:
            raise NotFoundException("Branch not found")
        access.authorize(context, church_id=branch.church_id)
        return branch

    def delete_branch(self, branch_id: str, context: TenantContext) -> None:
        """
        Delete a branch of the caller's church (ADMINGERAL only).

        Raises:
            ValidationException: If it is the main branch or still has members
        """
        branch = self.get_branch(branch_id, context)
        access.authorize(context, church_id=branch.church_id, min_role=Role.ADMINGERAL)

        if branch.is_main_branch:
            raise ValidationException("Main branch cannot be deleted")
        if self.repo.has_members(branch.id):
            raise ValidationException("Branch still has members; move them first")

        self.repo.delete(branch)
        logger.info("Branch deleted", branch_id=branch_id, church_id=context.church_id)
