from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import NotFoundException, UnauthorizedException, ValidationException
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import PERMISSION_CATALOG, PermissionType
from churchapp.models.base import generate_id
from churchapp.models.branch import Branch
from churchapp.models.church import Church
from churchapp.models.member import Member
from churchapp.models.onboarding_progress import OnboardingProgress
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.branch_repository import BranchRepository
from churchapp.repositories.church_repository import ChurchRepository
from churchapp.repositories.member_repository import MemberRepository
from churchapp.repositories.onboarding_progress_repository import OnboardingProgressRepository
from churchapp.repositories.permission_repository import PermissionRepository
from churchapp.repositories.user_repository import UserRepository
from churchapp.schemas.church_schemas import ChurchCreate, ChurchUpdate
from churchapp.services.token_service import TokenService

logger = get_logger(__name__)

DEFAULT_MAIN_BRANCH_NAME = "Sede"


class ChurchService:
    """Service layer for church lifecycle business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.church_repo = ChurchRepository(db)
        self.branch_repo = BranchRepository(db)
        self.member_repo = MemberRepository(db)
        self.permission_repo = PermissionRepository(db)
        self.progress_repo = OnboardingProgressRepository(db)
        self.user_repo = UserRepository(db)
        self.tokens = TokenService(db)

    def create_church(
        self, data: ChurchCreate, context: TenantContext
    ) -> tuple[Church, Branch, Member, str, bool]:
        """
        Create a church with its main branch and the caller as ADMINGERAL.

        Idempotent by creator: if the caller already founded a church, the
        existing church is returned instead of creating a duplicate.

        Args:
            data: Church details
            context: Caller context (incomplete contexts accepted)

        Returns:
            (church, main branch, founding member, fresh token, created)

        Raises:
            ValidationException: If the caller already belongs to another church
        """
        access.authorize(context, requires_tenant=False)

        user = self.user_repo.get_by_id(context.user_id)
        if not user:
            raise UnauthorizedException("User no longer exists")

        existing = self.church_repo.get_by_creator(user.id)
        if existing:
            logger.info("Church creation reused existing church", church_id=existing.id, user_id=user.id)
            return (*self._founder_view(existing, user.id), False)

        if self.member_repo.get_by_user(user.id):
            raise ValidationException("User already belongs to a church")

        church = Church(
            id=generate_id(),
            name=data.name,
            address=data.address,
            created_by_user_id=user.id,
        )
        branch = Branch(
            id=generate_id(),
            church_id=church.id,
            name=data.branch_name or DEFAULT_MAIN_BRANCH_NAME,
            is_main_branch=True,
        )
        member = Member(
            id=generate_id(),
            user_id=user.id,
            branch_id=branch.id,
            church_id=church.id,
            role=Role.ADMINGERAL,
        )
        grants = self.permission_repo.build(member.id, (p.value for p in PERMISSION_CATALOG))
        progress = self.progress_repo.get_by_user(user.id) or OnboardingProgress(user_id=user.id)
        progress.church_configured = True

        try:
            self.church_repo.create_with_founder(church, branch, member, progress, *grants)
        except IntegrityError:
            # Concurrent creation by the same founder won the race
            self.db.rollback()
            existing = self.church_repo.get_by_creator(user.id)
            if not existing:
                raise
            return (*self._founder_view(existing, user.id), False)

        logger.info("Church created", church_id=church.id, branch_id=branch.id, member_id=member.id)
        return (*self._founder_view(church, user.id), True)

    def _founder_view(self, church: Church, user_id: str) -> tuple[Church, Branch, Member, str]:
        branch = self.branch_repo.get_main_branch(church.id)
        member = self.member_repo.get_by_user(user_id)
        token = self.tokens.issue_for_user_id(user_id)
        return church, branch, member, token

    def list_churches(self, context: TenantContext) -> list[Church]:
        """
        List churches visible to the caller (only their own).

        Raises:
            ForbiddenException: If the context is incomplete
        """
        scope = access.list_scope(context, church_wide=True)
        return self.church_repo.list_for_tenant(scope.church_id)

    def get_church(self, church_id: str, context: TenantContext) -> Church:
        """
        Get a church by ID.

        Raises:
            NotFoundException: If no church has this ID
            ForbiddenException: If it belongs to another tenant
        """
        access.authorize(context)
        church = self.church_repo.get_by_id(church_id)
        if not church:
            raise NotFoundException("Church not found")
        access.authorize(context, church_id=church.id)
        return church

    def update_church(self, church_id: str, data: ChurchUpdate, context: TenantContext) -> Church:
        """Update church details (church_manage)"""
        church = self.get_church(church_id, context)
        access.authorize(context, church_id=church.id, permission=PermissionType.CHURCH_MANAGE)

        if data.name is not None:
            church.name = data.name
        if data.address is not None:
            church.address = data.address

        return self.church_repo.update(church)

    def deactivate_church(self, church_id: str, context: TenantContext) -> Church:
        """Soft-delete a church (ADMINGERAL only)"""
        church = self.get_church(church_id, context)
        access.authorize(context, church_id=church.id, min_role=Role.ADMINGERAL)
        logger.info("Church deactivated", church_id=church.id, member_id=context.member_id)
        return self.church_repo.deactivate(church)
