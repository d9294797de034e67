from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from churchapp.core.logging import get_logger
from churchapp.core.role_policy import ALWAYS_GRANTED, PermissionType, parse_role
from churchapp.core.security import hash_password
from churchapp.models.base import generate_id
from churchapp.models.member import Member
from churchapp.models.onboarding_progress import OnboardingProgress
from churchapp.models.role import Role
from churchapp.models.tenant_context import TenantContext
from churchapp.models.user import User
from churchapp.repositories.branch_repository import BranchRepository
from churchapp.repositories.member_repository import MemberRepository
from churchapp.repositories.permission_repository import PermissionRepository
from churchapp.repositories.user_repository import UserRepository
from churchapp.schemas.member_schemas import MemberCreate
from churchapp.services.plan_limits import PlanLimits, check_members_limit

logger = get_logger(__name__)


def validate_role_hierarchy(creator_role: Role, target_role: Role) -> None:
    """
    Check that a creator may hand out `target_role` to a new member.

    Raises:
        ForbiddenException: If the assignment is not allowed
    """
    if target_role == Role.ADMINGERAL:
        raise ForbiddenException("Only the system can create a general administrator")

    if creator_role == Role.COORDINATOR and target_role != Role.MEMBER:
        raise ForbiddenException("Coordinators can only create members with role MEMBER")

    if creator_role == Role.MEMBER:
        raise ForbiddenException("Members cannot assign roles")


class MemberService:
    """Service layer for member business logic"""

    def __init__(self, db: Session, limits: PlanLimits | None = None):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.branch_repo = BranchRepository(db)
        self.permission_repo = PermissionRepository(db)
        self.user_repo = UserRepository(db)
        self.limits = limits or PlanLimits()

    def create_member(self, data: MemberCreate, context: TenantContext) -> Member:
        """
        Create a user and bind it to a branch of the caller's church.

        Rules:
        - MEMBER/COORDINATOR creators need members_manage
        - COORDINATOR and ADMINFILIAL creators only create in their own branch
        - Role hierarchy per validate_role_hierarchy
        - Plan member limit is consulted

        Raises:
            NotFoundException: If the target branch doesn't exist
            ForbiddenException: On tenant/branch mismatch or insufficient rights
            ValidationException: On unknown role or duplicate e-mail
        """
        target_role = parse_role(data.role)
        access.authorize(context)

        if not context.is_admin_or_higher():
            access.authorize(context, permission=PermissionType.MEMBERS_MANAGE)

        branch = self.branch_repo.get_by_id(data.branch_id)
        if not branch:
            raise NotFoundException("Branch not found")

        if context.role in (Role.ADMINFILIAL, Role.COORDINATOR) and branch.id != context.branch_id:
            raise ForbiddenException("You can only create members in your own branch")

        access.authorize(context, church_id=branch.church_id)
        validate_role_hierarchy(context.role, target_role)
        check_members_limit(self.db, self.limits, branch.church_id)

        if self.user_repo.get_by_email(data.email):
            raise ValidationException("Email already registered")

        user = User(
            id=generate_id(),
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )
        member = Member(
            id=generate_id(),
            user_id=user.id,
            branch_id=branch.id,
            church_id=branch.church_id,
            role=target_role,
        )
        # Added by an administrator: nothing left to onboard
        progress = OnboardingProgress(user_id=user.id, completed=True)

        try:
            self.db.add_all([user, member, progress])
            self.db.add_all(self.permission_repo.build(member.id, [ALWAYS_GRANTED.value]))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationException("Email already registered")

        logger.info(
            "Member created",
            member_id=member.id,
            church_id=member.church_id,
            role=target_role.value,
            created_by=context.member_id,
        )
        return self.member_repo.get_by_id(member.id)

    def list_members(self, context: TenantContext) -> list[Member]:
        """
        Members visible to the caller.

        ADMINGERAL sees the whole church, every other role its own branch.
        """
        access.authorize(context, permission=PermissionType.MEMBERS_VIEW)
        scope = access.list_scope(context)
        return self.member_repo.list_in_scope(scope.church_id, scope.branch_id)

    def get_member(self, member_id: str, context: TenantContext) -> Member:
        """
        Get a member by ID.

        Raises:
            NotFoundException: If no member has this ID
            ForbiddenException: If the member belongs to another church
        """
        access.authorize(context)
        member = self.member_repo.get_by_id(member_id)
        if not member:
            raise NotFoundException("Member not found")
        access.authorize(
            context, church_id=member.church_id, permission=PermissionType.MEMBERS_VIEW
        )
        return member
