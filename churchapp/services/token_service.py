"""
Token issuance.

Claims duplicate store state (role, branch, grants), so every mutation of
that state re-issues a token through this service in the same response.
"""

from sqlalchemy.orm import Session

from churchapp.core.exceptions import UnauthorizedException
from churchapp.core.security import create_access_token
from churchapp.models.user import User
from churchapp.repositories.member_repository import MemberRepository
from churchapp.repositories.onboarding_progress_repository import OnboardingProgressRepository
from churchapp.repositories.permission_repository import PermissionRepository
from churchapp.repositories.user_repository import UserRepository
from churchapp.schemas.auth_schemas import TokenClaims


class TokenService:
    """Builds claims from the store and signs them"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.member_repo = MemberRepository(db)
        self.permission_repo = PermissionRepository(db)
        self.progress_repo = OnboardingProgressRepository(db)

    def build_claims(self, user: User) -> TokenClaims:
        """
        Derive token claims for a user from current store state.

        Args:
            user: User the token is issued for

        Returns:
            TokenClaims of type "member" if the user has a Member,
            otherwise of type "user" with null tenant fields
        """
        progress = self.progress_repo.get_by_user(user.id)
        member = self.member_repo.get_by_user(user.id)

        claims = TokenClaims(
            sub=user.id,
            email=user.email,
            name=user.full_name,
            type="user",
            permissions=[],
            onboardingCompleted=bool(progress and progress.completed),
        )
        if member is None:
            return claims

        return claims.model_copy(
            update={
                "type": "member",
                "memberId": member.id,
                "role": member.role,
                "branchId": member.branch_id,
                "churchId": member.church_id,
                "permissions": sorted(self.permission_repo.get_types(member.id)),
            }
        )

    def issue(self, user: User) -> str:
        """Sign a fresh token for a user"""
        claims = self.build_claims(user)
        return create_access_token(claims.model_dump(mode="json"))

    def issue_for_user_id(self, user_id: str) -> str:
        """
        Sign a fresh token for a user ID.

        Raises:
            UnauthorizedException: If the user no longer exists
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UnauthorizedException("User no longer exists")
        return self.issue(user)
