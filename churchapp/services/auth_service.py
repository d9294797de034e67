from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from churchapp.core.exceptions import UnauthorizedException, ValidationException
from churchapp.core.logging import get_logger
from churchapp.core.security import hash_password, verify_password
from churchapp.models.onboarding_progress import OnboardingProgress
from churchapp.models.user import User
from churchapp.repositories.user_repository import UserRepository
from churchapp.schemas.auth_schemas import RegisterRequest
from churchapp.services.token_service import TokenService

logger = get_logger(__name__)


class AuthService:
    """Registration, login and token refresh"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tokens = TokenService(db)

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Create a user account and its onboarding checklist.

        Returns:
            (user, token) where the token is of type "user"

        Raises:
            ValidationException: If the e-mail is already registered
        """
        if self.user_repo.get_by_email(data.email):
            raise ValidationException("Email already registered")

        user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
        )
        try:
            self.user_repo.create(user, commit=False)
            self.db.add(OnboardingProgress(user_id=user.id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationException("Email already registered")

        self.db.refresh(user)
        logger.info("User registered", user_id=user.id)
        return user, self.tokens.issue(user)

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Validate credentials and issue a token reflecting current membership.

        Raises:
            UnauthorizedException: On unknown e-mail or wrong password
        """
        user = self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedException("Invalid credentials")
        return user, self.tokens.issue(user)

    def refresh(self, user_id: str) -> tuple[User, str]:
        """Re-derive claims from the store for an authenticated user"""
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UnauthorizedException("User no longer exists")
        return user, self.tokens.issue(user)
