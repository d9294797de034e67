from sqlalchemy.orm import Session
from churchapp.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        """E-mails are stored lower-cased"""
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create(self, user: User, commit: bool = True) -> User:
        """
        Create a new user.

        Args:
            user: User object to create
            commit: False to only flush, leaving the commit to the caller's unit

        Raises:
            IntegrityError: If the e-mail already exists
        """
        user.email = user.email.lower()
        self.db.add(user)
        if commit:
            self.db.commit()
            self.db.refresh(user)
        else:
            self.db.flush()
        return user
