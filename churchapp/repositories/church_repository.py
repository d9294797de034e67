"""Repository for Church model operations."""

from sqlalchemy.orm import Session
from churchapp.models.church import Church


class ChurchRepository:
    """Repository for Church model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, church_id: str) -> Church | None:
        """
        Get church by ID.

        Args:
            church_id: Church ID

        Returns:
            Church object or None if not found
        """
        return self.db.query(Church).filter(Church.id == church_id).first()

    def get_by_creator(self, user_id: str) -> Church | None:
        """
        Get the church founded by a user.

        Args:
            user_id: ID of the founding user

        Returns:
            Church object or None if the user never created one
        """
        return self.db.query(Church).filter(Church.created_by_user_id == user_id).first()

    def list_for_tenant(self, church_id: str) -> list[Church]:
        """
        List churches visible inside one tenant (at most the tenant itself).

        Args:
            church_id: Caller's church ID

        Returns:
            List holding the caller's church if it is active
        """
        return (
            self.db.query(Church)
            .filter(Church.id == church_id, Church.is_active.is_(True))
            .all()
        )

    def update(self, church: Church) -> Church:
        """
        Update an existing church.

        Args:
            church: Church object with updated fields

        Returns:
            Updated Church object
        """
        self.db.commit()
        self.db.refresh(church)
        return church

    def deactivate(self, church: Church) -> Church:
        """
        Soft-delete a church.

        Members, branches and grants are kept so the church can be restored.

        Args:
            church: Church object to deactivate
        """
        church.is_active = False
        self.db.commit()
        self.db.refresh(church)
        return church

    def create_with_founder(self, church: Church, *records) -> Church:
        """
        Persist a new church together with its main branch, founding member
        and grants in a single commit.

        Args:
            church: Church object to create
            records: Branch, Member, Permission, ... rows created alongside

        Returns:
            Created Church object with ID populated

        Raises:
            IntegrityError: If the founding user already created a church
        """
        self.db.add(church)
        self.db.add_all(records)
        self.db.commit()
        self.db.refresh(church)
        return church
