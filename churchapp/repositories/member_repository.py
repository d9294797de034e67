"""Repository for Member model operations."""

from sqlalchemy.orm import Session, selectinload
from churchapp.models.member import Member


class MemberRepository:
    """Repository for Member model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, member_id: str) -> Member | None:
        """
        Get member by ID in any tenant.

        Callers must run the tenant check before exposing the row.
        """
        return (
            self.db.query(Member)
            .options(selectinload(Member.permissions))
            .filter(Member.id == member_id)
            .first()
        )

    def get_by_id_for_update(self, member_id: str) -> Member | None:
        """
        Get member by ID, locking the row until the current unit commits.

        SQLite ignores the lock; there the caller's write is last-writer-wins.
        """
        return (
            self.db.query(Member)
            .filter(Member.id == member_id)
            .with_for_update()
            .first()
        )

    def get_by_user(self, user_id: str) -> Member | None:
        """Get the membership of a user (one per user)"""
        return self.db.query(Member).filter(Member.user_id == user_id).first()

    def list_in_scope(self, church_id: str, branch_id: str | None = None) -> list[Member]:
        """
        List members of a church, optionally limited to one branch.

        Args:
            church_id: Tenant filter, always applied
            branch_id: Branch filter, None for church-wide

        Returns:
            Members inside the scope only
        """
        query = (
            self.db.query(Member)
            .options(selectinload(Member.permissions), selectinload(Member.user))
            .filter(Member.church_id == church_id)
        )
        if branch_id is not None:
            query = query.filter(Member.branch_id == branch_id)
        return query.order_by(Member.created_at).all()

    def count_by_church(self, church_id: str) -> int:
        return self.db.query(Member).filter(Member.church_id == church_id).count()

    def create(self, member: Member, commit: bool = True) -> Member:
        """
        Create a new member.

        Raises:
            IntegrityError: If the user already has a membership
        """
        self.db.add(member)
        if commit:
            self.db.commit()
            self.db.refresh(member)
        else:
            self.db.flush()
        return member

    def update(self, member: Member) -> Member:
        self.db.commit()
        self.db.refresh(member)
        return member
