from sqlalchemy.orm import Session
from churchapp.models.branch import Branch
from churchapp.models.member import Member


class BranchRepository:
    """Repository for Branch model operations with tenant filtering"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, branch_id: str) -> Branch | None:
        """Get branch by ID in any tenant (callers enforce the tenant check)"""
        return self.db.query(Branch).filter(Branch.id == branch_id).first()

    def get_by_church(self, church_id: str) -> list[Branch]:
        """Get all branches of a church, main branch first"""
        return (
            self.db.query(Branch)
            .filter(Branch.church_id == church_id)
            .order_by(Branch.is_main_branch.desc(), Branch.created_at)
            .all()
        )

    def get_main_branch(self, church_id: str) -> Branch | None:
        return (
            self.db.query(Branch)
            .filter(Branch.church_id == church_id, Branch.is_main_branch.is_(True))
            .first()
        )

    def count_by_church(self, church_id: str) -> int:
        return self.db.query(Branch).filter(Branch.church_id == church_id).count()

    def has_members(self, branch_id: str) -> bool:
        return self.db.query(Member.id).filter(Member.branch_id == branch_id).first() is not None

    def create(self, branch: Branch) -> Branch:
        """Create new branch"""
        self.db.add(branch)
        self.db.commit()
        self.db.refresh(branch)
        return branch

    def delete(self, branch: Branch) -> None:
        """Delete branch"""
        self.db.delete(branch)
        self.db.commit()
