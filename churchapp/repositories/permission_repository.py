from typing import Iterable
from sqlalchemy.orm import Session
from churchapp.models.audit_log import AuditLog
from churchapp.models.member import Member
from churchapp.models.permission import Permission


class PermissionRepository:
    """Repository for Permission grant rows"""

    def __init__(self, db: Session):
        self.db = db

    def get_types(self, member_id: str) -> set[str]:
        """Permission types currently granted to a member"""
        rows = self.db.query(Permission.type).filter(Permission.member_id == member_id).all()
        return {row.type for row in rows}

    def build(self, member_id: str, types: Iterable[str]) -> list[Permission]:
        """Unsaved grant rows, one per distinct type"""
        return [Permission(member_id=member_id, type=t) for t in sorted(set(types))]

    def replace(
        self, member: Member, desired: set[str], audit_entry: AuditLog | None = None
    ) -> tuple[set[str], set[str]]:
        """
        Make the member's grants exactly `desired` by delete/insert diff.

        Pending changes on `member` (e.g. a new role) and `audit_entry` are
        committed in the same unit.

        Args:
            member: Target member
            desired: Full set of permission types to keep
            audit_entry: Optional audit row; the diff is added to its details

        Returns:
            (added, removed) permission types
        """
        current = self.get_types(member.id)
        added = desired - current
        removed = current - desired

        if removed:
            (
                self.db.query(Permission)
                .filter(Permission.member_id == member.id, Permission.type.in_(sorted(removed)))
                .delete(synchronize_session=False)
            )
        self.db.add_all(self.build(member.id, added))
        if audit_entry is not None:
            audit_entry.details = {
                **(audit_entry.details or {}),
                "added": sorted(added),
                "removed": sorted(removed),
            }
            self.db.add(audit_entry)
        self.db.commit()
        self.db.expire(member, ["permissions"])
        self.db.refresh(member)
        return added, removed
