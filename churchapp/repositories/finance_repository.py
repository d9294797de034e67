from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from churchapp.models.finance import FinanceEntry, FinanceType


class FinanceRepository:
    """Repository for FinanceEntry data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, entry: FinanceEntry) -> FinanceEntry:
        """Create a new finance entry"""
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def get_by_id_and_church(self, entry_id: str, church_id: str) -> Optional[FinanceEntry]:
        """
        Get finance entry by ID, ensuring it belongs to the church.

        Args:
            entry_id: Finance entry ID
            church_id: Church ID

        Returns:
            FinanceEntry or None if not found or belongs to a different church
        """
        return (
            self.db.query(FinanceEntry)
            .filter(FinanceEntry.id == entry_id, FinanceEntry.church_id == church_id)
            .first()
        )

    def get_with_filters(
        self,
        church_id: str,
        branch_id: Optional[str] = None,
        entry_type: Optional[FinanceType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[FinanceEntry], int]:
        """
        Get finance entries with filters, ensuring tenant isolation.

        Args:
            church_id: Church ID for isolation
            branch_id: Optional branch filter (set for branch-scoped callers)
            entry_type: Optional ENTRY/EXIT filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            Tuple of (entries list, total count)
        """
        query = self.db.query(FinanceEntry).filter(FinanceEntry.church_id == church_id)

        if branch_id is not None:
            query = query.filter(FinanceEntry.branch_id == branch_id)

        if entry_type is not None:
            query = query.filter(FinanceEntry.type == entry_type)

        if start_date is not None:
            query = query.filter(FinanceEntry.date >= start_date)

        if end_date is not None:
            query = query.filter(FinanceEntry.date <= end_date)

        total = query.count()

        entries = (
            query.order_by(FinanceEntry.date.desc(), FinanceEntry.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return entries, total

    def delete(self, entry: FinanceEntry) -> None:
        """Delete a finance entry"""
        self.db.delete(entry)
        self.db.commit()
