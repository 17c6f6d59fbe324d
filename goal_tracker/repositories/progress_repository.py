"""
Progress repository - Data access layer for ProgressEntry model.
Handles all database queries related to logged progress.
"""
from typing import List
from sqlalchemy.orm import Session

from goal_tracker.models import ProgressEntry


class ProgressRepository:
    """Repository for ProgressEntry data access"""

    @staticmethod
    def get_all(db: Session) -> List[ProgressEntry]:
        """Get all progress entries in insertion order"""
        return db.query(ProgressEntry).order_by(ProgressEntry.pk).all()

    @staticmethod
    def get_for_goal(db: Session, goal_id: str) -> List[ProgressEntry]:
        """Get progress entries for a goal in insertion order"""
        return db.query(ProgressEntry).filter(
            ProgressEntry.goal_id == goal_id
        ).order_by(ProgressEntry.pk).all()

    @staticmethod
    def create(db: Session, entry: ProgressEntry) -> ProgressEntry:
        """Create new progress entry"""
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def add_many(db: Session, entries: List[ProgressEntry]) -> None:
        """Stage entries for insertion (caller commits)"""
        db.add_all(entries)

    @staticmethod
    def delete_by_id(db: Session, entry_id: str) -> int:
        """Delete every entry with the given public ID (caller commits)"""
        return db.query(ProgressEntry).filter(
            ProgressEntry.id == entry_id
        ).delete()

    @staticmethod
    def delete_for_goal(db: Session, goal_id: str) -> int:
        """Delete all entries logged against a goal (caller commits)"""
        return db.query(ProgressEntry).filter(
            ProgressEntry.goal_id == goal_id
        ).delete()

    @staticmethod
    def delete_all(db: Session) -> int:
        """Delete all progress entries (caller commits)"""
        return db.query(ProgressEntry).delete()
