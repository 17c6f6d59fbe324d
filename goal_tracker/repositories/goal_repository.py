"""
Goal repository - Data access layer for Goal model.
Handles all database queries related to goals.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from goal_tracker.models import Goal


class GoalRepository:
    """Repository for Goal data access"""

    @staticmethod
    def get_all(db: Session) -> List[Goal]:
        """Get all goals in insertion order"""
        return db.query(Goal).order_by(Goal.pk).all()

    @staticmethod
    def get_by_id(db: Session, goal_id: str) -> Optional[Goal]:
        """Get the first goal with the given public ID"""
        return db.query(Goal).filter(Goal.id == goal_id).order_by(Goal.pk).first()

    @staticmethod
    def create(db: Session, goal: Goal) -> Goal:
        """Create new goal"""
        db.add(goal)
        db.commit()
        db.refresh(goal)
        return goal

    @staticmethod
    def update(db: Session, goal: Goal) -> Goal:
        """Update existing goal"""
        db.commit()
        db.refresh(goal)
        return goal

    @staticmethod
    def add_many(db: Session, goals: List[Goal]) -> None:
        """Stage goals for insertion (caller commits)"""
        db.add_all(goals)

    @staticmethod
    def delete_by_id(db: Session, goal_id: str) -> int:
        """
        Delete every goal with the given public ID (caller commits).

        Returns:
            Number of rows deleted
        """
        return db.query(Goal).filter(Goal.id == goal_id).delete()

    @staticmethod
    def delete_all(db: Session) -> int:
        """Delete all goals (caller commits)"""
        return db.query(Goal).delete()
