"""
Goal management service.
Handles goals and the progress entries logged against them.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from goal_tracker.models import Goal, ProgressEntry, generate_id
from goal_tracker.schemas import GoalCreate, GoalUpdate, ProgressEntryCreate
from goal_tracker.repositories.goal_repository import GoalRepository
from goal_tracker.repositories.progress_repository import ProgressRepository
from goal_tracker.services.date_service import DateService
from goal_tracker.exceptions import (
    GoalNotFoundException, DatabaseException, ValidationException
)

logger = logging.getLogger("goal_tracker.goals")


class GoalService:
    """Service for managing goals and their progress entries"""

    def __init__(self, db: Session):
        self.db = db
        self.goal_repo = GoalRepository()
        self.progress_repo = ProgressRepository()

    def get_all_goals(self) -> List[Goal]:
        """Get all goals (empty list if the store cannot be read)"""
        try:
            return self.goal_repo.get_all(self.db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read goals: {e}")
            return []

    def get_goal_by_id(self, goal_id: str) -> Optional[Goal]:
        """Get goal by ID"""
        try:
            return self.goal_repo.get_by_id(self.db, goal_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read goal {goal_id}: {e}")
            return None

    def create_goal(self, goal_data: GoalCreate) -> Goal:
        """Create a new goal; id and timestamps are assigned here"""
        if not goal_data.title.strip():
            raise ValidationException("title", "Title is required")

        now = DateService.now()
        data = goal_data.model_dump()
        data["deadline"] = DateService.to_naive_utc(data["deadline"])

        goal = Goal(**data, id=generate_id(), created_at=now, updated_at=now)
        try:
            goal = self.goal_repo.create(self.db, goal)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("create goal", str(e))

        logger.info(f"Created goal {goal.id} ({goal.title})")
        return goal

    def update_goal(self, goal_id: str, goal_update: GoalUpdate) -> Optional[Goal]:
        """Replace the supplied fields of a goal and refresh updated_at"""
        goal = self.get_goal_by_id(goal_id)
        if not goal:
            return None

        update_data = goal_update.model_dump(exclude_unset=True)
        if "title" in update_data and (update_data["title"] is None or not update_data["title"].strip()):
            raise ValidationException("title", "Title is required")
        for required in ("total_required_time", "deadline"):
            if required in update_data and update_data[required] is None:
                raise ValidationException(required, "Field cannot be empty")

        if "deadline" in update_data:
            update_data["deadline"] = DateService.to_naive_utc(update_data["deadline"])

        for key, value in update_data.items():
            setattr(goal, key, value)
        goal.updated_at = DateService.now()

        try:
            return self.goal_repo.update(self.db, goal)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("update goal", str(e))

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal together with every progress entry logged against it"""
        if not self.get_goal_by_id(goal_id):
            return False

        try:
            self.goal_repo.delete_by_id(self.db, goal_id)
            removed_entries = self.progress_repo.delete_for_goal(self.db, goal_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("delete goal", str(e))

        logger.info(f"Deleted goal {goal_id} and {removed_entries} progress entries")
        return True

    def get_all_progress(self) -> List[ProgressEntry]:
        """Get every progress entry (empty list if the store cannot be read)"""
        try:
            return self.progress_repo.get_all(self.db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read progress entries: {e}")
            return []

    def get_progress_for_goal(self, goal_id: str) -> List[ProgressEntry]:
        """Get progress entries logged against a goal"""
        try:
            return self.progress_repo.get_for_goal(self.db, goal_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read progress for goal {goal_id}: {e}")
            return []

    def log_progress(self, progress_data: ProgressEntryCreate) -> ProgressEntry:
        """
        Log time spent on a goal.

        Raises:
            GoalNotFoundException: If the referenced goal does not exist
        """
        if not self.get_goal_by_id(progress_data.goal_id):
            raise GoalNotFoundException(progress_data.goal_id)

        data = progress_data.model_dump()
        data["date"] = DateService.to_naive_utc(data["date"])

        entry = ProgressEntry(**data, id=generate_id())
        try:
            entry = self.progress_repo.create(self.db, entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("log progress", str(e))

        logger.info(f"Logged {entry.time_spent}h for goal {entry.goal_id}")
        return entry

    def delete_progress_entry(self, entry_id: str) -> bool:
        """Delete a single progress entry"""
        try:
            deleted = self.progress_repo.delete_by_id(self.db, entry_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("delete progress entry", str(e))

        return deleted > 0
