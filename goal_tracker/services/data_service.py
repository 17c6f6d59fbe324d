"""
Data import/export service.
Serializes the full data set to a JSON document and restores it, either
replacing existing data or appending to it.
"""
import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Union
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from goal_tracker.models import Goal, ProgressEntry
from goal_tracker.schemas import GoalRecord, ProgressRecord, ImportResult
from goal_tracker.repositories.goal_repository import GoalRepository
from goal_tracker.repositories.progress_repository import ProgressRepository
from goal_tracker.repositories.settings_repository import NotificationSettingsRepository
from goal_tracker.services.date_service import DateService
from goal_tracker.exceptions import DataImportException, DatabaseException
from goal_tracker.constants import EXPORT_VERSION, EXPORT_FILENAME_PREFIX

logger = logging.getLogger("goal_tracker.data")


def export_filename(today: date = None) -> str:
    """Download name for an export document"""
    today = today or DateService.today()
    return f"{EXPORT_FILENAME_PREFIX}-{today.isoformat()}.json"


def export_user_data(db: Session) -> dict:
    """
    Build the export document for every goal and progress entry.

    Returns:
        {"goals": [...], "progress": [...], "exportDate": ISO-8601, "version": "1.0.0"}
    """
    goals = GoalRepository.get_all(db)
    progress = ProgressRepository.get_all(db)

    document = {
        "goals": [
            GoalRecord.model_validate(goal).model_dump(mode="json", by_alias=True)
            for goal in goals
        ],
        "progress": [
            ProgressRecord.model_validate(entry).model_dump(mode="json", by_alias=True)
            for entry in progress
        ],
        "exportDate": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "version": EXPORT_VERSION,
    }

    logger.info(f"Exported {len(goals)} goals and {len(progress)} progress entries")
    return document


def _parse_document(raw: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DataImportException(f"file is not valid JSON ({e})")
    if not isinstance(document, dict):
        raise DataImportException("document must be a JSON object")
    return document


def import_user_data(
    db: Session,
    raw: Union[str, bytes, Mapping[str, Any]],
    overwrite: bool = False
) -> ImportResult:
    """
    Restore goals and progress from an export document.

    Replace mode clears both collections before writing. Merge mode appends
    every imported record, with no deduplication by id, so importing the same
    file twice doubles every collection.

    Args:
        db: Database session
        raw: JSON text/bytes or an already-parsed document
        overwrite: Replace existing data instead of merging

    Returns:
        ImportResult with the number of records written

    Raises:
        DataImportException: If the document is malformed; nothing is written
    """
    document = _parse_document(raw)

    goals_data = document.get("goals")
    if not isinstance(goals_data, list):
        raise DataImportException("Invalid data format: goals array is missing")

    progress_data = document.get("progress")
    if progress_data is not None and not isinstance(progress_data, list):
        raise DataImportException("Invalid data format: progress must be an array")

    try:
        goal_records = [GoalRecord.model_validate(item) for item in goals_data]
        progress_records = [ProgressRecord.model_validate(item) for item in progress_data or []]
    except ValidationError as e:
        raise DataImportException(f"invalid record ({e.error_count()} error(s)): {e.errors()[0]['msg']}")

    goals = [
        Goal(
            **record.model_dump(exclude={"deadline", "created_at", "updated_at"}),
            deadline=DateService.to_naive_utc(record.deadline),
            created_at=DateService.to_naive_utc(record.created_at),
            updated_at=DateService.to_naive_utc(record.updated_at)
        )
        for record in goal_records
    ]
    entries = [
        ProgressEntry(
            **record.model_dump(exclude={"date"}),
            date=DateService.to_naive_utc(record.date)
        )
        for record in progress_records
    ]

    try:
        if overwrite:
            GoalRepository.delete_all(db)
            ProgressRepository.delete_all(db)
        GoalRepository.add_many(db, goals)
        ProgressRepository.add_many(db, entries)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Import failed while writing: {e}")
        raise DataImportException("could not write imported data")

    logger.info(
        f"Imported {len(goals)} goals and {len(entries)} progress entries "
        f"({'replace' if overwrite else 'merge'})"
    )
    return ImportResult(
        goals_imported=len(goals),
        progress_imported=len(entries),
        overwrite=overwrite
    )


def clear_user_data(db: Session) -> None:
    """Remove all goals, progress entries and notification settings"""
    try:
        GoalRepository.delete_all(db)
        ProgressRepository.delete_all(db)
        NotificationSettingsRepository.delete_all(db)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise DatabaseException("clear data", str(e))

    logger.info("Cleared all user data")
