from fastapi import FastAPI, Depends, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging
import os
from pathlib import Path

from goal_tracker.database import engine, get_db, Base
from goal_tracker import models  # Import all models to register them with Base
from goal_tracker.schemas import (
    GoalCreate, GoalUpdate, GoalResponse, GoalWithProgressResponse, GoalDetailResponse,
    ProgressEntryCreate, ProgressEntryResponse,
    NotificationSettingsUpdate, NotificationSettingsResponse, ReminderResponse,
    AnalyticsResponse, ImportResult
)
from goal_tracker.services.goal_service import GoalService
from goal_tracker.services.progress_service import ProgressService
from goal_tracker.services.analytics_service import AnalyticsService
from goal_tracker.services.notification_service import NotificationService
from goal_tracker.services.scheduler_service import start_scheduler, stop_scheduler
from goal_tracker.services import data_service
from goal_tracker.exceptions import (
    GoalNotFoundException, DataImportException, DatabaseException, ValidationException
)
from goal_tracker.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV,
    CORS_ALLOWED_ORIGINS, SCHEDULER_ENABLED, DEFAULT_RECENT_ENTRIES_LIMIT
)

LOG_DIR = os.getenv("GOAL_TRACKER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("GOAL_TRACKER_LOG_FILE", "app.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()  # Also log to console
    ]
)

logger = logging.getLogger("goal_tracker")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Goal Tracker API",
    description="Personal goal tracking with planned-vs-actual progress",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Goal Tracker API started. Logging to: {log_path}")
    if SCHEDULER_ENABLED:
        start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Goal Tracker API")
    stop_scheduler()


def _with_progress(goal, goal_entries, as_of: Optional[datetime], response_model=GoalWithProgressResponse, **extra):
    """Attach freshly computed progress to a goal"""
    return response_model(
        **GoalResponse.model_validate(goal).model_dump(),
        progress=ProgressService.summarize(goal, goal_entries, as_of),
        **extra
    )


# Health check
@app.get("/")
async def root():
    return {"message": "Goal Tracker API", "status": "active"}


# ===== GOALS ENDPOINTS =====

@app.get("/api/goals", response_model=List[GoalWithProgressResponse])
async def get_goals(as_of: Optional[datetime] = None, db: Session = Depends(get_db)):
    """Get all goals with derived progress"""
    service = GoalService(db)
    entries = service.get_all_progress()
    return [_with_progress(goal, entries, as_of) for goal in service.get_all_goals()]


@app.post("/api/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(goal: GoalCreate, db: Session = Depends(get_db)):
    """Create a new goal"""
    try:
        return GoalService(db).create_goal(goal)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to save goal")


@app.get("/api/goals/{goal_id}", response_model=GoalDetailResponse)
async def get_goal(goal_id: str, as_of: Optional[datetime] = None, db: Session = Depends(get_db)):
    """Get a goal with its progress and entries (newest first)"""
    service = GoalService(db)
    goal = service.get_goal_by_id(goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")

    entries = service.get_progress_for_goal(goal_id)
    newest_first = sorted(entries, key=lambda entry: entry.date, reverse=True)
    return _with_progress(
        goal, entries, as_of,
        response_model=GoalDetailResponse,
        entries=[ProgressEntryResponse.model_validate(entry) for entry in newest_first]
    )


@app.put("/api/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: str, goal_update: GoalUpdate, db: Session = Depends(get_db)):
    """Update a goal"""
    try:
        goal = GoalService(db).update_goal(goal_id, goal_update)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to update goal")
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@app.delete("/api/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: str, db: Session = Depends(get_db)):
    """Delete a goal and its progress entries"""
    try:
        deleted = GoalService(db).delete_goal(goal_id)
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to delete goal")
    if not deleted:
        raise HTTPException(status_code=404, detail="Goal not found")


@app.get("/api/goals/{goal_id}/progress", response_model=List[ProgressEntryResponse])
async def get_goal_progress(goal_id: str, db: Session = Depends(get_db)):
    """Get progress entries logged against a goal"""
    service = GoalService(db)
    if not service.get_goal_by_id(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return service.get_progress_for_goal(goal_id)


# ===== PROGRESS ENDPOINTS =====

@app.post("/api/progress", response_model=ProgressEntryResponse, status_code=status.HTTP_201_CREATED)
async def log_progress(entry: ProgressEntryCreate, db: Session = Depends(get_db)):
    """Log time spent on a goal"""
    try:
        return GoalService(db).log_progress(entry)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to log progress")


@app.delete("/api/progress/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_progress_entry(entry_id: str, db: Session = Depends(get_db)):
    """Delete a progress entry"""
    try:
        deleted = GoalService(db).delete_progress_entry(entry_id)
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to delete progress entry")
    if not deleted:
        raise HTTPException(status_code=404, detail="Progress entry not found")


# ===== ANALYTICS ENDPOINTS =====

@app.get("/api/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    recent_limit: int = Query(DEFAULT_RECENT_ENTRIES_LIMIT, ge=1, le=50),
    as_of: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """Get overview, weekly pattern and recommendations"""
    service = GoalService(db)
    analytics = AnalyticsService(service.get_all_goals(), service.get_all_progress(), as_of)
    return analytics.build_report(recent_limit)


# ===== NOTIFICATION ENDPOINTS =====

@app.get("/api/settings/notifications", response_model=NotificationSettingsResponse)
async def get_notification_settings(db: Session = Depends(get_db)):
    """Get reminder settings"""
    return NotificationService(db).get_settings()


@app.put("/api/settings/notifications", response_model=NotificationSettingsResponse)
async def update_notification_settings(
    settings_update: NotificationSettingsUpdate,
    db: Session = Depends(get_db)
):
    """Update reminder settings"""
    return NotificationService(db).update_settings(settings_update)


@app.post("/api/notifications/check", response_model=Optional[ReminderResponse])
async def check_notifications(db: Session = Depends(get_db)):
    """Run the daily reminder check now (returns null when nothing is due)"""
    return NotificationService(db).check_for_reminders()


# ===== DATA ENDPOINTS =====

@app.get("/api/data/export")
async def export_data(db: Session = Depends(get_db)):
    """Download all data as a JSON document"""
    document = data_service.export_user_data(db)
    filename = data_service.export_filename()
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@app.post("/api/data/import", response_model=ImportResult)
async def import_data(request: Request, overwrite: bool = False, db: Session = Depends(get_db)):
    """Import an export document (merge by default, replace with overwrite=true)"""
    raw = await request.body()
    try:
        return data_service.import_user_data(db, raw, overwrite=overwrite)
    except DataImportException as e:
        logger.warning(str(e))
        raise HTTPException(
            status_code=400,
            detail=f"The selected file contains invalid data: {e.reason}"
        )


@app.delete("/api/data", status_code=status.HTTP_204_NO_CONTENT)
async def clear_data(db: Session = Depends(get_db)):
    """Remove all goals, progress and notification settings"""
    try:
        data_service.clear_user_data(db)
    except DatabaseException as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to clear data")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("goal_tracker.main:app", host="0.0.0.0", port=8000, reload=False)
