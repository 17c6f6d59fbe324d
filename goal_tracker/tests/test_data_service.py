"""
Tests for the import/export data service.

Tests cover:
1. Export document shape
2. Replace-mode round trip
3. Merge-mode duplication
4. Rejection of malformed documents without partial writes
5. Clearing all data
"""
import json
import pytest
from datetime import date, datetime, timedelta

from goal_tracker.services import data_service
from goal_tracker.services.goal_service import GoalService
from goal_tracker.models import Goal, ProgressEntry, NotificationSettings
from goal_tracker.exceptions import DataImportException
from goal_tracker.tests.conftest import create_goal, create_entry


@pytest.fixture
def populated(db_session, day_zero):
    piano = create_goal(db_session, title="Piano", created_at=day_zero, daily_time_allotment=1.5)
    french = create_goal(db_session, title="French", description="B2 exam", created_at=day_zero)
    create_entry(db_session, piano.id, 2, day_zero + timedelta(days=1, hours=18, microseconds=250))
    create_entry(db_session, french.id, 1.25, day_zero + timedelta(days=2), notes="Verbs")
    return piano, french


def _snapshot(db):
    goals = [
        (g.id, g.title, g.description, g.total_required_time, g.deadline, g.created_at,
         g.updated_at, g.daily_time_allotment, g.weekly_time_allotment, g.monthly_time_allotment)
        for g in db.query(Goal).order_by(Goal.pk).all()
    ]
    entries = [
        (e.id, e.goal_id, e.time_spent, e.date, e.notes)
        for e in db.query(ProgressEntry).order_by(ProgressEntry.pk).all()
    ]
    return goals, entries


class TestExport:

    def test_document_shape(self, db_session, populated):
        document = data_service.export_user_data(db_session)

        assert document["version"] == "1.0.0"
        assert document["exportDate"].endswith("Z")
        assert len(document["goals"]) == 2
        assert len(document["progress"]) == 2

        goal = document["goals"][0]
        assert goal["title"] == "Piano"
        assert goal["totalRequiredTime"] == 100
        assert goal["dailyTimeAllotment"] == 1.5
        assert goal["createdAt"].startswith("2026-03-01T00:00:00")
        assert document["progress"][1]["goalId"] == populated[1].id

    def test_document_is_json_serializable(self, db_session, populated):
        json.dumps(data_service.export_user_data(db_session))

    def test_filename(self):
        assert data_service.export_filename(date(2026, 3, 5)) == "goal-tracker-backup-2026-03-05.json"


class TestImport:

    def test_replace_round_trip(self, db_session, populated):
        before = _snapshot(db_session)
        raw = json.dumps(data_service.export_user_data(db_session))

        result = data_service.import_user_data(db_session, raw, overwrite=True)

        assert result.goals_imported == 2
        assert result.progress_imported == 2
        assert _snapshot(db_session) == before

    def test_replace_discards_existing_records(self, db_session, populated, day_zero):
        raw = json.dumps(data_service.export_user_data(db_session))
        create_goal(db_session, title="Added later", created_at=day_zero)

        data_service.import_user_data(db_session, raw, overwrite=True)

        titles = [goal.title for goal in GoalService(db_session).get_all_goals()]
        assert titles == ["Piano", "French"]

    def test_merge_twice_doubles_everything(self, db_session, populated):
        document = data_service.export_user_data(db_session)
        goals_before = db_session.query(Goal).count()
        entries_before = db_session.query(ProgressEntry).count()

        data_service.import_user_data(db_session, document)
        data_service.import_user_data(db_session, document)

        assert db_session.query(Goal).count() == goals_before * 3
        assert db_session.query(ProgressEntry).count() == entries_before * 3

    def test_merge_into_empty_store_twice(self, db_session, populated):
        document = data_service.export_user_data(db_session)
        data_service.clear_user_data(db_session)

        data_service.import_user_data(db_session, document)
        data_service.import_user_data(db_session, document)

        assert db_session.query(Goal).count() == 4
        assert db_session.query(ProgressEntry).count() == 4

    def test_accepts_browser_export_timestamps(self, db_session):
        document = {
            "goals": [{
                "id": "g-1",
                "title": "Marathon",
                "totalRequiredTime": 80,
                "deadline": "2026-09-01T00:00:00.000Z",
                "createdAt": "2026-03-01T08:30:00.000Z",
                "updatedAt": "2026-03-01T08:30:00.000Z",
            }],
            "progress": [{
                "id": "p-1", "goalId": "g-1", "timeSpent": 1.5,
                "date": "2026-03-02T07:00:00.000+02:00",
            }],
            "exportDate": "2026-03-03T00:00:00.000Z",
            "version": "1.0.0",
        }

        data_service.import_user_data(db_session, document, overwrite=True)

        goal = GoalService(db_session).get_goal_by_id("g-1")
        entry = GoalService(db_session).get_progress_for_goal("g-1")[0]
        assert goal.created_at == datetime(2026, 3, 1, 8, 30)
        assert entry.date == datetime(2026, 3, 2, 5, 0)

    def test_progress_is_optional(self, db_session):
        document = {"goals": []}
        result = data_service.import_user_data(db_session, document)
        assert result.progress_imported == 0

    @pytest.mark.parametrize("raw", [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"progress": []}),
        json.dumps({"goals": "nope"}),
        json.dumps({"goals": [], "progress": {"id": "x"}}),
        json.dumps({"goals": [{"id": "g", "title": "Missing dates", "totalRequiredTime": 5}]}),
        '{"goals": [{"id": "g", "title": "Overflow", "totalRequiredTime": 1e309,'
        ' "deadline": "2026-09-01T00:00:00Z", "createdAt": "2026-03-01T00:00:00Z",'
        ' "updatedAt": "2026-03-01T00:00:00Z"}]}',
    ])
    def test_malformed_documents_rejected(self, db_session, populated, raw):
        before = _snapshot(db_session)

        with pytest.raises(DataImportException):
            data_service.import_user_data(db_session, raw, overwrite=True)

        assert _snapshot(db_session) == before

    def test_bad_progress_record_aborts_whole_import(self, db_session, populated):
        document = data_service.export_user_data(db_session)
        document["progress"][1]["timeSpent"] = -3
        before = _snapshot(db_session)

        with pytest.raises(DataImportException):
            data_service.import_user_data(db_session, document)

        assert _snapshot(db_session) == before


class TestClear:

    def test_clears_goals_progress_and_settings(self, db_session, populated, default_settings):
        data_service.clear_user_data(db_session)

        assert db_session.query(Goal).count() == 0
        assert db_session.query(ProgressEntry).count() == 0
        assert db_session.query(NotificationSettings).count() == 0
