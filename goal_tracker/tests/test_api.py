"""
HTTP API tests using FastAPI's TestClient against the in-memory database.
"""
import json
from datetime import datetime
import pytest
from fastapi.testclient import TestClient

from goal_tracker.main import app
from goal_tracker.database import get_db
from goal_tracker.tests.conftest import create_goal, create_entry


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


GOAL_PAYLOAD = {
    "title": "Learn Spanish",
    "total_required_time": 100,
    "deadline": "2026-03-11T00:00:00",
}


class TestGoalEndpoints:

    def test_health(self, client):
        assert client.get("/").json()["status"] == "active"

    def test_create_and_list(self, client):
        created = client.post("/api/goals", json=GOAL_PAYLOAD)
        assert created.status_code == 201
        goal_id = created.json()["id"]

        listed = client.get("/api/goals").json()

        assert [goal["id"] for goal in listed] == [goal_id]
        assert "progress" in listed[0]

    def test_validation_errors_per_field(self, client):
        response = client.post("/api/goals", json={**GOAL_PAYLOAD, "title": "", "total_required_time": 0})

        assert response.status_code == 422
        fields = {error["loc"][-1] for error in response.json()["detail"]}
        assert {"title", "total_required_time"} <= fields
        assert client.get("/api/goals").json() == []

    def test_detail_with_progress_scenario(self, client, db_session, day_zero):
        goal = create_goal(db_session, total_required_time=100, created_at=day_zero)
        create_entry(db_session, goal.id, 20, day_zero.replace(day=2))
        create_entry(db_session, goal.id, 0.5, day_zero.replace(day=4))

        response = client.get(f"/api/goals/{goal.id}", params={"as_of": "2026-03-06T00:00:00"})

        body = response.json()
        assert response.status_code == 200
        assert body["progress"]["planned_hours"] == 50
        assert body["progress"]["actual_hours"] == 20.5
        assert body["progress"]["status"] == "significantly_behind"
        assert [entry["time_spent"] for entry in body["entries"]] == [0.5, 20]

    def test_detail_without_entries(self, client, db_session, day_zero):
        goal = create_goal(db_session, title="Fresh", created_at=day_zero)

        body = client.get(f"/api/goals/{goal.id}", params={"as_of": "2026-03-01T00:00:00"}).json()

        assert body["id"] == goal.id
        assert body["title"] == "Fresh"
        assert body["entries"] == []
        assert body["progress"]["actual_hours"] == 0
        assert body["progress"]["status"] == "on_track"
        assert client.get("/api/goals/nope").status_code == 404

    def test_update_and_missing(self, client, db_session):
        goal = create_goal(db_session)

        updated = client.put(f"/api/goals/{goal.id}", json={"title": "Renamed"})
        missing = client.put("/api/goals/nope", json={"title": "Renamed"})

        assert updated.json()["title"] == "Renamed"
        assert missing.status_code == 404

    def test_delete_cascades(self, client, db_session, day_zero):
        goal = create_goal(db_session)
        create_entry(db_session, goal.id, 1, day_zero)

        assert client.delete(f"/api/goals/{goal.id}").status_code == 204
        assert client.get(f"/api/goals/{goal.id}").status_code == 404
        assert client.get(f"/api/goals/{goal.id}/progress").status_code == 404
        assert client.delete(f"/api/goals/{goal.id}").status_code == 404


class TestProgressEndpoints:

    def test_log_and_delete(self, client, db_session):
        goal = create_goal(db_session)

        logged = client.post("/api/progress", json={
            "goal_id": goal.id, "time_spent": 2, "date": "2026-03-02T10:00:00"
        })
        entry_id = logged.json()["id"]

        assert logged.status_code == 201
        assert len(client.get(f"/api/goals/{goal.id}/progress").json()) == 1
        assert client.delete(f"/api/progress/{entry_id}").status_code == 204
        assert client.delete(f"/api/progress/{entry_id}").status_code == 404

    def test_log_against_unknown_goal(self, client):
        response = client.post("/api/progress", json={
            "goal_id": "ghost", "time_spent": 2, "date": "2026-03-02T10:00:00"
        })
        assert response.status_code == 404


class TestAnalyticsAndNotifications:

    def test_analytics(self, client, db_session, day_zero):
        goal = create_goal(db_session, created_at=day_zero)
        create_entry(db_session, goal.id, 3, day_zero)

        report = client.get("/api/analytics", params={"as_of": "2026-03-06T00:00:00", "recent_limit": 3}).json()

        assert report["has_goals"] is True
        assert report["most_productive_day"]["day"] == "Sunday"
        assert len(report["recent_entries"]) == 1

    def test_notification_settings_round_trip(self, client):
        assert client.get("/api/settings/notifications").json()["reminder_days"] == 2

        response = client.put("/api/settings/notifications", json={"reminder_days": 4, "reminder_time": "07:30"})

        assert response.json()["reminder_days"] == 4
        assert response.json()["reminder_time"] == "07:30"
        assert client.put("/api/settings/notifications", json={"reminder_time": "25:00"}).status_code == 422

    def test_check_notifications_once(self, client, db_session):
        create_goal(db_session, title="Old goal", created_at=datetime(2000, 1, 1))

        first = client.post("/api/notifications/check").json()
        second = client.post("/api/notifications/check").json()

        assert first["kind"] == "behind_schedule"
        assert second is None


class TestDataEndpoints:

    def test_export_import_round_trip(self, client, db_session, day_zero):
        goal = create_goal(db_session, created_at=day_zero)
        create_entry(db_session, goal.id, 3, day_zero)

        exported = client.get("/api/data/export")
        assert "goal-tracker-backup-" in exported.headers["content-disposition"]

        merged = client.post("/api/data/import", content=exported.content)
        assert merged.json()["goals_imported"] == 1
        assert len(client.get("/api/goals").json()) == 2

        replaced = client.post("/api/data/import", params={"overwrite": "true"}, content=exported.content)
        assert replaced.json()["overwrite"] is True
        assert len(client.get("/api/goals").json()) == 1

    def test_import_failure_message(self, client):
        response = client.post("/api/data/import", content=json.dumps({"progress": []}))

        assert response.status_code == 400
        assert "goals array is missing" in response.json()["detail"]

    def test_clear(self, client, db_session):
        create_goal(db_session)

        assert client.delete("/api/data").status_code == 204
        assert client.get("/api/goals").json() == []


class TestNonFiniteNumbers:
    """JSON numbers that overflow to infinity never reach the database"""

    HEADERS = {"Content-Type": "application/json"}

    def test_goal_create_rejects_infinite_hours(self, client):
        body = '{"title": "Forever", "total_required_time": 1e309, "deadline": "2026-03-11T00:00:00"}'

        response = client.post("/api/goals", content=body, headers=self.HEADERS)

        assert response.status_code == 422
        assert client.get("/api/goals").status_code == 200
        assert client.get("/api/goals").json() == []

    def test_goal_update_rejects_infinite_hours(self, client, db_session):
        goal = create_goal(db_session)

        response = client.put(f"/api/goals/{goal.id}", content='{"total_required_time": 1e309}', headers=self.HEADERS)

        assert response.status_code == 422
        assert client.get(f"/api/goals/{goal.id}").json()["total_required_time"] == 100

    def test_progress_log_rejects_infinite_time(self, client, db_session):
        goal = create_goal(db_session)
        body = '{"goal_id": "%s", "time_spent": 1e309, "date": "2026-03-02T10:00:00"}' % goal.id

        response = client.post("/api/progress", content=body, headers=self.HEADERS)

        assert response.status_code == 422
        assert client.get(f"/api/goals/{goal.id}/progress").json() == []
        assert client.get("/api/goals").status_code == 200

    def test_import_rejects_infinite_time(self, client, db_session, day_zero):
        goal = create_goal(db_session, created_at=day_zero)
        create_entry(db_session, goal.id, 3, day_zero)
        document = client.get("/api/data/export").json()
        document["progress"][0]["timeSpent"] = "OVERFLOW"
        raw = json.dumps(document).replace('"OVERFLOW"', "1e309")

        response = client.post("/api/data/import", content=raw)

        assert response.status_code == 400
        assert "invalid data" in response.json()["detail"]
        assert len(client.get("/api/goals").json()) == 1
        assert client.get(f"/api/goals/{goal.id}/progress").json()[0]["time_spent"] == 3
