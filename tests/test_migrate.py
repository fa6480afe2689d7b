from volunteer_hub.config import settings
from volunteer_hub.models.user import User, UserSession
from volunteer_hub.utils.dates import now_ts, ts_in


class TestMigrate:
    def test_migrate_is_idempotent(self, client):
        first = client.get("/api/migrate")
        assert first.status_code == 200
        data = first.json()
        assert data["success"] is True
        assert data["integrity"] == "ok"
        assert data["tables"]["zipcode_coordinates"] == 12
        assert set(data["tables"]) >= {"jobs", "job_applications", "users", "sessions"}

        second = client.get("/api/migrate").json()
        assert second["tables"] == data["tables"]

    def test_bootstrap_admin(self, client, db, monkeypatch):
        monkeypatch.setattr(settings, "bootstrap_admin_password", "bootstrap-pass-1")
        assert client.get("/api/migrate").json()["admin_created"] is True
        assert db.query(User).filter_by(username="admin", role="admin").count() == 1
        assert client.get("/api/migrate").json()["admin_created"] is False

        r = client.post("/api/auth/login", json={"username": "admin", "password": "bootstrap-pass-1"})
        assert r.status_code == 200

    def test_no_bootstrap_without_password(self, client, db):
        assert client.get("/api/migrate").json()["admin_created"] is False
        assert db.query(User).count() == 0

    def test_purges_expired_sessions(self, client, db, regular_user):
        db.add(UserSession(
            id="e" * 64, user_id=regular_user.id, expires_at=ts_in(seconds=-5), created_at=now_ts(),
        ))
        db.commit()
        assert client.get("/api/migrate").json()["expired_sessions_removed"] == 1


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_unknown_route_uses_error_envelope(self, client):
        r = client.get("/api/nowhere")
        assert r.status_code == 404
        assert r.json() == {"error": "Not Found"}
