from volunteer_hub.models.user import User, UserSession
from volunteer_hub.utils.security import verify_password


class TestUserAdmin:
    def test_create_user(self, admin_client, db):
        r = admin_client.post("/api/users", json={
            "username": "newbie", "password": "long-enough-pw", "email": "Newbie@Example.org",
        })
        assert r.status_code == 201
        data = r.json()
        assert data["role"] == "user"
        assert data["email"] == "newbie@example.org"
        assert "password_hash" not in data

        stored = db.get(User, data["id"])
        assert stored.password_hash != "long-enough-pw"
        assert verify_password(stored.password_hash, "long-enough-pw")

    def test_create_requires_admin(self, client, user_client):
        body = {"username": "x", "password": "long-enough-pw", "email": "x@example.org"}
        assert client.post("/api/users", json=body).status_code == 401
        assert user_client.post("/api/users", json=body).status_code == 403

    def test_conflicts_name_the_field(self, admin_client, regular_user):
        r = admin_client.post("/api/users", json={
            "username": "poster", "password": "long-enough-pw", "email": "fresh@example.org",
        })
        assert r.status_code == 409
        assert r.json()["error"] == "Username already exists"

        r = admin_client.post("/api/users", json={
            "username": "fresh", "password": "long-enough-pw", "email": "POSTER@example.org",
        })
        assert r.status_code == 409
        assert r.json()["error"] == "Email already exists"

    def test_invalid_role_and_short_password(self, admin_client):
        r = admin_client.post("/api/users", json={
            "username": "x", "password": "long-enough-pw", "email": "x@example.org", "role": "owner",
        })
        assert r.status_code == 400
        r = admin_client.post("/api/users", json={"username": "x", "password": "short", "email": "x@example.org"})
        assert r.status_code == 400

    def test_list_users(self, admin_client, regular_user):
        r = admin_client.get("/api/users")
        assert r.status_code == 200
        assert {u["username"] for u in r.json()["users"]} == {"admin", "poster"}

    def test_delete_user_removes_sessions(self, admin_client, user_client, regular_user, db):
        user_id = regular_user.id
        assert db.query(UserSession).filter(UserSession.user_id == user_id).count() == 1
        r = admin_client.delete(f"/api/users/{user_id}")
        assert r.status_code == 200
        db.expire_all()
        assert db.get(User, user_id) is None
        assert db.query(UserSession).filter(UserSession.user_id == user_id).count() == 0


    def test_cannot_delete_self(self, admin_client, admin_user):
        r = admin_client.delete(f"/api/users/{admin_user.id}")
        assert r.status_code == 400


class TestSelfService:
    def test_view_and_update_own_account(self, user_client, regular_user, db):
        assert user_client.get(f"/api/users/{regular_user.id}").json()["username"] == "poster"

        r = user_client.put(f"/api/users/{regular_user.id}", json={"password": "brand-new-password"})
        assert r.status_code == 200
        db.expire_all()
        assert verify_password(db.get(User, regular_user.id).password_hash, "brand-new-password")

    def test_cannot_change_own_role(self, user_client, regular_user):
        r = user_client.put(f"/api/users/{regular_user.id}", json={"role": "admin"})
        assert r.status_code == 403

    def test_cannot_touch_other_accounts(self, user_client, other_user):
        assert user_client.get(f"/api/users/{other_user.id}").status_code == 403
        assert user_client.put(f"/api/users/{other_user.id}", json={"email": "z@example.org"}).status_code == 403

    def test_admin_can_deactivate(self, admin_client, user_client, regular_user):
        r = admin_client.put(f"/api/users/{regular_user.id}", json={"is_active": False})
        assert r.status_code == 200
        assert r.json()["is_active"] is False
        assert user_client.get("/api/auth/session").json()["authenticated"] is False

    def test_empty_update(self, user_client, regular_user):
        r = user_client.put(f"/api/users/{regular_user.id}", json={})
        assert r.status_code == 400
