import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from volunteer_hub.config import settings
from volunteer_hub.database import get_db, get_engine, init_db
from volunteer_hub.main import app
from volunteer_hub.models.job import Job
from volunteer_hub.models.user import User
from volunteer_hub.utils.dates import now_ts, ts_in
from volunteer_hub.utils.security import hash_password

ADMIN_PASSWORD = "admin-password-123"
USER_PASSWORD = "user-password-123"


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "VolunteerHub"
    path.mkdir()
    return path


@pytest.fixture
def test_db(data_dir):
    db_path = data_dir / "db.sqlite"
    init_db(db_path)
    engine = get_engine(db_path)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def client(data_dir, test_db):
    original_data_dir = settings.data_dir
    settings.data_dir = data_dir
    c = TestClient(app)
    yield c
    settings.data_dir = original_data_dir


def _create_user(db, username, email, password, role):
    now = now_ts()
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db):
    return _create_user(db, "admin", "admin@example.org", ADMIN_PASSWORD, "admin")


@pytest.fixture
def regular_user(db):
    return _create_user(db, "poster", "poster@example.org", USER_PASSWORD, "user")


@pytest.fixture
def other_user(db):
    return _create_user(db, "other", "other@example.org", USER_PASSWORD, "user")


def _login(username, password):
    c = TestClient(app)
    r = c.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return c


@pytest.fixture
def admin_client(client, admin_user):
    return _login("admin", ADMIN_PASSWORD)


@pytest.fixture
def user_client(client, regular_user):
    return _login("poster", USER_PASSWORD)


@pytest.fixture
def other_client(client, other_user):
    return _login("other", USER_PASSWORD)


@pytest.fixture
def job_payload():
    return {
        "title": "Food Pantry Helper",
        "description": "Sort and pack donations for weekend distribution",
        "category": "community-support",
        "contact_email": "Coordinator@Example.org ",
        "zipcode": "23510",
        "volunteers_needed": 2,
        "skills_needed": ["lifting", "sorting"],
        "urgency": "high",
    }


@pytest.fixture
def make_job(db, regular_user):
    """Insert a job directly, bypassing the API, for listing and lifecycle tests."""
    def _make(**overrides):
        now = now_ts()
        fields = {
            "title": "Park Cleanup",
            "description": "Pick up litter along the river trail",
            "category": "community-support",
            "contact_email": "parks@example.org",
            "zipcode": "23510",
            "volunteers_needed": 3,
            "urgency": "medium",
            "status": "active",
            "posted_by": regular_user.id,
            "expires_at": ts_in(days=30),
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        job = Job(**fields)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    return _make
