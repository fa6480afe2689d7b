import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from volunteer_hub.config import settings
from volunteer_hub.utils.geo import calculate_distance_miles


class Base(DeclarativeBase):
    pass


def register_sql_functions(dbapi_conn):
    dbapi_conn.create_function(
        "calculate_distance_miles", 4, calculate_distance_miles, deterministic=True
    )


def _on_connect(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()
    register_sql_functions(dbapi_conn)


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _on_connect)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- USERS & SESSIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    username      TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    email         TEXT NOT NULL UNIQUE,
    role          TEXT NOT NULL DEFAULT 'user'
                  CHECK(role IN ('admin','user','viewer')),
    is_active     INTEGER NOT NULL DEFAULT 1,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    last_login    TEXT
);

CREATE TABLE IF NOT EXISTS sessions (
    id         TEXT PRIMARY KEY,
    user_id    INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    expires_at TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    user_agent TEXT,
    ip_address TEXT
);

CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id);
CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at);

-- ============================================================
-- AUTH THROTTLE
-- ============================================================
CREATE TABLE IF NOT EXISTS auth_throttle (
    key             TEXT PRIMARY KEY,
    failed_attempts INTEGER NOT NULL,
    last_failed_at  REAL NOT NULL
);

-- ============================================================
-- ZIPCODE REFERENCE
-- ============================================================
CREATE TABLE IF NOT EXISTS zipcode_coordinates (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    zipcode   TEXT NOT NULL UNIQUE,
    city      TEXT,
    state     TEXT,
    latitude  REAL NOT NULL,
    longitude REAL NOT NULL,
    county    TEXT,
    timezone  TEXT
);

-- ============================================================
-- JOBS
-- ============================================================
CREATE TABLE IF NOT EXISTS jobs (
    id                        INTEGER PRIMARY KEY AUTOINCREMENT,
    title                     TEXT NOT NULL,
    description               TEXT NOT NULL,
    category                  TEXT NOT NULL,
    contact_name              TEXT NOT NULL DEFAULT '',
    contact_email             TEXT NOT NULL,
    contact_phone             TEXT NOT NULL DEFAULT '',
    address                   TEXT NOT NULL DEFAULT '',
    city                      TEXT NOT NULL DEFAULT '',
    state                     TEXT NOT NULL DEFAULT '',
    zipcode                   TEXT NOT NULL,
    latitude                  REAL,
    longitude                 REAL,
    skills_needed             TEXT NOT NULL DEFAULT '',
    time_commitment           TEXT NOT NULL DEFAULT '',
    duration_hours            REAL,
    volunteers_needed         INTEGER NOT NULL DEFAULT 1 CHECK(volunteers_needed >= 1),
    age_requirement           TEXT NOT NULL DEFAULT '',
    background_check_required INTEGER NOT NULL DEFAULT 0,
    training_provided         INTEGER NOT NULL DEFAULT 0,
    start_date                TEXT,
    end_date                  TEXT,
    flexible_schedule         INTEGER NOT NULL DEFAULT 0,
    preferred_times           TEXT NOT NULL DEFAULT '',
    urgency                   TEXT NOT NULL DEFAULT 'medium'
                              CHECK(urgency IN ('low','medium','high','critical')),
    remote_possible           INTEGER NOT NULL DEFAULT 0,
    transportation_provided   INTEGER NOT NULL DEFAULT 0,
    meal_provided             INTEGER NOT NULL DEFAULT 0,
    stipend_amount            REAL,
    status                    TEXT NOT NULL DEFAULT 'active'
                              CHECK(status IN ('active','filled','expired','cancelled')),
    posted_by                 INTEGER REFERENCES users(id) ON DELETE SET NULL,
    expires_at                TEXT NOT NULL,
    created_at                TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at                TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_jobs_status_expires ON jobs(status, expires_at);
CREATE INDEX IF NOT EXISTS idx_jobs_category ON jobs(category);
CREATE INDEX IF NOT EXISTS idx_jobs_zipcode ON jobs(zipcode);
CREATE INDEX IF NOT EXISTS idx_jobs_posted_by ON jobs(posted_by);

-- ============================================================
-- JOB APPLICATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS job_applications (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id               INTEGER NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    volunteer_name       TEXT NOT NULL,
    email                TEXT NOT NULL,
    phone                TEXT,
    message              TEXT,
    availability         TEXT,
    experience           TEXT,
    preferred_start_date TEXT,
    status               TEXT NOT NULL DEFAULT 'pending'
                         CHECK(status IN ('pending','accepted','rejected','withdrawn')),
    admin_notes          TEXT,
    applied_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    responded_at         TEXT,
    updated_at           TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_job_applications_job_email ON job_applications(job_id, email);
CREATE INDEX IF NOT EXISTS idx_job_applications_status ON job_applications(job_id, status);
CREATE INDEX IF NOT EXISTS idx_job_applications_email ON job_applications(email);

-- ============================================================
-- JOB CATEGORIES (admin-editable)
-- ============================================================
CREATE TABLE IF NOT EXISTS job_categories (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    category_name TEXT NOT NULL,
    category_type TEXT NOT NULL CHECK(category_type IN ('volunteer','requester')),
    description   TEXT,
    display_order INTEGER NOT NULL DEFAULT 0,
    is_active     INTEGER NOT NULL DEFAULT 1,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    UNIQUE(category_name, category_type)
);

-- ============================================================
-- VOLUNTEER LOGS
-- ============================================================
CREATE TABLE IF NOT EXISTS partnership_logs (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name        TEXT NOT NULL,
    last_name         TEXT NOT NULL,
    organization      TEXT NOT NULL,
    email             TEXT NOT NULL,
    phone             TEXT NOT NULL,
    families_served   INTEGER NOT NULL,
    events            TEXT NOT NULL DEFAULT '[]',
    prepared_by_first TEXT NOT NULL,
    prepared_by_last  TEXT NOT NULL,
    position_title    TEXT NOT NULL,
    created_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_partnership_logs_email ON partnership_logs(email);
CREATE INDEX IF NOT EXISTS idx_partnership_logs_created ON partnership_logs(created_at);

CREATE TABLE IF NOT EXISTS activity_logs (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    volunteer_name    TEXT NOT NULL,
    email             TEXT NOT NULL,
    phone             TEXT,
    student_id        TEXT,
    activities        TEXT NOT NULL DEFAULT '[]',
    prepared_by_first TEXT NOT NULL,
    prepared_by_last  TEXT NOT NULL,
    position_title    TEXT NOT NULL,
    created_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_activity_logs_email ON activity_logs(email);
CREATE INDEX IF NOT EXISTS idx_activity_logs_created ON activity_logs(created_at);

-- ============================================================
-- VOLUNTEER REGISTRATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS volunteer_registrations (
    id                             INTEGER PRIMARY KEY AUTOINCREMENT,
    username                       TEXT NOT NULL UNIQUE,
    first_name                     TEXT NOT NULL,
    last_name                      TEXT NOT NULL,
    email                          TEXT NOT NULL UNIQUE,
    phone                          TEXT,
    birth_date                     TEXT,
    address                        TEXT NOT NULL,
    city                           TEXT NOT NULL,
    state                          TEXT NOT NULL,
    zipcode                        TEXT NOT NULL,
    latitude                       REAL,
    longitude                      REAL,
    skills                         TEXT NOT NULL DEFAULT '[]',
    interests                      TEXT NOT NULL DEFAULT '[]',
    categories_interested          TEXT NOT NULL DEFAULT '[]',
    experience_level               TEXT NOT NULL DEFAULT 'beginner',
    availability                   TEXT NOT NULL DEFAULT '{}',
    max_distance                   REAL NOT NULL DEFAULT 25,
    transportation                 TEXT NOT NULL DEFAULT 'own',
    emergency_contact_name         TEXT NOT NULL,
    emergency_contact_phone        TEXT NOT NULL,
    emergency_contact_relationship TEXT NOT NULL,
    background_check_consent       INTEGER NOT NULL DEFAULT 0,
    email_notifications            INTEGER NOT NULL DEFAULT 1,
    sms_notifications              INTEGER NOT NULL DEFAULT 0,
    notes                          TEXT NOT NULL DEFAULT '',
    status                         TEXT NOT NULL DEFAULT 'active',
    created_at                     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at                     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_volunteer_registrations_created ON volunteer_registrations(created_at);
"""

VIEWS_SQL = """\
CREATE VIEW IF NOT EXISTS active_jobs_with_location AS
SELECT
    j.*,
    zc.city AS zip_city,
    zc.state AS zip_state,
    COALESCE(j.latitude, zc.latitude) AS computed_latitude,
    COALESCE(j.longitude, zc.longitude) AS computed_longitude,
    (SELECT COUNT(*) FROM job_applications ja
      WHERE ja.job_id = j.id AND ja.status = 'accepted') AS filled_positions,
    (j.volunteers_needed - (SELECT COUNT(*) FROM job_applications ja
      WHERE ja.job_id = j.id AND ja.status = 'accepted')) AS positions_remaining
FROM jobs j
LEFT JOIN zipcode_coordinates zc ON zc.zipcode = j.zipcode
WHERE j.status = 'active'
  AND j.expires_at > strftime('%Y-%m-%dT%H:%M:%SZ','now');
"""

SEED_ZIPCODES = [
    ("23502", "Norfolk", "VA", 36.8945, -76.2590),
    ("23503", "Norfolk", "VA", 36.8520, -76.2869),
    ("23504", "Norfolk", "VA", 36.8850, -76.2200),
    ("23505", "Norfolk", "VA", 36.9180, -76.2080),
    ("23507", "Norfolk", "VA", 36.8640, -76.2440),
    ("23508", "Norfolk", "VA", 36.8790, -76.1950),
    ("23509", "Norfolk", "VA", 36.9260, -76.2590),
    ("23510", "Norfolk", "VA", 36.8470, -76.2950),
    ("23511", "Norfolk", "VA", 36.8850, -76.3050),
    ("23513", "Norfolk", "VA", 36.8650, -76.1750),
    ("23518", "Norfolk", "VA", 36.8380, -76.1450),
    ("23529", "Norfolk", "VA", 36.9470, -76.2350),
]


MIGRATIONS = [
    # v0.2: application availability notes
    "ALTER TABLE job_applications ADD COLUMN preferred_start_date TEXT",
    # v0.3: login throttle table
    "CREATE TABLE IF NOT EXISTS auth_throttle (key TEXT PRIMARY KEY, failed_attempts INTEGER NOT NULL, last_failed_at REAL NOT NULL)",
]


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    conn.executescript(VIEWS_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # already applied
    conn.executemany(
        "INSERT OR IGNORE INTO zipcode_coordinates (zipcode, city, state, latitude, longitude) "
        "VALUES (?, ?, ?, ?, ?)",
        SEED_ZIPCODES,
    )
    conn.commit()
    conn.close()
