from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "VolunteerHub"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    session_cookie_name: str = "session"
    session_ttl_days: int = 7
    # Set in production so the session cookie is only sent over HTTPS.
    cookie_secure: bool = False

    job_ttl_days: int = 30
    default_distance_miles: float = 25.0
    default_page_size: int = 20
    max_page_size: int = 100
    recent_applications_limit: int = 10

    # /migrate creates this admin when a password is configured and no admin exists yet.
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str | None = None
    bootstrap_admin_email: str = "admin@example.org"

    cors_origins: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    @property
    def db_path(self) -> Path:
        return self.data_dir / "db.sqlite"

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60

    model_config = {"env_prefix": "VOLUNTEER_"}


settings = Settings()
