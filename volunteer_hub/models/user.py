from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from volunteer_hub.database import Base

ROLES = ("admin", "user", "viewer")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    role = Column(Text, nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
    last_login = Column(Text)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    jobs = relationship("Job", back_populates="poster")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(Text, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    user_agent = Column(Text)
    ip_address = Column(Text)

    user = relationship("User", back_populates="sessions")
