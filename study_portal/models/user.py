"""User & Preferences Models"""

from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel
from study_portal.models.enums import UserRole


class User(BaseModel):
    """
    Student or teacher account.
    Users are deactivated through is_active, never hard-deleted.
    """
    __tablename__ = "users"

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    name = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)

    role = Column(Enum(UserRole, name="user_role"), default=UserRole.STUDENT, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    preferences = relationship(
        "UserPreferences",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    documents = relationship("Document", back_populates="uploader")
    taught_classes = relationship("Class", back_populates="teacher")
    enrollments = relationship("ClassEnrollment", back_populates="student")

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"


class UserPreferences(BaseModel):
    """Per-user UI and study settings, created with the account"""
    __tablename__ = "user_preferences"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    theme = Column(String(20), default="system", nullable=False)
    study_goal_minutes = Column(Integer, default=120, nullable=False)
    notifications = Column(Boolean, default=True, nullable=False)
    email_notifications = Column(Boolean, default=True, nullable=False)
    default_view = Column(String(20), default="grid", nullable=False)
    auto_save = Column(Boolean, default=True, nullable=False)
    pomodoro_focus = Column(Integer, default=25, nullable=False)
    pomodoro_break = Column(Integer, default=5, nullable=False)
    pomodoro_long_break = Column(Integer, default=15, nullable=False)

    user = relationship("User", back_populates="preferences")
