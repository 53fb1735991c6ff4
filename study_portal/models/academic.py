"""Academic Models (Subjects, Classes, Enrollments)"""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel, StatusMixin
from study_portal.utils.time import get_utc_now


class Subject(BaseModel, StatusMixin):
    """
    Academic category shared by documents, classes and assignments.
    Globally visible; created by teachers.
    """
    __tablename__ = "subjects"

    name = Column(String(255), nullable=False)
    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    color = Column(String(20), default="#3b82f6", nullable=False)

    documents = relationship("Document", back_populates="subject")
    classes = relationship("Class", back_populates="subject")
    assignments = relationship("Assignment", back_populates="subject")

    def __repr__(self) -> str:
        return f"<Subject {self.code}>"


class Class(BaseModel, StatusMixin):
    """
    Teacher-owned class section.
    Soft-deleted by setting is_active to false.
    """
    __tablename__ = "classes"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    semester = Column(String(50), nullable=False)  # e.g. "Fall"
    year = Column(Integer, nullable=False)

    subject = relationship("Subject", back_populates="classes")
    teacher = relationship("User", back_populates="taught_classes")
    enrollments = relationship("ClassEnrollment", back_populates="class_", cascade="all, delete-orphan")
    assignments = relationship("Assignment", back_populates="class_", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Class {self.name}>"


class ClassEnrollment(BaseModel):
    """Links one student to one class; the pair is unique"""
    __tablename__ = "class_enrollments"
    __table_args__ = (
        UniqueConstraint("class_id", "student_id", name="uq_class_enrollment"),
    )

    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    enrolled_at = Column(DateTime, default=get_utc_now, nullable=False)

    class_ = relationship("Class", back_populates="enrollments")
    student = relationship("User", back_populates="enrollments")
