"""Assessment Models (Assignments, Submissions, Grades)"""

from sqlalchemy import (
    Column, String, Text, Integer, BigInteger, Float, DateTime, Enum, ForeignKey, Table, Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel
from study_portal.models.enums import SubmissionStatus
from study_portal.utils.time import get_utc_now


class Assignment(BaseModel):
    """
    Teacher-owned task scoped to one class and subject.
    Hard delete removes its submissions and grades.
    """
    __tablename__ = "assignments"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    due_date = Column(DateTime, nullable=False)
    max_points = Column(Integer, default=100, nullable=False)

    # Relationships
    subject = relationship("Subject", back_populates="assignments")
    class_ = relationship("Class", back_populates="assignments")
    teacher = relationship("User")
    documents = relationship("Document", secondary="assignment_documents", back_populates="assignments")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Assignment {self.title}>"


# Association table for Assignment <-> reference Document
assignment_documents = Table(
    "assignment_documents",
    BaseModel.metadata,
    Column("assignment_id", Uuid, ForeignKey("assignments.id", ondelete="CASCADE"), primary_key=True),
    Column("document_id", Uuid, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True),
)


class Submission(BaseModel):
    """
    A student's answer to an assignment.
    At most one per (assignment, student); resubmission updates in place.
    """
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_student"),
    )

    assignment_id = Column(Uuid, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=True)
    file_name = Column(String(255), nullable=True)
    file_path = Column(String(500), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    status = Column(
        Enum(SubmissionStatus, name="submission_status"),
        default=SubmissionStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    submitted_at = Column(DateTime, default=get_utc_now, nullable=False)

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User")
    grade = relationship("Grade", back_populates="submission", uselist=False, cascade="all, delete-orphan")


class Grade(BaseModel):
    """One grade per submission; rewritten on regrade"""
    __tablename__ = "grades"

    submission_id = Column(Uuid, ForeignKey("submissions.id", ondelete="CASCADE"), unique=True, nullable=False)
    student_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    points = Column(Float, nullable=False)
    max_points = Column(Float, nullable=False)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime, default=get_utc_now, nullable=False)

    submission = relationship("Submission", back_populates="grade")
    student = relationship("User", foreign_keys=[student_id])
    teacher = relationship("User", foreign_keys=[teacher_id])
