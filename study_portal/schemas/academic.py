from typing import Optional, List
from uuid import UUID
from datetime import datetime
from pydantic import EmailStr, Field

from study_portal.schemas.common import CamelModel
from study_portal.schemas.subject import SubjectBrief
from study_portal.schemas.user import UserBrief


class ClassBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    semester: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=2020, le=2100)


class ClassCreate(ClassBase):
    subject_id: UUID


class ClassUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    semester: Optional[str] = Field(None, min_length=1, max_length=50)
    year: Optional[int] = Field(None, ge=2020, le=2100)
    subject_id: Optional[UUID] = None


class ClassResponse(ClassBase):
    id: UUID
    subject_id: UUID
    teacher_id: UUID
    is_active: bool
    created_at: datetime
    subject: Optional[SubjectBrief] = None
    teacher: Optional[UserBrief] = None
    student_count: int = 0
    assignment_count: int = 0


class EnrollmentResponse(CamelModel):
    id: UUID
    class_id: UUID
    student_id: UUID
    enrolled_at: datetime
    student: Optional[UserBrief] = None


class ClassAssignmentSummary(CamelModel):
    id: UUID
    title: str
    due_date: datetime
    max_points: int
    submission_count: int = 0


class ClassDetailResponse(ClassResponse):
    enrollments: List[EnrollmentResponse] = []
    assignments: List[ClassAssignmentSummary] = []


class EnrollmentRequest(CamelModel):
    student_emails: List[EmailStr] = Field(..., min_length=1)


class EnrollmentResult(CamelModel):
    """Bulk enrollment outcome; failures are reported per email"""
    enrollments: List[EnrollmentResponse]
    errors: List[str]
