from typing import Optional, List
from uuid import UUID
from datetime import datetime
from pydantic import Field, field_validator, model_validator

from study_portal.core.shaping import percentage
from study_portal.models.enums import SubmissionStatus
from study_portal.schemas.common import CamelModel, BigIntString
from study_portal.schemas.subject import SubjectBrief
from study_portal.schemas.user import UserBrief
from study_portal.utils.time import to_naive_utc


class AssignmentBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: datetime
    max_points: int = Field(100, ge=1)

    @field_validator("due_date")
    @classmethod
    def _naive_due_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class AssignmentCreate(AssignmentBase):
    subject_id: UUID
    class_id: UUID
    document_ids: List[UUID] = []


class AssignmentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    max_points: Optional[int] = Field(None, ge=1)
    document_ids: Optional[List[UUID]] = None

    @field_validator("due_date")
    @classmethod
    def _naive_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class AssignmentDocument(CamelModel):
    id: UUID
    title: str
    file_name: str
    mime_type: str


class ClassBrief(CamelModel):
    id: UUID
    name: str
    semester: str
    year: int


class MySubmission(CamelModel):
    id: UUID
    status: SubmissionStatus
    submitted_at: datetime
    points: Optional[float] = None
    max_points: Optional[float] = None


class AssignmentResponse(AssignmentBase):
    id: UUID
    subject_id: UUID
    class_id: UUID
    teacher_id: UUID
    created_at: datetime
    subject: Optional[SubjectBrief] = None
    class_: Optional[ClassBrief] = Field(None, alias="class")
    teacher: Optional[UserBrief] = None
    documents: List[AssignmentDocument] = []
    submission_count: int = 0
    # Students only: their own submission, if any
    my_submission: Optional[MySubmission] = None


class GradeCreate(CamelModel):
    points: float = Field(..., ge=0)
    max_points: Optional[float] = Field(None, gt=0)
    feedback: Optional[str] = None


class GradeResponse(CamelModel):
    id: UUID
    submission_id: UUID
    student_id: UUID
    teacher_id: UUID
    points: float
    max_points: float
    feedback: Optional[str] = None
    graded_at: datetime
    percentage: Optional[float] = None

    @model_validator(mode="after")
    def _fill_percentage(self):
        self.percentage = percentage(self.points, self.max_points)
        return self


class SubmissionResponse(CamelModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    content: Optional[str] = None
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_size: BigIntString = None
    status: SubmissionStatus
    submitted_at: datetime
    updated_at: datetime
    student: Optional[UserBrief] = None
    grade: Optional[GradeResponse] = None


class AssignmentBrief(CamelModel):
    id: UUID
    title: str
    class_id: UUID
    teacher_id: UUID
    due_date: datetime
    max_points: int


class SubmissionDetailResponse(SubmissionResponse):
    assignment: Optional[AssignmentBrief] = None
