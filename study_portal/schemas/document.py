from typing import Optional, List
from uuid import UUID
from datetime import datetime
from pydantic import Field, field_validator

from study_portal.models.enums import DocumentType, FeedbackType
from study_portal.schemas.common import CamelModel, BigIntString
from study_portal.schemas.subject import SubjectBrief
from study_portal.schemas.user import UserBrief


class TagResponse(CamelModel):
    id: UUID
    name: str


class DocumentUpdate(CamelModel):
    """Partial update; omitted fields are left alone"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    subject_id: Optional[UUID] = None
    type: Optional[DocumentType] = None
    is_shared: Optional[bool] = None
    allow_peer_feedback: Optional[bool] = None


class DocumentResponse(CamelModel):
    id: UUID
    title: str
    description: Optional[str] = None
    file_name: str
    file_path: str
    file_size: BigIntString
    mime_type: str
    type: DocumentType
    subject_id: UUID
    uploader_id: UUID
    is_shared: bool
    allow_peer_feedback: bool
    download_count: int
    average_rating: float
    total_ratings: int
    created_at: datetime
    updated_at: datetime
    subject: Optional[SubjectBrief] = None
    uploader: Optional[UserBrief] = None
    tags: List[TagResponse] = []
    feedback_count: int = 0
    version_count: int = 0

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, v):
        return v or []


class VersionResponse(CamelModel):
    id: UUID
    document_id: UUID
    version: int
    file_name: str
    file_path: str
    file_size: BigIntString
    changes: Optional[str] = None
    created_at: datetime


class FeedbackCreate(CamelModel):
    """Type is not accepted here; it follows the author's role"""
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=5000)


class FeedbackResponse(CamelModel):
    id: UUID
    document_id: UUID
    author_id: UUID
    teacher_id: Optional[UUID] = None
    rating: int
    comment: Optional[str] = None
    type: FeedbackType
    created_at: datetime
    updated_at: datetime
    author: Optional[UserBrief] = None


class FeedbackList(CamelModel):
    feedback: List[FeedbackResponse]
    average_rating: float
    total_ratings: int


class DocumentDetailResponse(DocumentResponse):
    """Single document with its latest versions and all feedback"""
    versions: List[VersionResponse] = []
    feedback: List[FeedbackResponse] = []
