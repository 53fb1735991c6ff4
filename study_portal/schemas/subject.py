from typing import Optional
from uuid import UUID
from pydantic import Field

from study_portal.schemas.common import CamelModel


class SubjectCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Subject name is required")
    code: str = Field(..., min_length=1, max_length=50, description="Subject code is required")
    description: Optional[str] = None
    color: str = "#3b82f6"


class SubjectBrief(CamelModel):
    id: UUID
    name: str
    code: str
    color: str


class SubjectCounts(CamelModel):
    documents: int = 0
    classes: int = 0
    assignments: int = 0


class SubjectResponse(SubjectBrief):
    description: Optional[str] = None
    is_active: bool
    counts: SubjectCounts = SubjectCounts()
