from typing import Optional, List
from uuid import UUID
from datetime import datetime
from pydantic import Field, HttpUrl

from study_portal.models.enums import Difficulty, MaterialType
from study_portal.schemas.common import BigIntString, CamelModel


class FlashcardCreate(CamelModel):
    front: str = Field(..., min_length=1)
    back: str = Field(..., min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    tags: List[str] = []


class DeckCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    color: str = "#3b82f6"
    flashcards: List[FlashcardCreate] = []


class FlashcardResponse(CamelModel):
    id: UUID
    front: str
    back: str
    difficulty: Difficulty
    repetitions: int
    ease_factor: float
    interval_days: int
    next_review: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None
    tags: List[str] = []
    created_at: datetime


class DeckStatsResponse(CamelModel):
    total_cards: int
    new_cards: int
    learning_cards: int
    review_cards: int
    suspended_cards: int


class DeckResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    color: str
    created_at: datetime
    updated_at: datetime
    cards: List[FlashcardResponse] = []
    stats: Optional[DeckStatsResponse] = None


class NoteCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255, description="Title is required")
    content: str = Field(..., min_length=1, description="Content is required")
    tags: List[str] = []


class NoteResponse(CamelModel):
    id: UUID
    title: str
    content: str
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime


class MaterialCreate(CamelModel):
    """Link or metadata-only material; files go through the upload route"""
    title: str = Field(..., min_length=1, max_length=255, description="Title is required")
    description: Optional[str] = None
    type: MaterialType
    url: Optional[HttpUrl] = None
    category: Optional[str] = Field(None, max_length=100)
    tags: List[str] = []
    color: Optional[str] = Field(None, max_length=20)
    folder_id: Optional[str] = Field(None, max_length=64)


class MaterialResponse(CamelModel):
    id: UUID
    title: str
    description: Optional[str] = None
    type: MaterialType
    url: Optional[str] = None
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_size: BigIntString = None
    mime_type: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    color: Optional[str] = None
    folder_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
