"""Personal Study Models (Flashcard Decks, Notes, Study Materials)"""

from sqlalchemy import Column, String, Text, Integer, BigInteger, Float, DateTime, Enum, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel
from study_portal.models.enums import Difficulty, MaterialType


class FlashcardDeck(BaseModel):
    """User-owned deck; cards and stats go with it"""
    __tablename__ = "flashcard_decks"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), default="#3b82f6", nullable=False)

    cards = relationship(
        "Flashcard",
        back_populates="deck",
        cascade="all, delete-orphan",
        order_by="Flashcard.created_at",
    )
    stats = relationship("DeckStats", back_populates="deck", uselist=False, cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<FlashcardDeck {self.name}>"


class Flashcard(BaseModel):
    """
    Front/back card.
    Review scheduling fields are stored with their defaults; nothing updates them yet.
    """
    __tablename__ = "flashcards"

    deck_id = Column(Uuid, ForeignKey("flashcard_decks.id", ondelete="CASCADE"), nullable=False, index=True)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    difficulty = Column(
        Enum(Difficulty, name="difficulty", values_callable=lambda x: [e.value for e in x]),
        default=Difficulty.MEDIUM,
        nullable=False,
    )
    repetitions = Column(Integer, default=0, nullable=False)
    ease_factor = Column(Float, default=2.5, nullable=False)
    interval_days = Column(Integer, default=0, nullable=False)
    next_review = Column(DateTime, nullable=True)
    last_reviewed = Column(DateTime, nullable=True)
    tags = Column(JSON, default=list, nullable=False)

    deck = relationship("FlashcardDeck", back_populates="cards")


class DeckStats(BaseModel):
    """Card counts per learning stage for a deck"""
    __tablename__ = "deck_stats"

    deck_id = Column(Uuid, ForeignKey("flashcard_decks.id", ondelete="CASCADE"), unique=True, nullable=False)
    total_cards = Column(Integer, default=0, nullable=False)
    new_cards = Column(Integer, default=0, nullable=False)
    learning_cards = Column(Integer, default=0, nullable=False)
    review_cards = Column(Integer, default=0, nullable=False)
    suspended_cards = Column(Integer, default=0, nullable=False)

    deck = relationship("FlashcardDeck", back_populates="stats")


class Note(BaseModel):
    """Free-text note owned by one user"""
    __tablename__ = "notes"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, default=list, nullable=False)

    user = relationship("User")


class StudyMaterial(BaseModel):
    """
    Personal study resource: an uploaded file or an external link.
    folder_id is a client-side grouping key; folders are not stored here.
    """
    __tablename__ = "study_materials"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(
        Enum(MaterialType, name="material_type", values_callable=lambda x: [e.value for e in x]),
        default=MaterialType.OTHER,
        nullable=False,
    )
    url = Column(String(2048), nullable=True)
    file_name = Column(String(255), nullable=True)
    file_path = Column(String(500), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    mime_type = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    color = Column(String(20), nullable=True)
    folder_id = Column(String(64), nullable=True)

    user = relationship("User")

    def __repr__(self) -> str:
        return f"<StudyMaterial {self.title}>"
