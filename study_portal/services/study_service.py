"""Flashcard decks, notes and study materials; all private to their owner"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import ForbiddenError, NotFoundError
from study_portal.models.enums import MaterialType
from study_portal.models.study import DeckStats, Flashcard, FlashcardDeck, Note, StudyMaterial
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.study import (
    DeckCreate,
    DeckResponse,
    MaterialCreate,
    MaterialResponse,
    NoteCreate,
    NoteResponse,
)
from study_portal.services import storage_service

logger = logging.getLogger(__name__)


class FlashcardService:

    @staticmethod
    async def list_decks(db: AsyncSession, user: User) -> List[DeckResponse]:
        result = await db.execute(
            select(FlashcardDeck)
            .options(selectinload(FlashcardDeck.cards), selectinload(FlashcardDeck.stats))
            .where(FlashcardDeck.user_id == user.id)
            .order_by(FlashcardDeck.created_at.desc())
        )
        return [DeckResponse.model_validate(d) for d in result.scalars().all()]

    @staticmethod
    async def create_deck(db: AsyncSession, user: User, data: DeckCreate) -> DeckResponse:
        """Deck, cards and stats are committed together or not at all"""
        deck = FlashcardDeck(
            user_id=user.id,
            name=data.name,
            description=data.description,
            color=data.color,
            cards=[
                Flashcard(front=c.front, back=c.back, difficulty=c.difficulty, tags=list(c.tags))
                for c in data.flashcards
            ],
            stats=DeckStats(total_cards=len(data.flashcards), new_cards=len(data.flashcards)),
        )
        db.add(deck)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            logger.warning("Deck creation rolled back", extra={"user_id": str(user.id)})
            raise

        logger.info("Deck created", extra={"deck_id": str(deck.id), "cards": len(data.flashcards)})
        return DeckResponse.model_validate(deck)

    @staticmethod
    async def delete_deck(db: AsyncSession, user: User, deck_id: UUID) -> None:
        deck = (await db.execute(
            select(FlashcardDeck)
            .options(selectinload(FlashcardDeck.cards), selectinload(FlashcardDeck.stats))
            .where(FlashcardDeck.id == deck_id)
        )).scalar_one_or_none()
        if deck is None:
            raise NotFoundError("Deck not found")
        if not access.owns(user, deck.user_id):
            raise ForbiddenError()
        await db.delete(deck)
        await db.commit()


class NoteService:

    @staticmethod
    async def list_notes(db: AsyncSession, user: User) -> List[NoteResponse]:
        result = await db.execute(
            select(Note).where(Note.user_id == user.id).order_by(Note.updated_at.desc())
        )
        return [NoteResponse.model_validate(n) for n in result.scalars().all()]

    @staticmethod
    async def create_note(db: AsyncSession, user: User, data: NoteCreate) -> NoteResponse:
        note = Note(user_id=user.id, title=data.title, content=data.content, tags=list(data.tags))
        db.add(note)
        await db.commit()
        return NoteResponse.model_validate(note)

    @staticmethod
    async def delete_note(db: AsyncSession, user: User, note_id: UUID) -> None:
        note = await db.get(Note, note_id)
        if note is None:
            raise NotFoundError("Note not found")
        if not access.owns(user, note.user_id):
            raise ForbiddenError()
        await db.delete(note)
        await db.commit()


def material_type_for(mime_type: Optional[str]) -> MaterialType:
    """Material type inferred from an uploaded file's MIME type."""
    mime = (mime_type or "").lower()
    if "pdf" in mime:
        return MaterialType.PDF
    if "word" in mime or "document" in mime:
        return MaterialType.DOC
    if mime.startswith("image/"):
        return MaterialType.IMAGE
    if mime.startswith("video/"):
        return MaterialType.VIDEO
    if mime.startswith("audio/"):
        return MaterialType.AUDIO
    return MaterialType.OTHER


class MaterialService:

    @staticmethod
    async def list_materials(db: AsyncSession, user: User) -> List[MaterialResponse]:
        result = await db.execute(
            select(StudyMaterial)
            .where(StudyMaterial.user_id == user.id)
            .order_by(StudyMaterial.created_at.desc())
        )
        return [MaterialResponse.model_validate(m) for m in result.scalars().all()]

    @staticmethod
    async def create_material(db: AsyncSession, user: User, data: MaterialCreate) -> MaterialResponse:
        material = StudyMaterial(
            user_id=user.id,
            title=data.title,
            description=data.description,
            type=data.type,
            url=str(data.url) if data.url is not None else None,
            category=data.category,
            tags=list(data.tags),
            color=data.color,
            folder_id=data.folder_id,
        )
        db.add(material)
        await db.commit()
        return MaterialResponse.model_validate(material)

    @staticmethod
    async def upload_material(
        db: AsyncSession,
        user: User,
        filename: str,
        content: bytes,
        content_type: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[List[str]] = None,
        folder_id: Optional[str] = None,
    ) -> MaterialResponse:
        """Store the file and create a material typed from its MIME type; title defaults to the filename."""
        storage_service.validate_upload(
            filename, content_type, len(content), allowed=storage_service.MATERIAL_MIME_TYPES
        )
        key = await storage_service.upload(f"materials/{user.id}", filename, content, content_type)

        material = StudyMaterial(
            user_id=user.id,
            title=title or filename,
            description=description,
            type=material_type_for(content_type),
            file_name=filename,
            file_path=key,
            file_size=len(content),
            mime_type=content_type,
            category=category,
            tags=tags or [],
            folder_id=folder_id,
        )
        db.add(material)
        await db.commit()
        logger.info(
            "Material uploaded",
            extra={"material_id": str(material.id), "user_id": str(user.id), "size": len(content)},
        )
        return MaterialResponse.model_validate(material)

    @staticmethod
    async def delete_material(db: AsyncSession, user: User, material_id: UUID) -> None:
        material = await db.get(StudyMaterial, material_id)
        if material is None:
            raise NotFoundError("Material not found")
        if not access.owns(user, material.user_id):
            raise ForbiddenError()
        key = material.file_path
        await db.delete(material)
        await db.commit()

        if key:
            try:
                await storage_service.delete(key)
            except (RuntimeError, ValueError, OSError) as e:
                logger.warning("Could not remove stored file", extra={"key": key, "error": str(e)})
