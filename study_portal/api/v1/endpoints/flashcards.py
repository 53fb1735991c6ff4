from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.study import DeckCreate, DeckResponse
from study_portal.services.study_service import FlashcardService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[DeckResponse]])
async def list_decks(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    decks = await FlashcardService.list_decks(db, current_user)
    return SuccessResponse(data=decks)


@router.post("", response_model=SuccessResponse[DeckResponse], status_code=status.HTTP_201_CREATED)
async def create_deck(
    deck_in: DeckCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create a deck with its cards in one transaction.
    """
    deck = await FlashcardService.create_deck(db, current_user, deck_in)
    return SuccessResponse(data=deck, message="Deck created successfully")


@router.delete("", response_model=SuccessResponse[None])
async def delete_deck(
    deck_id: UUID = Query(..., alias="deckId"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await FlashcardService.delete_deck(db, current_user, deck_id)
    return SuccessResponse(data=None, message="Deck deleted successfully")
