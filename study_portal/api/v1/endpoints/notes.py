from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.study import NoteCreate, NoteResponse
from study_portal.services.study_service import NoteService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[NoteResponse]])
async def list_notes(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    notes = await NoteService.list_notes(db, current_user)
    return SuccessResponse(data=notes)


@router.post("", response_model=SuccessResponse[NoteResponse], status_code=status.HTTP_201_CREATED)
async def create_note(
    note_in: NoteCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    note = await NoteService.create_note(db, current_user, note_in)
    return SuccessResponse(data=note, message="Note created successfully")


@router.delete("", response_model=SuccessResponse[None])
async def delete_note(
    note_id: UUID = Query(..., alias="noteId"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await NoteService.delete_note(db, current_user, note_id)
    return SuccessResponse(data=None, message="Note deleted successfully")
