from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.subject import SubjectCreate, SubjectResponse
from study_portal.services.subject_service import SubjectService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[SubjectResponse]])
async def list_subjects(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Active subjects with document, class and assignment counts.
    """
    subjects = await SubjectService.list_subjects(db)
    return SuccessResponse(data=subjects)


@router.post("", response_model=SuccessResponse[SubjectResponse], status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_in: SubjectCreate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    subject = await SubjectService.create_subject(db, subject_in)
    return SuccessResponse(data=subject, message="Subject created successfully")
