from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.assessment import (
    GradeCreate,
    GradeResponse,
    SubmissionDetailResponse,
    SubmissionResponse,
)
from study_portal.schemas.responses import SuccessResponse
from study_portal.services import storage_service
from study_portal.services.submission_service import SubmissionService, UploadedFile

router = APIRouter()


@router.get("/{submission_id}", response_model=SuccessResponse[SubmissionDetailResponse])
async def get_submission(
    submission_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Submission with its grade; visible to its student and the assignment's teacher.
    """
    submission = await SubmissionService.get_submission_detail(db, current_user, submission_id)
    return SuccessResponse(data=submission)


@router.put("/{submission_id}", response_model=SuccessResponse[SubmissionResponse])
async def resubmit(
    submission_id: UUID,
    file: Optional[UploadFile] = File(None),
    content: Optional[str] = Form(None),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    upload = None
    if file is not None and file.filename:
        upload = UploadedFile(filename=file.filename, content=await storage_service.read_upload(file), content_type=file.content_type)
    submission = await SubmissionService.resubmit(db, current_user, submission_id, content=content, upload=upload)
    return SuccessResponse(data=submission, message="Submission updated successfully")


@router.post("/{submission_id}/grade", response_model=SuccessResponse[GradeResponse])
async def grade_submission(
    submission_id: UUID,
    grade_in: GradeCreate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create or update the grade; the submission becomes GRADED.
    """
    grade = await SubmissionService.grade(db, current_user, submission_id, grade_in)
    return SuccessResponse(data=grade, message="Grade saved successfully")
