from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.assessment import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    SubmissionResponse,
)
from study_portal.schemas.responses import SuccessResponse
from study_portal.services.assignment_service import AssignmentService
from study_portal.services import storage_service
from study_portal.services.submission_service import SubmissionService, UploadedFile

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[AssignmentResponse]])
async def list_assignments(
    class_id: Optional[UUID] = Query(None, alias="classId"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Teachers: assignments they created. Students: assignments of their classes.
    """
    assignments = await AssignmentService.list_assignments(db, current_user, class_id)
    return SuccessResponse(data=assignments)


@router.post("", response_model=SuccessResponse[AssignmentResponse], status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_in: AssignmentCreate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    assignment = await AssignmentService.create_assignment(db, current_user, assignment_in)
    return SuccessResponse(data=assignment, message="Assignment created successfully")


@router.get("/{assignment_id}", response_model=SuccessResponse[AssignmentResponse])
async def get_assignment(
    assignment_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    assignment = await AssignmentService.get_assignment_detail(db, current_user, assignment_id)
    return SuccessResponse(data=assignment)


@router.put("/{assignment_id}", response_model=SuccessResponse[AssignmentResponse])
async def update_assignment(
    assignment_id: UUID,
    assignment_in: AssignmentUpdate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    assignment = await AssignmentService.update_assignment(db, current_user, assignment_id, assignment_in)
    return SuccessResponse(data=assignment, message="Assignment updated successfully")


@router.delete("/{assignment_id}", response_model=SuccessResponse[None])
async def delete_assignment(
    assignment_id: UUID,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await AssignmentService.delete_assignment(db, current_user, assignment_id)
    return SuccessResponse(data=None, message="Assignment deleted successfully")


@router.get("/{assignment_id}/submissions", response_model=SuccessResponse[List[SubmissionResponse]])
async def list_submissions(
    assignment_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Teachers see every submission; students only their own.
    """
    submissions = await SubmissionService.list_submissions(db, current_user, assignment_id)
    return SuccessResponse(data=submissions)


@router.post("/{assignment_id}/submissions", response_model=SuccessResponse[SubmissionResponse])
async def submit_assignment(
    assignment_id: UUID,
    file: Optional[UploadFile] = File(None),
    content: Optional[str] = Form(None),
    current_user: User = Depends(deps.require_student),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Submit (or resubmit) work as a file, text content, or both.
    """
    upload = None
    if file is not None and file.filename:
        upload = UploadedFile(filename=file.filename, content=await storage_service.read_upload(file), content_type=file.content_type)
    submission = await SubmissionService.submit(db, current_user, assignment_id, content=content, upload=upload)
    return SuccessResponse(data=submission, message="Submission saved successfully")
