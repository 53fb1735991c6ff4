from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.academic import (
    ClassCreate,
    ClassDetailResponse,
    ClassResponse,
    ClassUpdate,
    EnrollmentRequest,
    EnrollmentResponse,
    EnrollmentResult,
)
from study_portal.schemas.responses import SuccessResponse
from study_portal.services.class_service import ClassService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[ClassResponse]])
async def list_classes(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Teachers: classes they own. Students: classes they are enrolled in.
    """
    classes = await ClassService.list_classes(db, current_user)
    return SuccessResponse(data=classes)


@router.post("", response_model=SuccessResponse[ClassResponse], status_code=status.HTTP_201_CREATED)
async def create_class(
    class_in: ClassCreate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    new_class = await ClassService.create_class(db, current_user, class_in)
    return SuccessResponse(data=new_class, message="Class created successfully")


@router.get("/{class_id}", response_model=SuccessResponse[ClassDetailResponse])
async def get_class(
    class_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Class detail with roster and upcoming assignments.
    """
    detail = await ClassService.get_class_detail(db, current_user, class_id)
    return SuccessResponse(data=detail)


@router.put("/{class_id}", response_model=SuccessResponse[ClassResponse])
async def update_class(
    class_id: UUID,
    class_in: ClassUpdate,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    updated = await ClassService.update_class(db, current_user, class_id, class_in)
    return SuccessResponse(data=updated, message="Class updated successfully")


@router.delete("/{class_id}", response_model=SuccessResponse[None])
async def delete_class(
    class_id: UUID,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Deactivate a class (soft delete).
    """
    await ClassService.delete_class(db, current_user, class_id)
    return SuccessResponse(data=None, message="Class deleted successfully")


@router.get("/{class_id}/enrollments", response_model=SuccessResponse[List[EnrollmentResponse]])
async def list_enrollments(
    class_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    enrollments = await ClassService.list_enrollments(db, current_user, class_id)
    return SuccessResponse(data=enrollments)


@router.post("/{class_id}/enrollments", response_model=SuccessResponse[EnrollmentResult])
async def enroll_students(
    class_id: UUID,
    enrollment_in: EnrollmentRequest,
    current_user: User = Depends(deps.require_teacher),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Enroll students by email. Unknown or already-enrolled emails are
    reported in `errors` without failing the rest of the batch.
    """
    result = await ClassService.enroll_students(db, current_user, class_id, enrollment_in.student_emails)
    return SuccessResponse(data=result, message=f"Enrolled {len(result.enrollments)} students")
