"""Submission Service - submitting, resubmitting and grading"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from study_portal.models.assessment import Assignment, Grade, Submission
from study_portal.models.enums import SubmissionStatus
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.assessment import (
    GradeCreate,
    GradeResponse,
    SubmissionResponse,
    SubmissionDetailResponse,
)
from study_portal.services import storage_service
from study_portal.services.class_service import ClassService
from study_portal.utils.time import get_utc_now

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    """File part of a multipart request, already read into memory"""
    filename: str
    content: bytes
    content_type: Optional[str]


def _deadline_passed(assignment: Assignment) -> bool:
    return get_utc_now() > assignment.due_date


class SubmissionService:

    @staticmethod
    async def get_submission(db: AsyncSession, submission_id: UUID) -> Optional[Submission]:
        result = await db.execute(
            select(Submission)
            .options(
                selectinload(Submission.student),
                selectinload(Submission.grade),
                selectinload(Submission.assignment),
            )
            .where(Submission.id == submission_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _require_submission(db: AsyncSession, submission_id: UUID) -> Submission:
        submission = await SubmissionService.get_submission(db, submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    @staticmethod
    async def _store_file(assignment_id: UUID, upload: UploadedFile) -> str:
        storage_service.validate_upload(upload.filename, upload.content_type, len(upload.content))
        return await storage_service.upload(
            f"submissions/{assignment_id}", upload.filename, upload.content, upload.content_type
        )

    @staticmethod
    async def list_submissions(db: AsyncSession, user: User, assignment_id: UUID) -> List[SubmissionResponse]:
        """
        Teachers owning the assignment get every submission; enrolled
        students get only their own. The restriction is part of the query.
        """
        assignment = await db.get(Assignment, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        enrolled = (
            access.is_student(user)
            and await ClassService.is_enrolled(db, assignment.class_id, user.id)
        )
        if not access.can_read_assignment(user, assignment, enrolled):
            raise ForbiddenError()

        stmt = (
            select(Submission)
            .options(selectinload(Submission.student), selectinload(Submission.grade))
            .where(Submission.assignment_id == assignment_id)
            .order_by(Submission.submitted_at.desc())
        )
        if not access.is_teacher(user):
            stmt = stmt.where(Submission.student_id == user.id)

        result = await db.execute(stmt)
        return [SubmissionResponse.model_validate(s) for s in result.scalars().all()]

    @staticmethod
    async def submit(
        db: AsyncSession,
        user: User,
        assignment_id: UUID,
        content: Optional[str] = None,
        upload: Optional[UploadedFile] = None,
    ) -> SubmissionResponse:
        """
        Create the student's submission, or update it in place when one
        exists. Status is left as it was, so a graded submission stays GRADED.
        """
        assignment = await db.get(Assignment, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        enrolled = await ClassService.is_enrolled(db, assignment.class_id, user.id)
        if not access.can_submit(user, enrolled):
            raise ForbiddenError("Not enrolled in class")
        if _deadline_passed(assignment):
            logger.warning(
                "Late submission rejected",
                extra={"assignment_id": str(assignment_id), "student_id": str(user.id)},
            )
            raise BadRequestError("Assignment deadline has passed")
        if upload is None and not content:
            raise BadRequestError("Either file or content is required")

        submission = (await db.execute(
            select(Submission).where(
                Submission.assignment_id == assignment_id,
                Submission.student_id == user.id,
            )
        )).scalar_one_or_none()
        if submission is None:
            submission = Submission(
                assignment_id=assignment_id,
                student_id=user.id,
                status=SubmissionStatus.SUBMITTED,
            )
            db.add(submission)

        await SubmissionService._apply(submission, assignment_id, content, upload)
        await db.commit()
        logger.info(
            "Submission saved",
            extra={"submission_id": str(submission.id), "assignment_id": str(assignment_id)},
        )

        loaded = await SubmissionService.get_submission(db, submission.id)
        return SubmissionResponse.model_validate(loaded)

    @staticmethod
    async def _apply(
        submission: Submission,
        assignment_id: UUID,
        content: Optional[str],
        upload: Optional[UploadedFile],
    ) -> None:
        """Overwrite the supplied fields; omitted ones keep their previous value"""
        if upload is not None:
            submission.file_path = await SubmissionService._store_file(assignment_id, upload)
            submission.file_name = upload.filename
            submission.file_size = len(upload.content)
        if content:
            submission.content = content
        submission.submitted_at = get_utc_now()

    @staticmethod
    async def get_submission_detail(db: AsyncSession, user: User, submission_id: UUID) -> SubmissionDetailResponse:
        submission = await SubmissionService._require_submission(db, submission_id)
        if not access.can_read_submission(user, submission, submission.assignment.teacher_id):
            raise ForbiddenError()
        return SubmissionDetailResponse.model_validate(submission)

    @staticmethod
    async def resubmit(
        db: AsyncSession,
        user: User,
        submission_id: UUID,
        content: Optional[str] = None,
        upload: Optional[UploadedFile] = None,
    ) -> SubmissionResponse:
        submission = await SubmissionService._require_submission(db, submission_id)
        if submission.student_id != user.id:
            raise ForbiddenError()
        if _deadline_passed(submission.assignment):
            raise BadRequestError("Assignment deadline has passed")

        await SubmissionService._apply(submission, submission.assignment_id, content, upload)
        await db.commit()
        return SubmissionResponse.model_validate(submission)

    @staticmethod
    async def grade(db: AsyncSession, user: User, submission_id: UUID, data: GradeCreate) -> GradeResponse:
        """
        Create or update the grade and mark the submission GRADED.
        maxPoints defaults to the assignment's max_points.
        """
        submission = await SubmissionService._require_submission(db, submission_id)
        if not access.can_grade(user, submission.assignment):
            raise ForbiddenError()

        max_points = data.max_points if data.max_points is not None else submission.assignment.max_points
        if data.points > max_points:
            raise BadRequestError("Points cannot exceed maximum")

        grade = submission.grade
        if grade is None:
            grade = Grade(
                submission_id=submission.id,
                student_id=submission.student_id,
                teacher_id=user.id,
            )
            db.add(grade)
        grade.points = data.points
        grade.max_points = max_points
        grade.feedback = data.feedback
        grade.graded_at = get_utc_now()
        await db.commit()

        submission.status = SubmissionStatus.GRADED
        await db.commit()

        logger.info(
            "Submission graded",
            extra={"submission_id": str(submission_id), "points": data.points, "max_points": max_points},
        )
        return GradeResponse.model_validate(grade)
