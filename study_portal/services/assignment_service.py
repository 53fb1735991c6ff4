"""Assignment Service"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from study_portal.models.academic import Class, ClassEnrollment, Subject
from study_portal.models.assessment import Assignment, Submission
from study_portal.models.document import Document
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.assessment import (
    AssignmentCreate,
    AssignmentUpdate,
    AssignmentResponse,
    MySubmission,
)
from study_portal.services.class_service import ClassService

logger = logging.getLogger(__name__)


def _submission_count():
    return (
        select(func.count(Submission.id))
        .where(Submission.assignment_id == Assignment.id)
        .correlate(Assignment)
        .scalar_subquery()
    )


def _load_options():
    return (
        selectinload(Assignment.subject),
        selectinload(Assignment.class_),
        selectinload(Assignment.teacher),
        selectinload(Assignment.documents),
    )


def _my_submission(submission: Optional[Submission]) -> Optional[MySubmission]:
    if submission is None:
        return None
    grade = submission.grade
    return MySubmission(
        id=submission.id,
        status=submission.status,
        submitted_at=submission.submitted_at,
        points=grade.points if grade else None,
        max_points=grade.max_points if grade else None,
    )


class AssignmentService:

    @staticmethod
    async def get_assignment(db: AsyncSession, assignment_id: UUID) -> Optional[Assignment]:
        result = await db.execute(
            select(Assignment).options(*_load_options()).where(Assignment.id == assignment_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _require_assignment(db: AsyncSession, assignment_id: UUID) -> Assignment:
        assignment = await AssignmentService.get_assignment(db, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        return assignment

    @staticmethod
    async def _own_submissions(
        db: AsyncSession, student_id: UUID, assignment_ids: List[UUID]
    ) -> Dict[UUID, Submission]:
        if not assignment_ids:
            return {}
        result = await db.execute(
            select(Submission)
            .options(selectinload(Submission.grade))
            .where(Submission.student_id == student_id, Submission.assignment_id.in_(assignment_ids))
        )
        return {s.assignment_id: s for s in result.scalars().all()}

    @staticmethod
    async def _validate_documents(db: AsyncSession, document_ids: List[UUID]) -> List[Document]:
        if not document_ids:
            return []
        unique_ids = list(dict.fromkeys(document_ids))
        documents = (await db.execute(select(Document).where(Document.id.in_(unique_ids)))).scalars().all()
        if len(documents) != len(unique_ids):
            raise BadRequestError("One or more documents not found")
        return list(documents)

    @staticmethod
    async def list_assignments(
        db: AsyncSession, user: User, class_id: Optional[UUID] = None
    ) -> List[AssignmentResponse]:
        """
        Teachers: assignments they created. Students: assignments of classes
        they are enrolled in, each with the student's own submission.
        Ordered by due date.
        """
        stmt = (
            select(Assignment, _submission_count())
            .options(*_load_options())
            .order_by(Assignment.due_date.asc())
        )
        if access.is_teacher(user):
            stmt = stmt.where(Assignment.teacher_id == user.id)
        else:
            stmt = stmt.where(
                Assignment.class_id.in_(
                    select(ClassEnrollment.class_id).where(ClassEnrollment.student_id == user.id)
                )
            )
        if class_id is not None:
            stmt = stmt.where(Assignment.class_id == class_id)

        rows = (await db.execute(stmt)).all()
        own = {}
        if not access.is_teacher(user):
            own = await AssignmentService._own_submissions(db, user.id, [a.id for a, _ in rows])

        assignments = []
        for assignment, submission_count in rows:
            item = AssignmentResponse.model_validate(assignment)
            item.submission_count = submission_count
            item.my_submission = _my_submission(own.get(assignment.id))
            assignments.append(item)
        return assignments

    @staticmethod
    async def create_assignment(db: AsyncSession, teacher: User, data: AssignmentCreate) -> AssignmentResponse:
        class_ = await db.get(Class, data.class_id)
        if class_ is None:
            raise NotFoundError("Class not found")
        if not access.can_manage_class(teacher, class_):
            raise ForbiddenError()
        if await db.get(Subject, data.subject_id) is None:
            raise NotFoundError("Subject not found")
        documents = await AssignmentService._validate_documents(db, data.document_ids)

        assignment = Assignment(
            title=data.title,
            description=data.description,
            subject_id=data.subject_id,
            class_id=data.class_id,
            teacher_id=teacher.id,
            due_date=data.due_date,
            max_points=data.max_points,
            documents=documents,
        )
        db.add(assignment)
        await db.commit()
        logger.info(
            "Assignment created",
            extra={"assignment_id": str(assignment.id), "class_id": str(data.class_id)},
        )

        loaded = await AssignmentService.get_assignment(db, assignment.id)
        return AssignmentResponse.model_validate(loaded)

    @staticmethod
    async def get_assignment_detail(db: AsyncSession, user: User, assignment_id: UUID) -> AssignmentResponse:
        assignment = await AssignmentService._require_assignment(db, assignment_id)
        enrolled = (
            access.is_student(user)
            and await ClassService.is_enrolled(db, assignment.class_id, user.id)
        )
        if not access.can_read_assignment(user, assignment, enrolled):
            raise ForbiddenError()

        count = (await db.execute(
            select(func.count(Submission.id)).where(Submission.assignment_id == assignment_id)
        )).scalar_one()
        response = AssignmentResponse.model_validate(assignment)
        response.submission_count = count
        if access.is_student(user):
            own = await AssignmentService._own_submissions(db, user.id, [assignment_id])
            response.my_submission = _my_submission(own.get(assignment_id))
        return response

    @staticmethod
    async def update_assignment(
        db: AsyncSession, user: User, assignment_id: UUID, data: AssignmentUpdate
    ) -> AssignmentResponse:
        assignment = await AssignmentService._require_assignment(db, assignment_id)
        if not access.can_manage_assignment(user, assignment):
            raise ForbiddenError()

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        document_ids = changes.pop("document_ids", None)
        if document_ids is not None:
            assignment.documents = await AssignmentService._validate_documents(db, document_ids)
        for field, value in changes.items():
            setattr(assignment, field, value)
        await db.commit()

        return await AssignmentService.get_assignment_detail(db, user, assignment_id)

    @staticmethod
    async def delete_assignment(db: AsyncSession, user: User, assignment_id: UUID) -> None:
        """Hard delete; submissions and their grades go with it."""
        assignment = await AssignmentService._require_assignment(db, assignment_id)
        if not access.can_manage_assignment(user, assignment):
            raise ForbiddenError()
        await db.refresh(assignment, attribute_names=["submissions"])
        await db.delete(assignment)
        await db.commit()
        logger.info("Assignment deleted", extra={"assignment_id": str(assignment_id)})
