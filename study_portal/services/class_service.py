"""Class Service - classes and enrollments"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import ForbiddenError, NotFoundError
from study_portal.models.academic import Class, ClassEnrollment, Subject
from study_portal.models.assessment import Assignment, Submission
from study_portal.models.enums import UserRole
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.academic import (
    ClassCreate,
    ClassUpdate,
    ClassResponse,
    ClassDetailResponse,
    ClassAssignmentSummary,
    EnrollmentResponse,
    EnrollmentResult,
)

logger = logging.getLogger(__name__)

# Upcoming assignments embedded in the class detail payload
DETAIL_ASSIGNMENT_LIMIT = 10


def _enrollment_count():
    return (
        select(func.count(ClassEnrollment.id))
        .where(ClassEnrollment.class_id == Class.id)
        .correlate(Class)
        .scalar_subquery()
    )


def _assignment_count():
    return (
        select(func.count(Assignment.id))
        .where(Assignment.class_id == Class.id)
        .correlate(Class)
        .scalar_subquery()
    )


class ClassService:

    @staticmethod
    async def get_class(db: AsyncSession, class_id: UUID) -> Optional[Class]:
        result = await db.execute(
            select(Class)
            .options(
                selectinload(Class.subject),
                selectinload(Class.teacher),
                selectinload(Class.enrollments).selectinload(ClassEnrollment.student),
            )
            .where(Class.id == class_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _require_class(db: AsyncSession, class_id: UUID) -> Class:
        class_ = await ClassService.get_class(db, class_id)
        if class_ is None:
            raise NotFoundError("Class not found")
        return class_

    @staticmethod
    async def is_enrolled(db: AsyncSession, class_id: UUID, student_id: UUID) -> bool:
        result = await db.execute(
            select(ClassEnrollment.id).where(
                ClassEnrollment.class_id == class_id,
                ClassEnrollment.student_id == student_id,
            )
        )
        return result.first() is not None

    @staticmethod
    async def list_classes(db: AsyncSession, user: User) -> List[ClassResponse]:
        """Teachers see the active classes they own; students the active classes they are enrolled in"""
        stmt = (
            select(Class, _enrollment_count(), _assignment_count())
            .options(selectinload(Class.subject), selectinload(Class.teacher))
            .where(Class.is_active.is_(True))
            .order_by(Class.created_at.desc())
        )
        if access.is_teacher(user):
            stmt = stmt.where(Class.teacher_id == user.id)
        else:
            stmt = stmt.where(
                Class.id.in_(select(ClassEnrollment.class_id).where(ClassEnrollment.student_id == user.id))
            )

        classes = []
        for class_, students, assignments in (await db.execute(stmt)).all():
            item = ClassResponse.model_validate(class_)
            item.student_count = students
            item.assignment_count = assignments
            classes.append(item)
        return classes

    @staticmethod
    async def create_class(db: AsyncSession, teacher: User, data: ClassCreate) -> ClassResponse:
        if await db.get(Subject, data.subject_id) is None:
            raise NotFoundError("Subject not found")

        class_ = Class(
            name=data.name,
            description=data.description,
            subject_id=data.subject_id,
            teacher_id=teacher.id,
            semester=data.semester,
            year=data.year,
        )
        db.add(class_)
        await db.commit()
        logger.info("Class created", extra={"class_id": str(class_.id), "teacher_id": str(teacher.id)})

        loaded = await ClassService.get_class(db, class_.id)
        return ClassResponse.model_validate(loaded)

    @staticmethod
    async def get_class_detail(db: AsyncSession, user: User, class_id: UUID) -> ClassDetailResponse:
        class_ = await ClassService._require_class(db, class_id)
        enrolled = any(e.student_id == user.id for e in class_.enrollments)
        if not access.can_read_class(user, class_, enrolled):
            raise ForbiddenError()

        submission_count = (
            select(func.count(Submission.id))
            .where(Submission.assignment_id == Assignment.id)
            .correlate(Assignment)
            .scalar_subquery()
        )
        rows = (await db.execute(
            select(Assignment, submission_count)
            .where(Assignment.class_id == class_id)
            .order_by(Assignment.due_date.asc())
        )).all()

        summary = ClassResponse.model_validate(class_).model_dump()
        summary.update(student_count=len(class_.enrollments), assignment_count=len(rows))
        return ClassDetailResponse(
            **summary,
            enrollments=[
                EnrollmentResponse.model_validate(e)
                for e in sorted(class_.enrollments, key=lambda e: e.enrolled_at, reverse=True)
            ],
            assignments=[
                ClassAssignmentSummary.model_validate(a).model_copy(update={"submission_count": n})
                for a, n in rows[:DETAIL_ASSIGNMENT_LIMIT]
            ],
        )

    @staticmethod
    async def update_class(db: AsyncSession, user: User, class_id: UUID, data: ClassUpdate) -> ClassResponse:
        class_ = await ClassService._require_class(db, class_id)
        if not access.can_manage_class(user, class_):
            raise ForbiddenError()

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "subject_id" in changes and await db.get(Subject, changes["subject_id"]) is None:
            raise NotFoundError("Subject not found")
        for field, value in changes.items():
            setattr(class_, field, value)
        await db.commit()

        await db.refresh(class_, attribute_names=["subject"])
        return ClassResponse.model_validate(class_)

    @staticmethod
    async def delete_class(db: AsyncSession, user: User, class_id: UUID) -> None:
        """Soft delete: the class is hidden from lists but keeps its rows"""
        class_ = await db.get(Class, class_id)
        if class_ is None:
            raise NotFoundError("Class not found")
        if not access.can_manage_class(user, class_):
            raise ForbiddenError()
        class_.is_active = False
        await db.commit()
        logger.info("Class deactivated", extra={"class_id": str(class_id)})

    # Enrollments

    @staticmethod
    async def list_enrollments(db: AsyncSession, user: User, class_id: UUID) -> List[EnrollmentResponse]:
        class_ = await ClassService._require_class(db, class_id)
        enrolled = any(e.student_id == user.id for e in class_.enrollments)
        if not access.can_read_class(user, class_, enrolled):
            raise ForbiddenError()
        return [
            EnrollmentResponse.model_validate(e)
            for e in sorted(class_.enrollments, key=lambda e: e.enrolled_at, reverse=True)
        ]

    @staticmethod
    async def _enroll_one(
        db: AsyncSession, class_id: UUID, email: str, created_ids: List[UUID]
    ) -> Optional[str]:
        """Enroll one email; returns the error line for it, or None on success."""
        student = (await db.execute(
            select(User).where(
                func.lower(User.email) == email.strip().lower(),
                User.role == UserRole.STUDENT,
            )
        )).scalar_one_or_none()
        if student is None:
            return f"Student not found: {email}"
        if await ClassService.is_enrolled(db, class_id, student.id):
            return f"Already enrolled: {email}"

        enrollment = ClassEnrollment(class_id=class_id, student_id=student.id)
        db.add(enrollment)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            return f"Already enrolled: {email}"
        created_ids.append(enrollment.id)
        return None

    @staticmethod
    async def enroll_students(
        db: AsyncSession, user: User, class_id: UUID, student_emails: List[str]
    ) -> EnrollmentResult:
        """
        Enroll each email independently. Unknown students and existing
        enrollments are reported in `errors`; the rest still go through.
        """
        class_ = await db.get(Class, class_id)
        if class_ is None:
            raise NotFoundError("Class not found")
        if not access.can_manage_class(user, class_):
            raise ForbiddenError()

        created_ids: List[UUID] = []
        errors: List[str] = []
        for email in student_emails:
            try:
                error = await ClassService._enroll_one(db, class_id, email, created_ids)
            except SQLAlchemyError as e:
                await db.rollback()
                logger.warning(
                    "Enrollment failed",
                    extra={"class_id": str(class_id), "email": email, "error": e.__class__.__name__},
                )
                error = f"Error enrolling {email}: {e.__class__.__name__}"
            if error:
                errors.append(error)

        logger.info(
            "Bulk enrollment finished",
            extra={"class_id": str(class_id), "enrolled": len(created_ids), "failed": len(errors)},
        )

        loaded = []
        if created_ids:
            loaded = (await db.execute(
                select(ClassEnrollment)
                .options(selectinload(ClassEnrollment.student))
                .where(ClassEnrollment.id.in_(created_ids))
            )).scalars().all()
        return EnrollmentResult(
            enrollments=[EnrollmentResponse.model_validate(e) for e in loaded],
            errors=errors,
        )
