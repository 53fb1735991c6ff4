"""Dashboard Service - role-specific overview counts

Each query runs on its own session from the factory so they can be
awaited together with asyncio.gather.
"""

import asyncio
import logging
from typing import Union
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from study_portal.core.shaping import percentage
from study_portal.models.academic import Class, ClassEnrollment
from study_portal.models.assessment import Assignment, Grade, Submission
from study_portal.models.document import Document, Feedback
from study_portal.models.enums import SubmissionStatus
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.dashboard import (
    StudentDashboard,
    StudentStats,
    RecentGrade,
    TeacherDashboard,
    TeacherStats,
    RecentSubmission,
)
from study_portal.schemas.document import DocumentResponse
from study_portal.utils.time import get_utc_now

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
RECENT_SUBMISSION_LIMIT = 10


async def _scalar(session_factory: async_sessionmaker, stmt):
    async with session_factory() as session:
        return (await session.execute(stmt)).scalar_one()


async def _recent_documents(session_factory: async_sessionmaker, *conditions):
    feedback_count = (
        select(func.count(Feedback.id))
        .where(Feedback.document_id == Document.id)
        .correlate(Document)
        .scalar_subquery()
    )
    async with session_factory() as session:
        rows = (await session.execute(
            select(Document, feedback_count)
            .options(
                selectinload(Document.subject),
                selectinload(Document.uploader),
                selectinload(Document.tags),
            )
            .where(*conditions)
            .order_by(Document.created_at.desc())
            .limit(RECENT_LIMIT)
        )).all()
        documents = []
        for document, count in rows:
            item = DocumentResponse.model_validate(document)
            item.feedback_count = count
            documents.append(item)
        return documents


async def _recent_grades(session_factory: async_sessionmaker, student_id: UUID):
    async with session_factory() as session:
        grades = (await session.execute(
            select(Grade)
            .options(
                selectinload(Grade.submission)
                .selectinload(Submission.assignment)
                .selectinload(Assignment.subject)
            )
            .where(Grade.student_id == student_id)
            .order_by(Grade.graded_at.desc())
            .limit(RECENT_LIMIT)
        )).scalars().all()
        return [
            RecentGrade(
                id=g.id,
                points=g.points,
                max_points=g.max_points,
                percentage=percentage(g.points, g.max_points),
                feedback=g.feedback,
                graded_at=g.graded_at,
                assignment_title=g.submission.assignment.title,
                subject_name=g.submission.assignment.subject.name,
            )
            for g in grades
        ]


async def _recent_submissions(session_factory: async_sessionmaker, teacher_id: UUID):
    async with session_factory() as session:
        submissions = (await session.execute(
            select(Submission)
            .join(Assignment, Submission.assignment_id == Assignment.id)
            .options(
                selectinload(Submission.student),
                selectinload(Submission.assignment).selectinload(Assignment.subject),
            )
            .where(Assignment.teacher_id == teacher_id)
            .order_by(Submission.submitted_at.desc())
            .limit(RECENT_SUBMISSION_LIMIT)
        )).scalars().all()
        return [
            RecentSubmission(
                id=s.id,
                status=s.status,
                submitted_at=s.submitted_at,
                student_name=s.student.name,
                student_email=s.student.email,
                assignment_title=s.assignment.title,
                subject_name=s.assignment.subject.name,
            )
            for s in submissions
        ]


class DashboardService:

    @staticmethod
    async def get_stats(
        session_factory: async_sessionmaker, user: User
    ) -> Union[StudentDashboard, TeacherDashboard]:
        if access.is_teacher(user):
            return await DashboardService._teacher_stats(session_factory, user.id)
        return await DashboardService._student_stats(session_factory, user.id)

    @staticmethod
    async def _student_stats(session_factory: async_sessionmaker, user_id: UUID) -> StudentDashboard:
        enrolled_class_ids = select(ClassEnrollment.class_id).where(ClassEnrollment.student_id == user_id)
        submitted_assignment_ids = select(Submission.assignment_id).where(Submission.student_id == user_id)

        (
            total_documents,
            feedback_given,
            feedback_received,
            average_rating,
            enrolled_classes,
            pending_assignments,
            recent_activity,
            recent_grades,
        ) = await asyncio.gather(
            _scalar(session_factory, select(func.count(Document.id)).where(Document.uploader_id == user_id)),
            _scalar(session_factory, select(func.count(Feedback.id)).where(Feedback.author_id == user_id)),
            _scalar(
                session_factory,
                select(func.count(Feedback.id))
                .join(Document, Feedback.document_id == Document.id)
                .where(Document.uploader_id == user_id),
            ),
            _scalar(
                session_factory,
                select(func.avg(Document.average_rating))
                .where(Document.uploader_id == user_id, Document.total_ratings > 0),
            ),
            _scalar(session_factory, select(func.count(ClassEnrollment.id)).where(ClassEnrollment.student_id == user_id)),
            _scalar(
                session_factory,
                select(func.count(Assignment.id)).where(
                    Assignment.class_id.in_(enrolled_class_ids),
                    Assignment.due_date >= get_utc_now(),
                    Assignment.id.not_in(submitted_assignment_ids),
                ),
            ),
            _recent_documents(session_factory, Document.uploader_id == user_id),
            _recent_grades(session_factory, user_id),
        )

        return StudentDashboard(
            stats=StudentStats(
                total_documents=total_documents,
                total_feedback_given=feedback_given,
                total_feedback_received=feedback_received,
                average_rating=float(average_rating or 0),
                enrolled_classes=enrolled_classes,
                pending_assignments=pending_assignments,
            ),
            recent_activity=recent_activity,
            recent_grades=recent_grades,
        )

    @staticmethod
    async def _teacher_stats(session_factory: async_sessionmaker, user_id: UUID) -> TeacherDashboard:
        own_class_ids = select(Class.id).where(Class.teacher_id == user_id)
        own_assignment_ids = select(Assignment.id).where(Assignment.teacher_id == user_id)

        (
            total_classes,
            total_students,
            total_assignments,
            pending_grading,
            recent_documents,
            recent_submissions,
        ) = await asyncio.gather(
            _scalar(
                session_factory,
                select(func.count(Class.id)).where(Class.teacher_id == user_id, Class.is_active.is_(True)),
            ),
            _scalar(
                session_factory,
                select(func.count(ClassEnrollment.id)).where(ClassEnrollment.class_id.in_(own_class_ids)),
            ),
            _scalar(session_factory, select(func.count(Assignment.id)).where(Assignment.teacher_id == user_id)),
            _scalar(
                session_factory,
                select(func.count(Submission.id)).where(
                    Submission.assignment_id.in_(own_assignment_ids),
                    Submission.status == SubmissionStatus.SUBMITTED,
                ),
            ),
            _recent_documents(session_factory, Document.uploader_id == user_id, Document.is_shared.is_(True)),
            _recent_submissions(session_factory, user_id),
        )

        return TeacherDashboard(
            stats=TeacherStats(
                total_classes=total_classes,
                total_students=total_students,
                total_assignments=total_assignments,
                pending_grading=pending_grading,
            ),
            recent_documents=recent_documents,
            recent_submissions=recent_submissions,
        )
