"""Analytics Service - per-day trends over a trailing period"""

import asyncio
import logging
from collections import defaultdict
from datetime import timedelta
from typing import Dict, List, Union
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from study_portal.core.shaping import letter_grade, percentage
from study_portal.models.activity import ActivityLog
from study_portal.models.academic import Class, ClassEnrollment
from study_portal.models.assessment import Assignment, Grade, Submission
from study_portal.models.document import Document, Feedback
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.dashboard import (
    ActivityResponse,
    ClassPerformance,
    StatusCount,
    StudentAnalytics,
    TeacherAnalytics,
    TrendPoint,
)
from study_portal.utils.time import get_utc_now

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_DAYS = 30
RECENT_ACTIVITY_LIMIT = 50


async def _daily_counts(session_factory: async_sessionmaker, column, *conditions) -> List[TrendPoint]:
    day = func.date(column)
    async with session_factory() as session:
        rows = (await session.execute(
            select(day.label("day"), func.count())
            .where(*conditions)
            .group_by(day)
            .order_by(day)
        )).all()
    return [TrendPoint(date=d, count=n) for d, n in rows]


async def _daily_feedback(session_factory: async_sessionmaker, *conditions) -> List[TrendPoint]:
    day = func.date(Feedback.created_at)
    async with session_factory() as session:
        rows = (await session.execute(
            select(day.label("day"), func.count(Feedback.id), func.avg(Feedback.rating))
            .where(*conditions)
            .group_by(day)
            .order_by(day)
        )).all()
    return [
        TrendPoint(date=d, count=n, average_rating=round(float(avg), 1) if avg is not None else None)
        for d, n, avg in rows
    ]


async def _grade_distribution(session_factory: async_sessionmaker, student_id: UUID, since) -> Dict[str, int]:
    async with session_factory() as session:
        rows = (await session.execute(
            select(Grade.points, Grade.max_points)
            .where(Grade.student_id == student_id, Grade.graded_at >= since)
        )).all()
    distribution: Dict[str, int] = defaultdict(int)
    for points, max_points in rows:
        distribution[letter_grade(percentage(points, max_points))] += 1
    return dict(distribution)


async def _recent_activity(session_factory: async_sessionmaker, user_id: UUID, since) -> List[ActivityResponse]:
    async with session_factory() as session:
        entries = (await session.execute(
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id, ActivityLog.created_at >= since)
            .order_by(ActivityLog.created_at.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
        )).scalars().all()
    return [ActivityResponse.model_validate(e) for e in entries]


async def _submission_stats(session_factory: async_sessionmaker, teacher_id: UUID, since) -> List[StatusCount]:
    async with session_factory() as session:
        rows = (await session.execute(
            select(Submission.status, func.count(Submission.id))
            .join(Assignment, Submission.assignment_id == Assignment.id)
            .where(Assignment.teacher_id == teacher_id, Submission.submitted_at >= since)
            .group_by(Submission.status)
        )).all()
    return [StatusCount(status=status, count=n) for status, n in rows]


async def _class_performance(session_factory: async_sessionmaker, teacher_id: UUID) -> List[ClassPerformance]:
    """Average grade percentage per active class, over every graded submission"""
    async with session_factory() as session:
        classes = (await session.execute(
            select(Class)
            .options(
                selectinload(Class.subject),
                selectinload(Class.enrollments),
                selectinload(Class.assignments)
                .selectinload(Assignment.submissions)
                .selectinload(Submission.grade),
            )
            .where(Class.teacher_id == teacher_id, Class.is_active.is_(True))
            .order_by(Class.created_at.desc())
        )).scalars().all()

        performance = []
        for class_ in classes:
            grades = [
                s.grade
                for a in class_.assignments
                for s in a.submissions
                if s.grade is not None
            ]
            average = (
                sum(g.points / g.max_points for g in grades) / len(grades) * 100
                if grades else 0
            )
            performance.append(ClassPerformance(
                id=class_.id,
                name=class_.name,
                subject=class_.subject.name,
                students=len(class_.enrollments),
                assignments=len(class_.assignments),
                average_grade=round(average),
            ))
    return performance


class AnalyticsService:

    @staticmethod
    async def get_analytics(
        session_factory: async_sessionmaker, user: User, period_days: int = DEFAULT_PERIOD_DAYS
    ) -> Union[StudentAnalytics, TeacherAnalytics]:
        since = get_utc_now() - timedelta(days=period_days)
        if access.is_teacher(user):
            return await AnalyticsService._teacher(session_factory, user.id, since, period_days)
        return await AnalyticsService._student(session_factory, user.id, since, period_days)

    @staticmethod
    async def _student(session_factory, user_id: UUID, since, period_days: int) -> StudentAnalytics:
        own_document_ids = select(Document.id).where(Document.uploader_id == user_id)
        document_trends, feedback_trends, grade_distribution, recent_activity = await asyncio.gather(
            _daily_counts(
                session_factory,
                Document.created_at,
                Document.uploader_id == user_id,
                Document.created_at >= since,
            ),
            _daily_feedback(
                session_factory,
                Feedback.document_id.in_(own_document_ids),
                Feedback.created_at >= since,
            ),
            _grade_distribution(session_factory, user_id, since),
            _recent_activity(session_factory, user_id, since),
        )
        return StudentAnalytics(
            period_days=period_days,
            document_trends=document_trends,
            feedback_trends=feedback_trends,
            grade_distribution=grade_distribution,
            recent_activity=recent_activity,
        )

    @staticmethod
    async def _teacher(session_factory, user_id: UUID, since, period_days: int) -> TeacherAnalytics:
        own_class_ids = select(Class.id).where(Class.teacher_id == user_id)
        (
            enrollment_trends,
            assignment_trends,
            submission_stats,
            feedback_trends,
            class_performance,
        ) = await asyncio.gather(
            _daily_counts(
                session_factory,
                ClassEnrollment.enrolled_at,
                ClassEnrollment.class_id.in_(own_class_ids),
                ClassEnrollment.enrolled_at >= since,
            ),
            _daily_counts(
                session_factory,
                Assignment.created_at,
                Assignment.teacher_id == user_id,
                Assignment.created_at >= since,
            ),
            _submission_stats(session_factory, user_id, since),
            _daily_feedback(
                session_factory,
                Feedback.teacher_id == user_id,
                Feedback.created_at >= since,
            ),
            _class_performance(session_factory, user_id),
        )
        return TeacherAnalytics(
            period_days=period_days,
            enrollment_trends=enrollment_trends,
            assignment_trends=assignment_trends,
            submission_stats=submission_stats,
            feedback_trends=feedback_trends,
            class_performance=class_performance,
        )
