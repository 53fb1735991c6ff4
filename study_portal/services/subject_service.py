"""Subject Service"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.core.exceptions import BadRequestError
from study_portal.models.academic import Subject, Class
from study_portal.models.assessment import Assignment
from study_portal.models.document import Document
from study_portal.schemas.subject import SubjectCreate, SubjectResponse, SubjectCounts

logger = logging.getLogger(__name__)


def _count_of(model, fk):
    return (
        select(func.count(model.id))
        .where(fk == Subject.id)
        .correlate(Subject)
        .scalar_subquery()
    )


class SubjectService:

    @staticmethod
    async def get_subject(db: AsyncSession, subject_id: UUID) -> Optional[Subject]:
        return await db.get(Subject, subject_id)

    @staticmethod
    async def list_subjects(db: AsyncSession) -> List[SubjectResponse]:
        """Active subjects ordered by name, with document/class/assignment counts"""
        stmt = (
            select(
                Subject,
                _count_of(Document, Document.subject_id),
                _count_of(Class, Class.subject_id),
                _count_of(Assignment, Assignment.subject_id),
            )
            .where(Subject.is_active.is_(True))
            .order_by(Subject.name.asc())
        )
        result = await db.execute(stmt)
        return [
            SubjectService._shape(subject, (docs, classes, assignments))
            for subject, docs, classes, assignments in result.all()
        ]

    @staticmethod
    async def create_subject(db: AsyncSession, data: SubjectCreate) -> SubjectResponse:
        existing = await db.execute(select(Subject.id).where(Subject.code == data.code))
        if existing.first():
            raise BadRequestError("Subject code already exists")

        subject = Subject(
            name=data.name,
            code=data.code,
            description=data.description,
            color=data.color,
        )
        db.add(subject)
        await db.commit()
        logger.info("Subject created", extra={"subject_id": str(subject.id), "code": subject.code})
        return SubjectService._shape(subject, (0, 0, 0))

    @staticmethod
    def _shape(subject: Subject, counts: Tuple[int, int, int]) -> SubjectResponse:
        response = SubjectResponse.model_validate(subject)
        docs, classes, assignments = counts
        response.counts = SubjectCounts(documents=docs, classes=classes, assignments=assignments)
        return response
