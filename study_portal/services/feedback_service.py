"""Feedback Service - ratings and the document rating aggregate"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import ForbiddenError, NotFoundError
from study_portal.core.shaping import rating_summary
from study_portal.models.document import Document, Feedback
from study_portal.models.enums import FeedbackType
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.document import FeedbackCreate, FeedbackList, FeedbackResponse

logger = logging.getLogger(__name__)


class FeedbackService:

    @staticmethod
    async def list_feedback(db: AsyncSession, user: User, document_id: UUID) -> FeedbackList:
        document = await db.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not access.can_read_document(user, document):
            raise ForbiddenError()

        result = await db.execute(
            select(Feedback)
            .options(selectinload(Feedback.author))
            .where(Feedback.document_id == document_id)
            .order_by(Feedback.created_at.desc())
        )
        feedback = result.scalars().all()
        average, count = rating_summary(f.rating for f in feedback)
        return FeedbackList(
            feedback=[FeedbackResponse.model_validate(f) for f in feedback],
            average_rating=round(average, 1),
            total_ratings=count,
        )

    @staticmethod
    async def submit_feedback(
        db: AsyncSession, user: User, document_id: UUID, data: FeedbackCreate
    ) -> FeedbackResponse:
        """
        Create or replace the author's feedback, then recompute the document's
        average_rating / total_ratings. The recompute reads then writes in a
        separate step, so concurrent writers on one document can interleave.
        """
        document = await db.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not access.peer_feedback_allowed(user, document):
            raise ForbiddenError("Peer feedback not allowed")
        if not access.self_feedback_allowed(user, document):
            raise ForbiddenError("Cannot rate your own document")

        feedback_type = FeedbackType.TEACHER if access.is_teacher(user) else FeedbackType.PEER
        teacher_id = user.id if access.is_teacher(user) else None

        feedback = (await db.execute(
            select(Feedback).where(Feedback.document_id == document_id, Feedback.author_id == user.id)
        )).scalar_one_or_none()
        if feedback is None:
            feedback = Feedback(document_id=document_id, author_id=user.id)
            db.add(feedback)
        feedback.rating = data.rating
        feedback.comment = data.comment
        feedback.type = feedback_type
        if teacher_id is not None:
            feedback.teacher_id = teacher_id
        await db.commit()

        await FeedbackService.recompute_rating(db, document)
        logger.info(
            "Feedback saved",
            extra={"document_id": str(document_id), "author_id": str(user.id), "rating": data.rating},
        )

        loaded = (await db.execute(
            select(Feedback).options(selectinload(Feedback.author)).where(Feedback.id == feedback.id)
        )).scalar_one()
        return FeedbackResponse.model_validate(loaded)

    @staticmethod
    async def recompute_rating(db: AsyncSession, document: Document) -> None:
        """Persist mean and count of positive ratings on the document"""
        ratings = (await db.execute(
            select(Feedback.rating).where(Feedback.document_id == document.id, Feedback.rating > 0)
        )).scalars().all()
        average, count = rating_summary(ratings)
        document.average_rating = average
        document.total_ratings = count
        await db.commit()
