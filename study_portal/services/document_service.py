"""Document Service - uploads, listing, viewing, versions"""

import logging
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_, update, insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import ForbiddenError, NotFoundError
from study_portal.models.academic import Subject
from study_portal.models.document import Document, DocumentVersion, Feedback, Tag, document_tags
from study_portal.models.enums import ActivityAction, DocumentType
from study_portal.models.user import User
from study_portal.policy import access
from study_portal.schemas.document import (
    DocumentResponse,
    DocumentDetailResponse,
    DocumentUpdate,
    VersionResponse,
)
from study_portal.services import activity_service, storage_service

logger = logging.getLogger(__name__)

# Versions embedded in the document detail payload
DETAIL_VERSION_LIMIT = 5


def _feedback_count():
    return (
        select(func.count(Feedback.id))
        .where(Feedback.document_id == Document.id)
        .correlate(Document)
        .scalar_subquery()
    )


def _version_count():
    return (
        select(func.count(DocumentVersion.id))
        .where(DocumentVersion.document_id == Document.id)
        .correlate(Document)
        .scalar_subquery()
    )


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma separated tag string, dropping blanks and duplicates."""
    if not raw:
        return []
    seen = []
    for name in raw.split(","):
        name = name.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class DocumentService:

    @staticmethod
    async def get_document(db: AsyncSession, document_id: UUID) -> Optional[Document]:
        """Load a document with everything the detail payload needs"""
        result = await db.execute(
            select(Document)
            .options(
                selectinload(Document.subject),
                selectinload(Document.uploader),
                selectinload(Document.tags),
                selectinload(Document.versions),
                selectinload(Document.feedback).selectinload(Feedback.author),
            )
            .where(Document.id == document_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _require_document(db: AsyncSession, document_id: UUID) -> Document:
        document = await DocumentService.get_document(db, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    @staticmethod
    def shape(document: Document) -> DocumentResponse:
        response = DocumentResponse.model_validate(document)
        response.feedback_count = len(document.feedback)
        response.version_count = len(document.versions)
        return response

    @staticmethod
    async def list_documents(
        db: AsyncSession,
        user: User,
        doc_type: Optional[DocumentType] = None,
        subject_id: Optional[UUID] = None,
        shared: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[DocumentResponse], int]:
        """
        Filtered, newest-first page of documents.

        Students only ever see their own documents plus shared ones; the
        visibility rule is part of the WHERE clause, combined with any search.
        """
        conditions = []
        if doc_type is not None:
            conditions.append(Document.type == doc_type)
        if subject_id is not None:
            conditions.append(Document.subject_id == subject_id)
        if shared is not None:
            conditions.append(Document.is_shared.is_(shared))
        if search:
            pattern = f"%{search.strip().lower()}%"
            conditions.append(or_(
                func.lower(Document.title).like(pattern),
                func.lower(Document.description).like(pattern),
            ))
        if not access.is_teacher(user):
            conditions.append(or_(Document.uploader_id == user.id, Document.is_shared.is_(True)))

        total = (await db.execute(select(func.count(Document.id)).where(*conditions))).scalar_one()

        stmt = (
            select(Document, _feedback_count(), _version_count())
            .options(
                selectinload(Document.subject),
                selectinload(Document.uploader),
                selectinload(Document.tags),
            )
            .where(*conditions)
            .order_by(Document.created_at.desc(), Document.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        rows = (await db.execute(stmt)).all()

        documents = []
        for document, feedback_count, version_count in rows:
            item = DocumentResponse.model_validate(document)
            item.feedback_count = feedback_count
            item.version_count = version_count
            documents.append(item)
        return documents, total

    @staticmethod
    async def view_document(db: AsyncSession, user: User, document_id: UUID) -> DocumentDetailResponse:
        """
        Read one document.
        A non-owner's view bumps download_count and is written to the activity log.
        """
        document = await DocumentService._require_document(db, document_id)
        if not access.can_read_document(user, document):
            logger.warning(
                "Document read denied",
                extra={"document_id": str(document_id), "user_id": str(user.id)},
            )
            raise ForbiddenError()

        if document.uploader_id != user.id:
            await db.execute(
                update(Document)
                .where(Document.id == document.id)
                .values(download_count=Document.download_count + 1)
            )
            await activity_service.record(
                db,
                user.id,
                ActivityAction.DOCUMENT_VIEW,
                resource="Document",
                details={"documentId": str(document.id), "title": document.title},
                commit=False,
            )
            await db.commit()

        response = DocumentDetailResponse.model_validate(document)
        response.feedback_count = len(document.feedback)
        response.version_count = len(document.versions)
        latest = sorted(document.versions, key=lambda v: v.version, reverse=True)[:DETAIL_VERSION_LIMIT]
        response.versions = [VersionResponse.model_validate(v) for v in latest]
        response.feedback.sort(key=lambda f: f.created_at, reverse=True)
        return response

    @staticmethod
    async def upload_document(
        db: AsyncSession,
        user: User,
        *,
        filename: str,
        content: bytes,
        content_type: Optional[str],
        title: str,
        subject_id: UUID,
        description: Optional[str] = None,
        doc_type: DocumentType = DocumentType.OTHER,
        is_shared: bool = False,
        allow_peer_feedback: bool = True,
        tags: Sequence[str] = (),
    ) -> DocumentResponse:
        """
        Store the file and create the document, its first version, tag links
        and an upload activity entry. Each step commits on its own.
        """
        storage_service.validate_upload(filename, content_type, len(content))
        if await db.get(Subject, subject_id) is None:
            raise NotFoundError("Subject not found")

        key = await storage_service.upload(f"documents/{user.id}", filename, content, content_type)

        document = Document(
            title=title,
            description=description,
            file_name=filename,
            file_path=key,
            file_size=len(content),
            mime_type=content_type,
            type=doc_type,
            subject_id=subject_id,
            uploader_id=user.id,
            is_shared=is_shared,
            allow_peer_feedback=allow_peer_feedback,
        )
        db.add(document)
        await db.commit()

        db.add(DocumentVersion(
            document_id=document.id,
            version=1,
            file_name=filename,
            file_path=key,
            file_size=len(content),
            changes="Initial upload",
        ))
        await db.commit()

        for name in tags:
            tag = (await db.execute(select(Tag).where(Tag.name == name))).scalar_one_or_none()
            if tag is None:
                tag = Tag(name=name)
                db.add(tag)
                await db.flush()
            await db.execute(insert(document_tags).values(document_id=document.id, tag_id=tag.id))
        if tags:
            await db.commit()

        await activity_service.record(
            db,
            user.id,
            ActivityAction.DOCUMENT_UPLOAD,
            resource="Document",
            details={"documentId": str(document.id), "title": title, "fileSize": str(len(content))},
        )
        logger.info(
            "Document uploaded",
            extra={"document_id": str(document.id), "user_id": str(user.id), "size": len(content)},
        )

        loaded = await DocumentService.get_document(db, document.id)
        return DocumentService.shape(loaded)

    @staticmethod
    async def update_document(
        db: AsyncSession, user: User, document_id: UUID, data: DocumentUpdate
    ) -> DocumentResponse:
        document = await DocumentService._require_document(db, document_id)
        if not access.can_write_document(user, document):
            raise ForbiddenError()

        changes = data.model_dump(exclude_unset=True)
        if changes.get("subject_id") is not None and await db.get(Subject, changes["subject_id"]) is None:
            raise NotFoundError("Subject not found")
        for field, value in changes.items():
            if value is None and field not in ("description",):
                continue
            setattr(document, field, value)
        await db.commit()

        # Subject may have changed; reload relationships
        await db.refresh(document, attribute_names=["subject"])
        return DocumentService.shape(document)

    @staticmethod
    async def delete_document(db: AsyncSession, user: User, document_id: UUID) -> None:
        """Hard delete; versions, feedback, tag and assignment links go with it."""
        document = await DocumentService._require_document(db, document_id)
        if not access.can_write_document(user, document):
            raise ForbiddenError()

        keys = {document.file_path, *(v.file_path for v in document.versions)}
        await db.refresh(document, attribute_names=["assignments"])
        await db.delete(document)
        await db.commit()
        logger.info("Document deleted", extra={"document_id": str(document_id), "user_id": str(user.id)})

        for key in keys:
            try:
                await storage_service.delete(key)
            except (RuntimeError, ValueError, OSError) as e:
                logger.warning("Could not remove stored file", extra={"key": key, "error": str(e)})

    # Versions

    @staticmethod
    async def list_versions(db: AsyncSession, user: User, document_id: UUID) -> List[VersionResponse]:
        document = await db.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not access.can_read_document(user, document):
            raise ForbiddenError()

        result = await db.execute(
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version.desc())
        )
        return [VersionResponse.model_validate(v) for v in result.scalars().all()]

    @staticmethod
    async def add_version(
        db: AsyncSession,
        user: User,
        document_id: UUID,
        *,
        filename: str,
        content: bytes,
        content_type: Optional[str],
        changes: Optional[str] = None,
    ) -> VersionResponse:
        """Append version max+1 and point the document at the new file"""
        document = await db.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not access.can_add_version(user, document):
            raise ForbiddenError()
        storage_service.validate_upload(filename, content_type, len(content))

        latest = (await db.execute(
            select(func.max(DocumentVersion.version)).where(DocumentVersion.document_id == document_id)
        )).scalar_one_or_none()
        next_version = (latest or 0) + 1

        key = await storage_service.upload(f"documents/{user.id}", filename, content, content_type)
        version = DocumentVersion(
            document_id=document_id,
            version=next_version,
            file_name=filename,
            file_path=key,
            file_size=len(content),
            changes=changes or f"Version {next_version}",
        )
        db.add(version)
        await db.commit()

        document.file_name = filename
        document.file_path = key
        document.file_size = len(content)
        document.mime_type = content_type
        await db.commit()

        logger.info(
            "Document version added",
            extra={"document_id": str(document_id), "version": next_version},
        )
        return VersionResponse.model_validate(version)
