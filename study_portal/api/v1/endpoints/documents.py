from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.enums import DocumentType
from study_portal.models.user import User
from study_portal.schemas.document import (
    DocumentDetailResponse,
    DocumentResponse,
    DocumentUpdate,
    FeedbackCreate,
    FeedbackList,
    FeedbackResponse,
    VersionResponse,
)
from study_portal.schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse
from study_portal.services.document_service import DocumentService, parse_tags
from study_portal.services import storage_service
from study_portal.services.feedback_service import FeedbackService

router = APIRouter()

MAX_PAGE_SIZE = 100


@router.get("", response_model=PaginatedResponse[DocumentResponse])
async def list_documents(
    type: Optional[DocumentType] = Query(None),
    subject: Optional[UUID] = Query(None, description="Subject id"),
    shared: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, description="Page size, capped at 100"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Documents visible to the caller, newest first.
    Students see their own documents and shared ones; teachers see all.
    """
    limit = min(limit, MAX_PAGE_SIZE)
    documents, total = await DocumentService.list_documents(
        db,
        current_user,
        doc_type=type,
        subject_id=subject,
        shared=shared,
        search=search,
        page=page,
        limit=limit,
    )
    return PaginatedResponse(data=documents, meta=PaginationMeta.build(page, limit, total))


@router.post("", response_model=SuccessResponse[DocumentResponse], status_code=status.HTTP_201_CREATED)
@router.post("/upload", response_model=SuccessResponse[DocumentResponse], status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=255),
    subject_id: UUID = Form(..., alias="subjectId"),
    description: Optional[str] = Form(None),
    type: DocumentType = Form(DocumentType.OTHER),
    is_shared: bool = Form(False, alias="isShared"),
    allow_peer_feedback: bool = Form(True, alias="allowPeerFeedback"),
    tags: Optional[str] = Form(None, description="Comma separated tag names"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Upload a file as a new document (multipart form).
    """
    content = await storage_service.read_upload(file)
    document = await DocumentService.upload_document(
        db,
        current_user,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        title=title,
        subject_id=subject_id,
        description=description,
        doc_type=type,
        is_shared=is_shared,
        allow_peer_feedback=allow_peer_feedback,
        tags=parse_tags(tags),
    )
    return SuccessResponse(data=document, message="Document uploaded successfully")


@router.get("/{document_id}", response_model=SuccessResponse[DocumentDetailResponse])
async def get_document(
    document_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    document = await DocumentService.view_document(db, current_user, document_id)
    return SuccessResponse(data=document)


@router.put("/{document_id}", response_model=SuccessResponse[DocumentResponse])
async def update_document(
    document_id: UUID,
    document_in: DocumentUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    document = await DocumentService.update_document(db, current_user, document_id, document_in)
    return SuccessResponse(data=document, message="Document updated successfully")


@router.delete("/{document_id}", response_model=SuccessResponse[None])
async def delete_document(
    document_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await DocumentService.delete_document(db, current_user, document_id)
    return SuccessResponse(data=None, message="Document deleted successfully")


# Feedback

@router.get("/{document_id}/feedback", response_model=SuccessResponse[FeedbackList])
async def list_feedback(
    document_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Feedback on a document with its rounded average rating.
    """
    feedback = await FeedbackService.list_feedback(db, current_user, document_id)
    return SuccessResponse(data=feedback)


@router.post("/{document_id}/feedback", response_model=SuccessResponse[FeedbackResponse])
async def submit_feedback(
    document_id: UUID,
    feedback_in: FeedbackCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create or replace the caller's feedback on a document.
    """
    feedback = await FeedbackService.submit_feedback(db, current_user, document_id, feedback_in)
    return SuccessResponse(data=feedback, message="Feedback saved successfully")


# Versions

@router.get("/{document_id}/versions", response_model=SuccessResponse[List[VersionResponse]])
async def list_versions(
    document_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    versions = await DocumentService.list_versions(db, current_user, document_id)
    return SuccessResponse(data=versions)


@router.post(
    "/{document_id}/versions",
    response_model=SuccessResponse[VersionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_version(
    document_id: UUID,
    file: UploadFile = File(...),
    changes: Optional[str] = Form(None),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Upload the next version of a document (owner only).
    """
    content = await storage_service.read_upload(file)
    version = await DocumentService.add_version(
        db,
        current_user,
        document_id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        changes=changes,
    )
    return SuccessResponse(data=version, message="New version uploaded successfully")
