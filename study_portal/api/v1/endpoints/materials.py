from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.study import MaterialCreate, MaterialResponse
from study_portal.services import storage_service
from study_portal.services.document_service import parse_tags
from study_portal.services.study_service import MaterialService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[MaterialResponse]])
async def list_materials(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    The current user's materials, newest first.
    """
    materials = await MaterialService.list_materials(db, current_user)
    return SuccessResponse(data=materials)


@router.post("", response_model=SuccessResponse[MaterialResponse], status_code=status.HTTP_201_CREATED)
async def create_material(
    material_in: MaterialCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    material = await MaterialService.create_material(db, current_user, material_in)
    return SuccessResponse(data=material, message="Material created successfully")


@router.post("/upload", response_model=SuccessResponse[MaterialResponse], status_code=status.HTTP_201_CREATED)
async def upload_material(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None, max_length=255),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None, max_length=100),
    tags: Optional[str] = Form(None, description="Comma separated tags"),
    folder_id: Optional[str] = Form(None, alias="folderId", max_length=64),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Upload a file as a material (multipart form). The type follows the file's MIME type.
    """
    content = await storage_service.read_upload(file)
    material = await MaterialService.upload_material(
        db,
        current_user,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        title=title,
        description=description,
        category=category,
        tags=parse_tags(tags),
        folder_id=folder_id,
    )
    return SuccessResponse(data=material, message="File uploaded successfully")


@router.delete("", response_model=SuccessResponse[None])
async def delete_material(
    material_id: UUID = Query(..., alias="materialId"),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await MaterialService.delete_material(db, current_user, material_id)
    return SuccessResponse(data=None, message="Material deleted successfully")
