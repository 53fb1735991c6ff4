from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.auth import RegisterRequest
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.user import UserResponse
from study_portal.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=SuccessResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def register(
    user_in: RegisterRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create a student or teacher account with default preferences.
    """
    user = await UserService.create_user(
        db,
        email=user_in.email,
        password=user_in.password,
        name=user_in.name,
        role=user_in.role,
    )
    return SuccessResponse(data=UserResponse.model_validate(user), message="User created successfully")


@router.get("/me", response_model=SuccessResponse[UserResponse])
async def read_current_user(
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Current user with preferences.
    """
    return SuccessResponse(data=UserResponse.model_validate(current_user))
