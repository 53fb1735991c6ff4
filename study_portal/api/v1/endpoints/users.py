from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.responses import SuccessResponse
from study_portal.schemas.user import PreferencesResponse, PreferencesUpdate, ProfileUpdate, UserResponse
from study_portal.services.user_service import UserService

router = APIRouter()


@router.patch("/me", response_model=SuccessResponse[UserResponse])
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Update name, bio or avatar.
    """
    user = await UserService.update_profile(db, current_user, profile_in)
    return SuccessResponse(data=UserResponse.model_validate(user), message="Profile updated successfully")


@router.put("/me/preferences", response_model=SuccessResponse[PreferencesResponse])
async def update_preferences(
    preferences_in: PreferencesUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    prefs = await UserService.update_preferences(db, current_user, preferences_in)
    return SuccessResponse(data=PreferencesResponse.model_validate(prefs), message="Preferences updated successfully")
