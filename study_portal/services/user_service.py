"""User Service - Business Logic Layer"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_portal.core.exceptions import BadRequestError
from study_portal.core.security import get_password_hash
from study_portal.models.enums import UserRole
from study_portal.models.user import User, UserPreferences
from study_portal.schemas.user import PreferencesUpdate, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(
            select(User).options(selectinload(User.preferences)).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Case-insensitive email lookup"""
        result = await db.execute(
            select(User)
            .options(selectinload(User.preferences))
            .where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.STUDENT,
    ) -> User:
        """
        Create a user together with default preferences.

        Raises:
            BadRequestError: If the email is already registered
        """
        email = email.strip().lower()
        if await UserService.get_user_by_email(db, email):
            raise BadRequestError("User with this email already exists")

        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=name.strip(),
            role=role,
            is_active=True,
        )
        user.preferences = UserPreferences()
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BadRequestError("User with this email already exists")

        logger.info("User registered", extra={"user_id": str(user.id), "role": role.value})
        return await UserService.get_user_by_id(db, user.id)

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await db.commit()
        return await UserService.get_user_by_id(db, user.id)

    @staticmethod
    async def update_preferences(db: AsyncSession, user: User, data: PreferencesUpdate) -> UserPreferences:
        """Apply partial preference changes, creating the row if it is missing"""
        prefs = user.preferences
        if prefs is None:
            prefs = UserPreferences(user_id=user.id)
            db.add(prefs)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(prefs, field, value)
        await db.commit()
        await db.refresh(prefs)
        return prefs
