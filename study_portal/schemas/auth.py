from pydantic import EmailStr, Field

from study_portal.models.enums import UserRole
from study_portal.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    name: str = Field(..., min_length=1, description="Name is required")
    role: UserRole = UserRole.STUDENT
