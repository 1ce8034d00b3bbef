from typing import Optional

from pydantic import EmailStr, Field

from ..models import CustomModel
from ..users.models import Role
from ..users.schema import UserPublic


class Principal(CustomModel):
    """검증된 토큰에서 추출한 신원 + 역할 (발급 시점 스냅샷)."""
    id: int
    role: Role


class LoginRequest(CustomModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(CustomModel):
    message: str
    token: str
    user: UserPublic


class RegisterResponse(CustomModel):
    message: str
    user: UserPublic


class ForgotPasswordRequest(CustomModel):
    email: EmailStr


class ForgotPasswordResponse(CustomModel):
    message: str
    reset_token: Optional[str] = None


class ResetPasswordRequest(CustomModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class MessageResponse(CustomModel):
    message: str
