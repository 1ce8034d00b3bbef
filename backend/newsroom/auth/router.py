import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from ..config import settings
from ..database import SessionDep
from ..exceptions import Forbidden, NotFound, Unauthenticated
from ..users import service as user_service
from ..users.models import Role
from ..users.schema import UserCreate, UserMe, UserPublic
from . import service as auth_service
from .dependencies import CurrentPrincipal, get_optional_principal
from .mailer import send_password_reset_email
from .schema import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    Principal,
    RegisterResponse,
    ResetPasswordRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserCreate,
    db: SessionDep,
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    role = body.role or Role.USER
    # USER 가 아닌 역할은 EDITOR 토큰으로 요청한 경우에만 부여
    if role != Role.USER and (principal is None or principal.role != Role.EDITOR):
        logger.warning("Privileged registration denied: requested_role=%s", role.value)
        raise Forbidden("Only editors can register staff accounts")

    user = await user_service.create_user(
        db, email=body.email, username=body.username, password=body.password, role=role
    )
    return {"message": "User registered successfully", "user": UserPublic.model_validate(user)}


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: SessionDep):
    user = await auth_service.authenticate_user(db, body.email, body.password)
    if not user:
        logger.info("Login failed for %s", body.email)
        raise Unauthenticated("Invalid credentials", reason="bad_login")

    token = auth_service.create_access_token(user)
    return {"message": "Login successful", "token": token, "user": UserPublic.model_validate(user)}


@router.get("/me", response_model=UserMe)
async def read_me(db: SessionDep, principal: Principal = CurrentPrincipal):
    user = await user_service.get_user_by_id(principal.id, db)
    if user is None:
        raise NotFound("User not found")
    return user


@router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
async def forgot_password(body: ForgotPasswordRequest, db: SessionDep, background_tasks: BackgroundTasks):
    user, raw_token = await auth_service.create_password_reset_token(db, body.email)
    background_tasks.add_task(send_password_reset_email, user.email, raw_token)

    response = {"message": "Password reset e-mail sent"}
    if settings.RESET_TOKEN_IN_RESPONSE:
        response["reset_token"] = raw_token
    return response


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, db: SessionDep):
    await auth_service.reset_password(db, body.token, body.new_password)
    return {"message": "Password has been reset"}
