import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..exceptions import InvalidCredentials, InvalidInput, NotFound
from ..users import service as user_service
from ..users.models import Role, User
from .models import PasswordResetToken
from .schema import Principal

logger = logging.getLogger(__name__)


def create_access_token(user: User) -> str:
    """
    사용자 객체를 기반으로 Access Token을 생성합니다.
    역할(role)은 발급 시점의 스냅샷이며, 만료 전까지 DB와 재대조하지 않습니다.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "role": Role(user.role).value,
        "type": "access",   # 토큰 타입 명시
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """
    토큰 서명/만료를 검증하고 Principal 을 반환합니다. 상태를 변경하지 않습니다.
    실패 사유(reason)는 예외에만 담기고 응답에는 노출되지 않습니다.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise InvalidCredentials(reason="expired_token")
    except JWTError:
        raise InvalidCredentials(reason="invalid_token")

    if payload.get("type") != "access":
        raise InvalidCredentials(reason="wrong_token_type")

    try:
        return Principal(id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise InvalidCredentials(reason="malformed_claims")


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """
    사용자 이메일과 비밀번호로 인증을 시도합니다.
    성공 시 User 객체를, 실패 시 None을 반환합니다.
    """
    user = await user_service.get_user_by_email(email, db)

    if not user or not await user_service.verify_password(password, user.hashed_password):
        return None
    return user


def _hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite 는 timezone 정보를 보존하지 않으므로 naive 값은 UTC 로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def create_password_reset_token(db: AsyncSession, email: str) -> tuple[User, str]:
    """
    재설정 토큰을 발급합니다. 원문 토큰은 호출자에게만 반환되고 DB 에는 해시만 저장됩니다.
    해당 사용자의 이전 토큰은 모두 폐기합니다.
    """
    user = await user_service.get_user_by_email(email, db)
    if user is None:
        raise NotFound("User not found")

    raw_token = secrets.token_hex(32)  # 256-bit
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user.id))
    db.add(
        PasswordResetToken(
            user_id=user.id,
            token_hash=_hash_reset_token(raw_token),
            expires_at=datetime.now(timezone.utc)
            + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES),
        )
    )
    await db.commit()
    logger.info("Password reset token issued for user_id=%s", user.id)
    return user, raw_token


async def reset_password(db: AsyncSession, raw_token: str, new_password: str) -> None:
    result = await db.execute(
        select(PasswordResetToken).where(PasswordResetToken.token_hash == _hash_reset_token(raw_token))
    )
    reset_token = result.scalar_one_or_none()
    if reset_token is None:
        raise InvalidInput("Invalid or expired token")

    if _as_utc(reset_token.expires_at) <= datetime.now(timezone.utc):
        await db.delete(reset_token)
        await db.commit()
        logger.info("Expired password reset token discarded for user_id=%s", reset_token.user_id)
        raise InvalidInput("Invalid or expired token")

    user = await user_service.get_user_by_id(reset_token.user_id, db)
    if user is None:
        raise InvalidInput("Invalid or expired token")

    user_service.set_password(user, new_password)
    await db.delete(reset_token)
    await db.commit()
    logger.info("Password reset completed for user_id=%s", user.id)
