import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..exceptions import InvalidInput
from .models import Role, User as UserModel

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


async def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    username: str,
    password: str,
    role: Role = Role.USER,
) -> UserModel:
    """사용자를 생성합니다. 이메일 중복은 DB 유니크 제약으로 판정합니다."""
    db_user = UserModel(
        email=email,
        username=username,
        hashed_password=hash_password(password),
        role=role,
    )
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise InvalidInput("Email already registered")
    await db.refresh(db_user)
    logger.info("User created: id=%s role=%s", db_user.id, db_user.role.value)
    return db_user


async def get_user_by_id(user_id: int, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.email == email))
    return result.scalar_one_or_none()


def set_password(user: UserModel, new_password: str) -> None:
    # 커밋은 호출자의 트랜잭션 범위에서 수행합니다.
    user.hashed_password = hash_password(new_password)
