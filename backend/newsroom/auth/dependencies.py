import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..exceptions import Forbidden, MissingCredentials, Unauthenticated
from ..users.models import Role
from . import service as auth_service
from .schema import Principal

logger = logging.getLogger(__name__)

# auto_error=False: 토큰 누락도 직접 처리해 401 로 통일합니다.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        logger.info("Authentication failed: missing_token")
        raise MissingCredentials()
    try:
        return auth_service.decode_access_token(credentials.credentials)
    except Unauthenticated as exc:
        logger.warning("Authentication failed: %s", exc.reason)
        raise


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """토큰이 없으면 None. 토큰이 있는데 유효하지 않으면 401."""
    if credentials is None:
        return None
    return await get_current_principal(credentials)


CurrentPrincipal = Depends(get_current_principal)


def require_roles(*allowed: Role) -> Callable:
    """
    라우트별로 허용 역할 집합을 선언하는 의존성 팩토리.
    역할 간 상속 관계는 없으며, principal.role 이 집합에 포함될 때만 통과합니다.
    """
    allowed_roles = frozenset(allowed)

    async def _guard(principal: Principal = CurrentPrincipal) -> Principal:
        if principal.role not in allowed_roles:
            logger.warning(
                "Role check denied: principal_id=%s role=%s allowed=%s",
                principal.id,
                principal.role.value,
                sorted(r.value for r in allowed_roles),
            )
            raise Forbidden("Insufficient role for this action")
        return principal

    return _guard


ArticleWriter = Depends(require_roles(Role.JOURNALIST, Role.EDITOR))
EditorOnly = Depends(require_roles(Role.EDITOR))
