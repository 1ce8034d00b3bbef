"""
애플리케이션 공통 예외 및 전역 예외 핸들러.

서비스/라우터 어디에서든 바로 raise 할 수 있도록 모든 예외는 HTTPException 을 상속합니다.
응답 본문은 FastAPI 기본 형식과 동일하게 항상 ``detail`` 키를 가집니다.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class Unauthenticated(HTTPException):
    """자격 증명이 없거나 유효하지 않음 (401)."""

    def __init__(self, detail: str = "Could not validate credentials", reason: str = "unauthenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        # 진단용 내부 사유. 응답에는 노출하지 않습니다.
        self.reason = reason


class MissingCredentials(Unauthenticated):
    def __init__(self):
        super().__init__(reason="missing_token")


class InvalidCredentials(Unauthenticated):
    def __init__(self, reason: str = "invalid_token"):
        super().__init__(reason=reason)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "Invalid input", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.errors = errors or []


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": _field_errors(exc)},
    )


async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    content: Dict[str, Any] = {"detail": exc.detail}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # 서비스에서 변환되지 않은 저장소 제약 위반 (유니크 경합 등)
    logger.warning("Unhandled integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Request conflicts with existing data"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidInput, invalid_input_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
