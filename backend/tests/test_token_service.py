"""Tests for bearer token issue/verify."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from newsroom.auth import service as auth_service
from newsroom.config import settings
from newsroom.exceptions import InvalidCredentials
from newsroom.users.models import Role, User


def _user(user_id=7, role=Role.JOURNALIST):
    return User(id=user_id, email="j@x.com", username="j", hashed_password="x", role=role)


def _encode(claims):
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def test_issue_then_verify_returns_principal():
    token = auth_service.create_access_token(_user())
    principal = auth_service.decode_access_token(token)
    assert principal.id == 7
    assert principal.role == Role.JOURNALIST


def test_token_expires_after_one_hour():
    token = auth_service.create_access_token(_user())
    claims = jwt.get_unverified_claims(token)
    lifetime = claims["exp"] - datetime.now(timezone.utc).timestamp()
    assert 3500 < lifetime <= 3600


def test_role_is_a_snapshot_at_issuance():
    user = _user(role=Role.JOURNALIST)
    token = auth_service.create_access_token(user)
    user.role = Role.EDITOR  # 이후 역할 변경은 기존 토큰에 반영되지 않음
    assert auth_service.decode_access_token(token).role == Role.JOURNALIST


def test_expired_token_is_rejected():
    token = _encode({
        "sub": "7", "role": "EDITOR", "type": "access",
        "exp": datetime.now(timezone.utc) - timedelta(seconds=5),
    })
    with pytest.raises(InvalidCredentials) as exc:
        auth_service.decode_access_token(token)
    assert exc.value.reason == "expired_token"
    assert exc.value.status_code == 401


def test_tampered_signature_is_rejected():
    token = jwt.encode(
        {"sub": "7", "role": "EDITOR", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidCredentials) as exc:
        auth_service.decode_access_token(token)
    assert exc.value.reason == "invalid_token"


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidCredentials):
        auth_service.decode_access_token("not-a-jwt")


def test_wrong_token_type_is_rejected():
    token = _encode({
        "sub": "7", "role": "EDITOR", "type": "refresh",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
    })
    with pytest.raises(InvalidCredentials) as exc:
        auth_service.decode_access_token(token)
    assert exc.value.reason == "wrong_token_type"


def test_unknown_role_claim_is_rejected():
    token = _encode({
        "sub": "7", "role": "ADMIN", "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
    })
    with pytest.raises(InvalidCredentials) as exc:
        auth_service.decode_access_token(token)
    assert exc.value.reason == "malformed_claims"
