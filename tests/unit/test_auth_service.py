"""
Unit Tests for token verification and role guards
"""
import time

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from portal.domain.enums import UserRole
from portal.services.auth_service import _verify_token, get_current_user, require_roles
from tests.conftest import JWT_SECRET, make_token


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


class TestVerifyToken:

    def test_valid_token_returns_subject(self):
        assert _verify_token(make_token('user-1')) == 'user-1'

    def test_expired(self):
        token = make_token('user-1', exp=int(time.time()) - 3600)
        with pytest.raises(HTTPException) as exc:
            _verify_token(token)
        assert exc.value.status_code == 401
        assert exc.value.detail == 'Token has expired'

    def test_wrong_audience(self):
        with pytest.raises(HTTPException) as exc:
            _verify_token(make_token('user-1', aud='somebody-else'))
        assert exc.value.status_code == 401

    def test_wrong_secret(self):
        token = jwt.encode(
            {'sub': 'user-1', 'aud': 'authenticated', 'exp': int(time.time()) + 60},
            'a-completely-different-secret-value-0000',
            algorithm='HS256',
        )
        with pytest.raises(HTTPException) as exc:
            _verify_token(token)
        assert exc.value.status_code == 401

    def test_missing_subject(self):
        token = jwt.encode(
            {'aud': 'authenticated', 'exp': int(time.time()) + 60},
            JWT_SECRET,
            algorithm='HS256',
        )
        with pytest.raises(HTTPException) as exc:
            _verify_token(token)
        assert exc.value.status_code == 401


class TestCurrentUser:

    async def test_resolves_user(self, db, faculty):
        user = await get_current_user(_credentials(make_token(faculty['id'])), db)
        assert user['id'] == faculty['id']

    async def test_unknown_user(self, db):
        with pytest.raises(HTTPException) as exc:
            await get_current_user(_credentials(make_token('ghost')), db)
        assert exc.value.status_code == 401

    async def test_deactivated_user(self, db, make_user):
        user = make_user(UserRole.STUDENT, is_active=False)
        with pytest.raises(HTTPException) as exc:
            await get_current_user(_credentials(make_token(user['id'])), db)
        assert exc.value.status_code == 403


class TestRequireRoles:

    async def test_allows_listed_role(self, faculty):
        guard = require_roles(UserRole.TEACHER)
        assert await guard(current_user=faculty) == faculty

    async def test_rejects_other_roles(self, student_user, caplog):
        guard = require_roles(UserRole.TEACHER, UserRole.PRINCIPAL)
        with pytest.raises(HTTPException) as exc:
            await guard(current_user=student_user)
        assert exc.value.status_code == 403
        assert 'UNAUTHORIZED_ACCESS' in caplog.text
        assert f"user {student_user['id']} with role STUDENT tried a PRINCIPAL/TEACHER-only route" in caplog.text
