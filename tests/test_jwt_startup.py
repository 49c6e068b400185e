"""
tests/test_jwt_startup — JWT Secret Validation at Startup
===========================================================
The API must refuse to start when JWT_SECRET is missing, blank, too short,
or a known weak default.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import jwt
import pytest
from fastapi import HTTPException

from startupconnect.api import deps


class TestJWTSecretValidation:
    """Prove that _load_jwt_secret() rejects bad secrets and accepts good ones."""

    def test_rejects_missing_secret(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("JWT_SECRET", None)
            with pytest.raises(RuntimeError, match="JWT_SECRET environment variable is not set"):
                deps._load_jwt_secret()

    def test_rejects_empty_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": ""}):
            with pytest.raises(RuntimeError, match="JWT_SECRET environment variable is not set"):
                deps._load_jwt_secret()

    def test_rejects_known_weak_default(self):
        with patch.dict(os.environ, {"JWT_SECRET": "startupconnect-dev-secret-change-me"}):
            with pytest.raises(RuntimeError, match="known weak default"):
                deps._load_jwt_secret()

    def test_rejects_short_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": "tooshort"}):
            with pytest.raises(RuntimeError, match="too short"):
                deps._load_jwt_secret()

    def test_accepts_strong_secret(self):
        good_secret = "a" * 64
        with patch.dict(os.environ, {"JWT_SECRET": good_secret}):
            assert deps._load_jwt_secret() == good_secret


class TestCurrentUser:
    def _token(self, payload: dict, secret: str | None = None) -> str:
        return jwt.encode(payload, secret or deps.JWT_SECRET, algorithm=deps.JWT_ALGORITHM)

    def test_subject_is_member_id(self):
        token = self._token({"sub": "alice"})
        assert deps.get_current_user(f"Bearer {token}") == "alice"

    def test_wrong_signature(self):
        token = self._token({"sub": "alice"}, secret="b" * 64)
        with pytest.raises(HTTPException) as exc_info:
            deps.get_current_user(f"Bearer {token}")
        assert exc_info.value.status_code == 401

    def test_missing_subject(self):
        token = self._token({"name": "alice"})
        with pytest.raises(HTTPException) as exc_info:
            deps.get_current_user(f"Bearer {token}")
        assert exc_info.value.detail == "Token has no subject"

    def test_missing_header(self):
        with pytest.raises(HTTPException):
            deps.get_current_user(None)
