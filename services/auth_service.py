"""
Authentication and session lifecycle.

Refresh tokens are stored one row per token: the row id is the token's jti
claim and only an argon2 hash of the token itself is kept. A refresh
consumes its row (conditional revoke) and inserts the replacement in the
same transaction, so a token can be exchanged at most once.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.user import User
from utils.exceptions import AuthenticationError, NotFoundError, ValidationError
from utils.security import (
    REFRESH,
    create_token_pair,
    decode_token,
    generate_jti,
    hash_password,
    needs_rehash,
    unverified_claims,
    validate_password_strength,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH = "Invalid or expired refresh token"
DEFAULT_RETENTION = timedelta(days=7)


class AuthService:
    def __init__(self, storage, user_service, config: Mapping[str, Any]):
        self.storage = storage
        self.users = user_service
        self.config = config

    @property
    def session(self):
        return self.storage.get_session()

    def _issue_tokens(self, user: User) -> Dict[str, str]:
        """Sign a new pair and stage the refresh row; the caller commits."""
        claims = user.token_claims()
        jti = generate_jti()
        tokens = create_token_pair(claims, self.config, jti=jti)
        self.storage.new(RefreshToken(
            id=jti,
            hashed_token=hash_password(tokens["refreshToken"]),
            user_id=user.id,
            revoked=False,
        ))
        return tokens

    def _active_tokens(self, user_id: int):
        return self.session.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked.is_(False),
        )

    def register(self, data: Mapping[str, Any]) -> User:
        """Public sign-up; same rules as an admin create, any role accepted."""
        return self.users.create(data)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.users.get_by_email(email)
        if user is None:
            logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not verify_password(password, user.password):
            logger.warning("Login failed: wrong password for user id=%s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if needs_rehash(user.password):
            user.password = hash_password(password)
        tokens = self._issue_tokens(user)
        self.storage.save()
        logger.info("User id=%s logged in", user.id)
        return {"user": user, "tokens": tokens}

    def refresh(self, refresh_token: str) -> Dict[str, str]:
        """Exchange a refresh token for a new pair. The presented token is consumed."""
        claims = decode_token(refresh_token, REFRESH, self.config)
        user_id = claims.get("userId")

        row = self._active_tokens(user_id).filter(RefreshToken.id == claims.get("jti")).first()
        if row is None:
            logger.warning("Refresh rejected: no active token row for user id=%s", user_id)
            raise AuthenticationError(INVALID_REFRESH)
        if not verify_password(refresh_token, row.hashed_token):
            logger.warning("Refresh rejected: hash mismatch for token %s", row.id)
            raise AuthenticationError(INVALID_REFRESH)

        user = self.storage.get(User, user_id)
        if user is None:
            logger.warning("Refresh rejected: user id=%s no longer exists", user_id)
            raise AuthenticationError(INVALID_REFRESH)

        # of two concurrent refreshes only one sees revoked = false
        consumed = (
            self.session.query(RefreshToken)
            .filter(RefreshToken.id == row.id, RefreshToken.revoked.is_(False))
            .update({"revoked": True, "updated_at": utcnow()})
        )
        if consumed != 1:
            self.storage.rollback()
            logger.warning("Refresh rejected: token %s already consumed", row.id)
            raise AuthenticationError(INVALID_REFRESH)

        tokens = self._issue_tokens(user)
        self.storage.save()
        logger.info("Rotated refresh token for user id=%s", user.id)
        return tokens

    def logout(self, user_id: int, refresh_token: Optional[str] = None) -> None:
        """
        With a token, revoke only that session; an unknown or mismatching
        token is ignored. Without one, revoke every session of the user.
        """
        if not refresh_token:
            self.revoke_all_tokens(user_id)
            return

        claims = unverified_claims(refresh_token) or {}
        jti = claims.get("jti")
        row = self._active_tokens(user_id).filter(RefreshToken.id == jti).first() if jti else None
        if row is None or not verify_password(refresh_token, row.hashed_token):
            logger.info("Logout for user id=%s matched no active session", user_id)
            return
        row.revoked = True
        self.storage.save()
        logger.info("User id=%s logged out of session %s", user_id, row.id)

    def revoke_all_tokens(self, user_id: int) -> int:
        count = self._active_tokens(user_id).update({"revoked": True, "updated_at": utcnow()})
        self.storage.save()
        logger.info("Revoked %d refresh tokens for user id=%s", count, user_id)
        return count

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.storage.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(current_password, user.password):
            logger.warning("Password change refused for user id=%s: wrong current password", user_id)
            raise AuthenticationError("Current password is incorrect")

        problems = validate_password_strength(new_password)
        if problems:
            raise ValidationError("Password does not meet requirements", details={"newPassword": problems})
        if verify_password(new_password, user.password):
            raise ValidationError("New password must be different from current password")

        user.password = hash_password(new_password)
        revoked = self._active_tokens(user_id).update({"revoked": True, "updated_at": utcnow()})
        self.storage.save()
        logger.info("Password changed for user id=%s; %d sessions revoked", user_id, revoked)

    def cleanup_expired_tokens(self) -> int:
        """Revoke active refresh tokens older than the retention window."""
        retention = self.config.get("REFRESH_TOKEN_RETENTION") or DEFAULT_RETENTION
        cutoff = utcnow() - retention
        count = (
            self.session.query(RefreshToken)
            .filter(RefreshToken.revoked.is_(False), RefreshToken.created_at < cutoff)
            .update({"revoked": True, "updated_at": utcnow()})
        )
        self.storage.save()
        logger.info("Token cleanup revoked %d refresh tokens", count)
        return count
