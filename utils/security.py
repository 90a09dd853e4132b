"""
security helpers:
- Argon2 password hashing via argon2-cffi (also used for refresh-token storage)
- Password strength rules and random password generation
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
- Authorization header parsing
"""
from __future__ import annotations

import logging
import re
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from flask import current_app

from utils.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
RANDOM_PASSWORD_CHARSET = string.ascii_letters + string.digits + "!@#$%^&*"

_PASSWORD_RULES = (
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"\d"), "Password must contain at least one number"),
    (re.compile("[" + re.escape(PASSWORD_SPECIAL_CHARS) + "]"),
     "Password must contain at least one special character"),
)


def hash_password(password: str) -> str:
    """Hash a plaintext secret using Argon2 (salted, so equal inputs give different hashes)."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext secret against an Argon2 hash."""
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        logger.warning("Stored hash could not be verified")
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the hash was produced with weaker parameters than the current hasher."""
    try:
        return ph.check_needs_rehash(password_hash)
    except InvalidHashError:
        return True


def validate_password_strength(password: str) -> List[str]:
    """Return the list of unmet strength rules; empty means the password is acceptable."""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            errors.append(message)
    return errors


def generate_random_password(length: int = 12) -> str:
    """Generate a temporary password that satisfies validate_password_strength."""
    length = max(length, PASSWORD_MIN_LENGTH)
    while True:
        password = "".join(secrets.choice(RANDOM_PASSWORD_CHARSET) for _ in range(length))
        if not validate_password_strength(password):
            return password


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _config(config: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return config if config is not None else current_app.config


def _create_token(claims: Mapping[str, Any], token_type: str, config: Optional[Mapping[str, Any]],
                  jti: Optional[str] = None) -> str:
    cfg = _config(config)
    lifetime = cfg["JWT_ACCESS_TOKEN_EXPIRES"] if token_type == ACCESS else cfg["JWT_REFRESH_TOKEN_EXPIRES"]
    now = _now()
    payload = {
        "userId": claims["userId"],
        "email": claims["email"],
        "role": claims["role"],
        "code": claims["code"],
        "type": token_type,
        "jti": jti or generate_jti(),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "iss": cfg["JWT_ISSUER"],
        "aud": cfg["JWT_AUDIENCE"],
    }
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=cfg["JWT_ALGORITHM"])


def create_access_token(claims: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None) -> str:
    """Short-lived token authorizing API calls. claims: userId, email, role, code."""
    return _create_token(claims, ACCESS, config)


def create_refresh_token(claims: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None,
                         jti: Optional[str] = None) -> str:
    """Longer-lived token exchanged for a new pair; its jti keys the stored row."""
    return _create_token(claims, REFRESH, config, jti=jti)


def create_token_pair(claims: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None,
                      jti: Optional[str] = None) -> Dict[str, str]:
    return {
        "accessToken": create_access_token(claims, config),
        "refreshToken": create_refresh_token(claims, config, jti=jti),
    }


def decode_token(token: str, expected_type: str = ACCESS,
                 config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Decode and validate a JWT (signature, expiry, issuer, audience, type).
    Every failure raises the same AuthenticationError; the reason is only logged.
    """
    cfg = _config(config)
    message = "Invalid or expired refresh token" if expected_type == REFRESH else "Invalid or expired token"
    try:
        decoded = jwt.decode(
            token,
            cfg["JWT_SECRET"],
            algorithms=[cfg["JWT_ALGORITHM"]],
            audience=cfg["JWT_AUDIENCE"],
            issuer=cfg["JWT_ISSUER"],
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected %s token: expired", expected_type)
        raise AuthenticationError(message)
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected %s token: %s", expected_type, exc)
        raise AuthenticationError(message)

    if decoded.get("type") != expected_type:
        logger.info("Rejected token: expected type %s, got %s", expected_type, decoded.get("type"))
        raise AuthenticationError(message)
    return decoded


def unverified_claims(token: str) -> Optional[Dict[str, Any]]:
    """Read claims without checking signature or expiry. Never trust the result on its own."""
    try:
        return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError:
        return None


def token_expiration(token: str) -> Optional[datetime]:
    claims = unverified_claims(token)
    if not claims or "exp" not in claims:
        return None
    return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)


def extract_token_from_header(auth_header: Optional[str]) -> Optional[str]:
    """Return the token from 'Bearer <token>', or None for a missing/malformed header."""
    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]
    return None
