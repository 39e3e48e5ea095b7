"""Authentication for web API: password hashing, session tokens, role checks."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Depends, Header, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

import config
from talent.errors import InvalidCredentials
from talent.models import Role, User
from talent.storage import Storage, get_storage

logger = logging.getLogger("talent.auth")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.BCRYPT_ROUNDS)
http_bearer = HTTPBearer(auto_error=False)


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit. Pre-hash longer passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(_prepare_password(plain), hashed)


@dataclass(frozen=True)
class Principal:
    """Caller identity for one request, built from a freshly loaded user row."""

    id: int
    email: str
    role: Role
    first_name: str
    last_name: str
    profile_image: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            email=user.email,
            role=Role(user.role),
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image=user.profile_image,
        )


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=config.SESSION_MAX_AGE_HOURS)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_MAX_AGE_HOURS * 3600,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )


async def authenticate(storage: Storage, email: str, password: str) -> User:
    """Check email/password. Unknown email and wrong password fail the same way."""
    user = await storage.get_user_by_email(email)
    if not user:
        pwd_context.dummy_verify()
        logger.warning("Failed login for unknown email %s", email)
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.warning("Failed login for user %s", user.id)
        raise InvalidCredentials()
    return user


def _session_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    x_auth_token: Optional[str],
    session_cookie: Optional[str],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return x_auth_token or session_cookie or None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token"),
    session_cookie: Optional[str] = Cookie(None, alias=config.SESSION_COOKIE_NAME),
    storage: Storage = Depends(get_storage),
) -> Optional[Principal]:
    """Return the caller, or None if not authenticated.

    Accepts Authorization: Bearer, X-Auth-Token, or the session cookie. The user row
    is reloaded on every request so role changes apply immediately.
    """
    token = _session_token(credentials, x_auth_token, session_cookie)
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    try:
        user_id = int(payload.get("sub", ""))
    except ValueError:
        return None
    user = await storage.get_user(user_id)
    if not user:
        return None
    return Principal.from_user(user)


async def require_user(
    user: Optional[Principal] = Depends(get_current_user),
) -> Principal:
    """Require authenticated user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(*roles: Role):
    """Dependency factory: require a logged-in user with one of `roles`. Raises 403 otherwise."""
    allowed = {Role(r) for r in roles}

    async def _require(user: Principal = Depends(require_user)) -> Principal:
        if user.role not in allowed:
            logger.warning("User %s (%s) denied; requires %s", user.id, user.role.value, sorted(r.value for r in allowed))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return _require


require_player = require_roles(Role.PLAYER)
require_scout = require_roles(Role.SCOUT)
require_academy = require_roles(Role.ACADEMY)
