"""Auth API routes: register, login, logout, current user, role selection."""
from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import EmailStr, Field, StringConstraints, model_validator

from talent.errors import ConflictError, ValidationError
from talent.models import Role
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, MessageResponse, PublicUser, UserSummary
from web.api.utils import public_user, user_summary
from web.auth import (
    Principal,
    authenticate,
    clear_session_cookie,
    create_access_token,
    hash_password,
    require_user,
    set_session_cookie,
)

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api", tags=["auth"])

# Passwords are taken verbatim; ApiModel whitespace stripping does not apply to them
NewPassword = Annotated[str, StringConstraints(strip_whitespace=False, min_length=6)]
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1)]


class LoginRequest(ApiModel):
    email: EmailStr
    password: Password


class RegisterRequest(ApiModel):
    email: EmailStr
    password: NewPassword
    confirm_password: NewPassword
    first_name: str = Field(min_length=1, max_length=64)
    last_name: str = Field(min_length=1, max_length=64)
    role: Role = Role.PLAYER
    profile_image: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SessionResponse(ApiModel):
    user: UserSummary
    access_token: str
    token_type: str = "bearer"


class UserEnvelope(ApiModel):
    user: UserSummary


class PublicUserEnvelope(ApiModel):
    user: PublicUser


class RoleUpdate(ApiModel):
    role: str


def _start_session(response: Response, user) -> SessionResponse:
    token = create_access_token(user.id)
    set_session_cookie(response, token)
    return SessionResponse(user=user_summary(user), access_token=token)


@router.post("/auth/register", response_model=SessionResponse, status_code=201)
async def register(body: RegisterRequest, response: Response, storage: Storage = Depends(get_storage)):
    """Create an account and log it in. Role defaults to player."""
    user = await storage.create_user(
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        profile_image=body.profile_image,
    )
    logger.info("Registered user %s as %s", user.id, user.role)
    return _start_session(response, user)


@router.post("/auth/login", response_model=SessionResponse)
async def login(body: LoginRequest, response: Response, storage: Storage = Depends(get_storage)):
    """Verify credentials, set the session cookie and return the token."""
    user = await authenticate(storage, body.email, body.password)
    logger.info("User %s logged in", user.id)
    return _start_session(response, user)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(response: Response, user: Principal = Depends(require_user)):
    """End the session by clearing the cookie."""
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/me", response_model=UserEnvelope)
async def get_me(user: Principal = Depends(require_user)):
    """Get current authenticated user."""
    return UserEnvelope(user=user_summary(user))


@router.put("/auth/update-role", response_model=UserEnvelope)
@router.put("/auth/role", response_model=UserEnvelope, include_in_schema=False)
async def update_role(
    body: RoleUpdate,
    user: Principal = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    """Switch role during onboarding. Locked once a profile exists for the current role.

    Also answers on /api/auth/role.
    """
    try:
        role = Role(body.role)
    except ValueError:
        raise ValidationError(
            "Invalid role", errors=[{"path": "role", "message": "Must be player, scout or academy"}]
        ) from None
    if role == user.role:
        return UserEnvelope(user=user_summary(user))
    if await storage.get_profile(user.role, user.id):
        raise ConflictError("Role can no longer be changed once a profile has been created")
    updated = await storage.update_user_role(user.id, role)
    if not updated:
        raise HTTPException(404, "User not found")
    logger.info("User %s switched role %s -> %s", user.id, user.role.value, role.value)
    return UserEnvelope(user=user_summary(updated))


@router.get("/users/{user_id}", response_model=PublicUserEnvelope)
async def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    """Public user summary (no email)."""
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return PublicUserEnvelope(user=public_user(user))
