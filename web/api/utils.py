"""Shared API utilities."""
from __future__ import annotations

from typing import Optional

from talent.models import Role, User
from web.api.schemas import PROFILE_SCHEMAS, PublicUser, UserSummary
from web.auth import Principal


def user_summary(user: User | Principal) -> UserSummary:
    """Own-account view of a user row or request principal."""
    return UserSummary(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=Role(user.role).value,
        profile_image=user.profile_image,
    )


def public_user(user: Optional[User]) -> Optional[PublicUser]:
    """Public view of a user. None stays None (e.g. a message partner that no longer resolves)."""
    if not user:
        return None
    return PublicUser(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        role=Role(user.role).value,
        profile_image=user.profile_image,
    )


def profile_out(role: Role | str, profile):
    """Serialize a profile row with the schema for its role."""
    if profile is None:
        return None
    return PROFILE_SCHEMAS[Role(role).value].model_validate(profile)
