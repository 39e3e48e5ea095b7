"""Profile API: one profile per user, shaped by the user's role."""
from __future__ import annotations

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from talent.models import Role
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, ProfileOut, PublicUser
from web.api.utils import profile_out, public_user
from web.auth import Principal, require_academy, require_player, require_scout, require_user

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api/profiles", tags=["profiles"])

Rating = Annotated[int, Field(ge=0, le=100)]


# --- Pydantic schemas ---


class PlayerProfileIn(ApiModel):
    position: Optional[str] = Field(None, max_length=64)
    age: Optional[int] = Field(None, ge=0, le=100)
    location: Optional[str] = Field(None, max_length=128)
    bio: Optional[str] = None
    achievements: Optional[str] = None
    overall_rating: Optional[Rating] = None
    appearances: Optional[int] = Field(None, ge=0)
    goals: Optional[int] = Field(None, ge=0)
    stats: Optional[dict[str, Rating]] = None  # pace, shooting, passing, dribbling, defense, physical, ...


class ScoutProfileIn(ApiModel):
    organization: Optional[str] = Field(None, max_length=128)
    position: Optional[str] = Field(None, max_length=64)
    bio: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)


class AcademyProfileCreate(ApiModel):
    name: str = Field(min_length=1, max_length=128)
    location: Optional[str] = Field(None, max_length=128)
    description: Optional[str] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    website: Optional[str] = Field(None, max_length=255)


class AcademyProfileUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    location: Optional[str] = Field(None, max_length=128)
    description: Optional[str] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    website: Optional[str] = Field(None, max_length=255)


class ProfileEnvelope(ApiModel):
    profile: ProfileOut


class ProfileWithUser(ApiModel):
    profile: ProfileOut
    user: Optional[PublicUser] = None


class PlayerListing(ApiModel):
    profile: ProfileOut
    user: PublicUser


class PlayerListResponse(ApiModel):
    players: list[PlayerListing]


# --- Shared handlers ---


async def _create(storage: Storage, user: Principal, data: dict[str, Any]) -> ProfileEnvelope:
    profile = await storage.create_profile(user.role, user.id, data)
    logger.info("Created %s profile for user %s", user.role.value, user.id)
    return ProfileEnvelope(profile=profile_out(user.role, profile))


async def _update(storage: Storage, user: Principal, data: dict[str, Any]) -> ProfileEnvelope:
    if "name" in data and data["name"] is None:
        del data["name"]  # academy name is required; null means "leave unchanged"
    profile = await storage.update_profile(user.role, user.id, data)
    if not profile:
        raise HTTPException(404, "Profile not found")
    return ProfileEnvelope(profile=profile_out(user.role, profile))


# --- Reads ---


@router.get("/player", response_model=PlayerListResponse)
async def list_players(
    position: Optional[str] = None,
    location: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """Discover players. Optional case-insensitive position/location filters."""
    rows = await storage.list_player_profiles(position=position, location=location)
    return PlayerListResponse(
        players=[PlayerListing(profile=profile_out(Role.PLAYER, p), user=public_user(u)) for p, u in rows]
    )


@router.get("/me", response_model=ProfileWithUser)
async def get_my_profile(user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)):
    """Caller's own profile for their current role."""
    profile = await storage.get_profile(user.role, user.id)
    if not profile:
        raise HTTPException(404, "Profile not found")
    return ProfileWithUser(profile=profile_out(user.role, profile), user=public_user(await storage.get_user(user.id)))


@router.get("/{role}/{user_id}", response_model=ProfileWithUser)
async def get_profile(role: Role, user_id: int, storage: Storage = Depends(get_storage)):
    """Public profile of a user, looked up in the table for `role`."""
    profile = await storage.get_profile(role, user_id)
    if not profile:
        raise HTTPException(404, "Profile not found")
    return ProfileWithUser(profile=profile_out(role, profile), user=public_user(await storage.get_user(user_id)))


# --- Writes (caller's own profile only) ---


@router.post("/player", response_model=ProfileEnvelope, status_code=201)
async def create_player_profile(
    body: PlayerProfileIn, user: Principal = Depends(require_player), storage: Storage = Depends(get_storage)
):
    return await _create(storage, user, body.model_dump())


@router.put("/player", response_model=ProfileEnvelope)
async def update_player_profile(
    body: PlayerProfileIn, user: Principal = Depends(require_player), storage: Storage = Depends(get_storage)
):
    return await _update(storage, user, body.model_dump(exclude_unset=True))


@router.post("/scout", response_model=ProfileEnvelope, status_code=201)
async def create_scout_profile(
    body: ScoutProfileIn, user: Principal = Depends(require_scout), storage: Storage = Depends(get_storage)
):
    return await _create(storage, user, body.model_dump())


@router.put("/scout", response_model=ProfileEnvelope)
async def update_scout_profile(
    body: ScoutProfileIn, user: Principal = Depends(require_scout), storage: Storage = Depends(get_storage)
):
    return await _update(storage, user, body.model_dump(exclude_unset=True))


@router.post("/academy", response_model=ProfileEnvelope, status_code=201)
async def create_academy_profile(
    body: AcademyProfileCreate, user: Principal = Depends(require_academy), storage: Storage = Depends(get_storage)
):
    return await _create(storage, user, body.model_dump())


@router.put("/academy", response_model=ProfileEnvelope)
async def update_academy_profile(
    body: AcademyProfileUpdate, user: Principal = Depends(require_academy), storage: Storage = Depends(get_storage)
):
    return await _update(storage, user, body.model_dump(exclude_unset=True))
