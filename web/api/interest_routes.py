"""Scout interest log: scouts record what they looked at; players see who is watching."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from talent.errors import AuthorizationError, NotFoundError, ValidationError
from talent.models import InterestType, Role
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, InterestOut, PublicUser, ScoutProfileOut, VideoOut
from web.api.utils import public_user
from web.auth import Principal, require_scout

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api/interests", tags=["interests"])


class InterestCreate(ApiModel):
    player_id: int
    type: InterestType
    resource_id: Optional[int] = None


class PlayerInterestOut(InterestOut):
    scout: Optional[PublicUser] = None
    scout_profile: Optional[ScoutProfileOut] = None
    video: Optional[VideoOut] = None


class ScoutInterestOut(InterestOut):
    player: Optional[PublicUser] = None


class InterestEnvelope(ApiModel):
    interest: InterestOut


class PlayerInterestList(ApiModel):
    interests: list[PlayerInterestOut]


class ScoutInterestList(ApiModel):
    interests: list[ScoutInterestOut]


async def _check_video(storage: Storage, player_id: int, resource_id: Optional[int]) -> None:
    if resource_id is None:
        raise ValidationError(
            "A video is required for watched_video",
            errors=[{"path": "resourceId", "message": "Required when type is watched_video"}],
        )
    video = await storage.get_video(resource_id)
    if not video:
        raise NotFoundError("Video not found")
    if video.user_id != player_id:
        raise ValidationError(
            "Video does not belong to this player",
            errors=[{"path": "resourceId", "message": "Must be one of the player's videos"}],
        )


async def _scout_log(storage: Storage, scout_id: int) -> ScoutInterestList:
    interests = await storage.get_interests_by_scout(scout_id)
    players = await storage.get_users(i.player_id for i in interests)
    return ScoutInterestList(
        interests=[
            ScoutInterestOut(
                **InterestOut.model_validate(i).model_dump(),
                player=public_user(players.get(i.player_id)),
            )
            for i in interests
        ]
    )


@router.post("", response_model=InterestEnvelope, status_code=201)
async def record_interest(
    body: InterestCreate, user: Principal = Depends(require_scout), storage: Storage = Depends(get_storage)
):
    player = await storage.get_user(body.player_id)
    if not player:
        raise NotFoundError("Player not found")
    if player.role != Role.PLAYER.value:
        raise ValidationError(
            "Interest can only be recorded for players",
            errors=[{"path": "playerId", "message": "User is not a player"}],
        )
    if body.type == InterestType.WATCHED_VIDEO:
        await _check_video(storage, player.id, body.resource_id)
    interest = await storage.create_interest(user.id, player.id, body.type.value, body.resource_id)
    logger.info("Scout %s recorded %s on player %s", user.id, body.type.value, player.id)
    return InterestEnvelope(interest=interest)


@router.get("/player/{player_id}", response_model=PlayerInterestList)
async def list_player_interests(player_id: int, storage: Storage = Depends(get_storage)):
    """Interest shown in a player, newest first, with scout details and the watched video."""
    interests = await storage.get_interests_by_player(player_id)
    scouts = await storage.get_users(i.scout_id for i in interests)
    entries = []
    for i in interests:
        profile = await storage.get_profile(Role.SCOUT, i.scout_id)
        video = None
        if i.type == InterestType.WATCHED_VIDEO.value and i.resource_id is not None:
            video = await storage.get_video(i.resource_id)
        entries.append(
            PlayerInterestOut(
                **InterestOut.model_validate(i).model_dump(),
                scout=public_user(scouts.get(i.scout_id)),
                scout_profile=ScoutProfileOut.model_validate(profile) if profile else None,
                video=VideoOut.model_validate(video) if video else None,
            )
        )
    return PlayerInterestList(interests=entries)


@router.get("", response_model=ScoutInterestList)
async def list_my_interests(user: Principal = Depends(require_scout), storage: Storage = Depends(get_storage)):
    """Caller's own interest log."""
    return await _scout_log(storage, user.id)


@router.get("/scout/{scout_id}", response_model=ScoutInterestList)
async def list_scout_interests(
    scout_id: int, user: Principal = Depends(require_scout), storage: Storage = Depends(get_storage)
):
    if scout_id != user.id:
        raise AuthorizationError("Scouts can only view their own interest log")
    return await _scout_log(storage, scout_id)
