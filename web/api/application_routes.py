"""Trial applications: players apply, the posting academy decides."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from talent.models import Role
from talent.services import applications as svc
from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, ApplicationOut, PlayerProfileOut, PublicUser, TrialOut
from web.api.utils import profile_out, public_user
from web.auth import Principal, require_academy, require_player

router = APIRouter(prefix="/api/applications", tags=["applications"])


class ApplicationCreate(ApiModel):
    trial_id: int
    message: Optional[str] = Field(None, max_length=2000)


class StatusUpdate(ApiModel):
    status: str


class ApplicationWithTrial(ApplicationOut):
    trial: Optional[TrialOut] = None


class ApplicantOut(ApplicationOut):
    player: Optional[PublicUser] = None
    profile: Optional[PlayerProfileOut] = None


class ApplicationEnvelope(ApiModel):
    application: ApplicationOut


class PlayerApplicationList(ApiModel):
    applications: list[ApplicationWithTrial]


class ApplicantList(ApiModel):
    applications: list[ApplicantOut]


def _base(application) -> dict:
    return ApplicationOut.model_validate(application).model_dump()


async def _player_applications(storage: Storage, user: Principal) -> PlayerApplicationList:
    entries = await svc.list_for_player(storage, user.id)
    return PlayerApplicationList(
        applications=[
            ApplicationWithTrial(
                **_base(e.application),
                trial=TrialOut.model_validate(e.trial) if e.trial else None,
            )
            for e in entries
        ]
    )


@router.get("", response_model=PlayerApplicationList)
async def list_my_applications(user: Principal = Depends(require_player), storage: Storage = Depends(get_storage)):
    """Caller's applications with trial details, newest first."""
    return await _player_applications(storage, user)


@router.get("/player", response_model=PlayerApplicationList)
async def list_player_applications(
    user: Principal = Depends(require_player), storage: Storage = Depends(get_storage)
):
    return await _player_applications(storage, user)


@router.get("/trial/{trial_id}", response_model=ApplicantList)
async def list_trial_applications(
    trial_id: int, user: Principal = Depends(require_academy), storage: Storage = Depends(get_storage)
):
    """Applicants for one of the caller's trials, with player summary and profile."""
    entries = await svc.list_for_trial(storage, user.id, trial_id)
    return ApplicantList(
        applications=[
            ApplicantOut(
                **_base(e.application),
                player=public_user(e.player),
                profile=profile_out(Role.PLAYER, e.profile),
            )
            for e in entries
        ]
    )


@router.post("", response_model=ApplicationEnvelope, status_code=201)
async def apply_to_trial(
    body: ApplicationCreate, user: Principal = Depends(require_player), storage: Storage = Depends(get_storage)
):
    application = await svc.apply(storage, user.id, body.trial_id, body.message)
    return ApplicationEnvelope(application=application)


@router.put("/{application_id}/status", response_model=ApplicationEnvelope)
async def update_application_status(
    application_id: int,
    body: StatusUpdate,
    user: Principal = Depends(require_academy),
    storage: Storage = Depends(get_storage),
):
    """Accept or reject. Decided applications are final."""
    application = await svc.update_status(storage, user.id, application_id, body.status)
    return ApplicationEnvelope(application=application)
