"""Trial postings. Anyone can browse; academies post."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field, field_validator

from talent.storage import Storage, get_storage
from web.api.schemas import ApiModel, TrialOut
from web.auth import Principal, require_academy

logger = logging.getLogger("talent.api")

router = APIRouter(prefix="/api/trials", tags=["trials"])


class TrialCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    organization: str = Field(min_length=1, max_length=128)
    location: str = Field(min_length=1, max_length=128)
    date: datetime
    position: Optional[str] = Field(None, max_length=64)
    age_group: Optional[str] = Field(None, max_length=32)
    description: Optional[str] = None
    requirements: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=512)

    @field_validator("date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class TrialEnvelope(ApiModel):
    trial: TrialOut


class TrialList(ApiModel):
    trials: list[TrialOut]


@router.get("", response_model=TrialList)
async def list_trials(storage: Storage = Depends(get_storage)):
    """All trials, soonest first."""
    return TrialList(trials=await storage.list_trials())


@router.get("/creator/{creator_id}", response_model=TrialList)
async def list_creator_trials(creator_id: int, storage: Storage = Depends(get_storage)):
    return TrialList(trials=await storage.get_trials_by_creator(creator_id))


@router.get("/{trial_id}", response_model=TrialEnvelope)
async def get_trial(trial_id: int, storage: Storage = Depends(get_storage)):
    trial = await storage.get_trial(trial_id)
    if not trial:
        raise HTTPException(404, "Trial not found")
    return TrialEnvelope(trial=trial)


@router.post("", response_model=TrialEnvelope, status_code=201)
async def create_trial(
    body: TrialCreate, user: Principal = Depends(require_academy), storage: Storage = Depends(get_storage)
):
    """Post a trial. The caller becomes its creator."""
    trial = await storage.create_trial(user.id, body.model_dump())
    logger.info("Academy %s posted trial %s", user.id, trial.id)
    return TrialEnvelope(trial=trial)
