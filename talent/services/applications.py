"""Trial application lifecycle: pending -> accepted | rejected."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from talent.errors import ApplicationClosed, AuthorizationError, InvalidStatus, NotFoundError
from talent.models import ApplicationStatus, PlayerProfile, Role, Trial, TrialApplication, User
from talent.storage import Storage

logger = logging.getLogger("talent.applications")

TERMINAL_STATUSES = {ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value}
VALID_STATUSES = {s.value for s in ApplicationStatus}


@dataclass
class ApplicantEntry:
    application: TrialApplication
    player: Optional[User]
    profile: Optional[PlayerProfile]


@dataclass
class PlayerApplicationEntry:
    application: TrialApplication
    trial: Optional[Trial]


async def _get_owned_trial(storage: Storage, requester_id: int, trial_id: int) -> Trial:
    trial = await storage.get_trial(trial_id)
    if not trial:
        raise NotFoundError("Trial not found")
    if trial.creator_id != requester_id:
        logger.warning("User %s tried to manage applications for trial %s", requester_id, trial_id)
        raise AuthorizationError("Only the academy that created this trial can manage its applications")
    return trial


async def apply(
    storage: Storage, player_id: int, trial_id: int, message: Optional[str] = None
) -> TrialApplication:
    """Create a pending application. A second application for the same trial raises DuplicateApplication."""
    trial = await storage.get_trial(trial_id)
    if not trial:
        raise NotFoundError("Trial not found")
    application = await storage.create_application(trial.id, player_id, message)
    logger.info("Player %s applied to trial %s (application %s)", player_id, trial.id, application.id)
    return application


async def update_status(
    storage: Storage, requester_id: int, application_id: int, status: str
) -> TrialApplication:
    if status not in VALID_STATUSES:
        raise InvalidStatus(
            "Invalid status",
            errors=[{"path": "status", "message": f"Must be one of: {', '.join(sorted(VALID_STATUSES))}"}],
        )
    application = await storage.get_application(application_id)
    if not application:
        raise NotFoundError("Application not found")
    await _get_owned_trial(storage, requester_id, application.trial_id)
    if application.status in TERMINAL_STATUSES:
        raise ApplicationClosed(f"Application has already been {application.status}")
    if status == application.status:
        return application
    updated = await storage.set_application_status(application.id, status, from_status=application.status)
    if updated is None:
        # Decided by another request between the read and the write
        raise ApplicationClosed()
    logger.info("Application %s set to %s by user %s", application.id, status, requester_id)
    return updated


async def list_for_trial(storage: Storage, requester_id: int, trial_id: int) -> list[ApplicantEntry]:
    trial = await _get_owned_trial(storage, requester_id, trial_id)
    applications = await storage.get_applications_by_trial(trial.id)
    players = await storage.get_users(a.player_id for a in applications)
    entries = []
    for app in applications:
        profile = await storage.get_profile(Role.PLAYER, app.player_id)
        entries.append(ApplicantEntry(application=app, player=players.get(app.player_id), profile=profile))
    return entries


async def list_for_player(storage: Storage, player_id: int) -> list[PlayerApplicationEntry]:
    applications = await storage.get_applications_by_player(player_id)
    trials = await storage.get_trials(a.trial_id for a in applications)
    return [PlayerApplicationEntry(application=a, trial=trials.get(a.trial_id)) for a in applications]
