"""Database models."""
from talent.models.base import Base, init_db, reset_db
from talent.models.user import Role, User
from talent.models.profiles import (
    PLAYER_STAT_KEYS,
    PROFILE_MODELS,
    AcademyProfile,
    PlayerProfile,
    Profile,
    ScoutProfile,
)
from talent.models.video import Video
from talent.models.trial import ApplicationStatus, Trial, TrialApplication
from talent.models.message import Message
from talent.models.interest import InterestType, ScoutInterest

__all__ = [
    "Base",
    "Role",
    "User",
    "PlayerProfile",
    "ScoutProfile",
    "AcademyProfile",
    "Profile",
    "PROFILE_MODELS",
    "PLAYER_STAT_KEYS",
    "Video",
    "Trial",
    "TrialApplication",
    "ApplicationStatus",
    "Message",
    "InterestType",
    "ScoutInterest",
    "init_db",
    "reset_db",
]
