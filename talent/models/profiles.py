"""Role profiles: one row per user in the table matching the user's role."""
from __future__ import annotations

from typing import Optional, Union

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from talent.models.base import Base
from talent.models.user import Role

# Well-known keys in PlayerProfile.stats; any other key is allowed as long as it is 0-100
PLAYER_STAT_KEYS = ("pace", "shooting", "passing", "dribbling", "defense", "physical")


class PlayerProfile(Base):
    """Player position, bio and performance stats."""

    __tablename__ = "player_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)
    position: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    achievements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    overall_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    appearances: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    goals: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_elite_prospect: Mapped[bool] = mapped_column(Boolean, default=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    stats: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)


class ScoutProfile(Base):
    """Scout organization and experience."""

    __tablename__ = "scout_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)
    organization: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    years_of_experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)


class AcademyProfile(Base):
    """Academy name, founding year and website."""

    __tablename__ = "academy_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    founded_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)


Profile = Union[PlayerProfile, ScoutProfile, AcademyProfile]

PROFILE_MODELS: dict[Role, type] = {
    Role.PLAYER: PlayerProfile,
    Role.SCOUT: ScoutProfile,
    Role.ACADEMY: AcademyProfile,
}
