"""Scout interest log."""
from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from talent.models.base import Base, utcnow


class InterestType(str, enum.Enum):
    VIEWED_PROFILE = "viewed_profile"
    WATCHED_VIDEO = "watched_video"
    ADDED_TO_WATCHLIST = "added_to_watchlist"


class ScoutInterest(Base):
    """Action by a scout toward a player. Append-only."""

    __tablename__ = "scout_interests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scout_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)  # viewed_profile, watched_video, added_to_watchlist
    resource_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # video id for watched_video
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
