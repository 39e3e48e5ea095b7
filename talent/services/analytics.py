"""Dashboard numbers per role, computed from stored activity."""
from __future__ import annotations

from collections import Counter

from talent.models import ApplicationStatus, InterestType, Role
from talent.storage import Storage


def _status_counts(applications) -> dict[str, int]:
    counts = Counter(a.status for a in applications)
    return {s.value: counts.get(s.value, 0) for s in ApplicationStatus}


def _interest_counts(interests) -> dict[str, int]:
    counts = Counter(i.type for i in interests)
    return {t.value: counts.get(t.value, 0) for t in InterestType}


async def player_summary(storage: Storage, user_id: int) -> dict:
    videos = await storage.get_videos_by_user(user_id)
    interests = await storage.get_interests_by_player(user_id)
    applications = await storage.get_applications_by_player(user_id)
    return {
        "videos": len(videos),
        "total_views": sum(v.views or 0 for v in videos),
        "total_likes": sum(v.likes or 0 for v in videos),
        "interests": _interest_counts(interests),
        "distinct_scouts": len({i.scout_id for i in interests}),
        "applications": _status_counts(applications),
    }


async def scout_summary(storage: Storage, user_id: int) -> dict:
    interests = await storage.get_interests_by_scout(user_id)
    return {
        "interests": _interest_counts(interests),
        "distinct_players": len({i.player_id for i in interests}),
    }


async def academy_summary(storage: Storage, user_id: int) -> dict:
    trials = await storage.get_trials_by_creator(user_id)
    applications = await storage.get_applications_for_trials(t.id for t in trials)
    return {
        "trials": len(trials),
        "applications": _status_counts(applications),
        "distinct_applicants": len({a.player_id for a in applications}),
    }


_SUMMARIES = {
    Role.PLAYER: player_summary,
    Role.SCOUT: scout_summary,
    Role.ACADEMY: academy_summary,
}


async def dashboard_summary(storage: Storage, user_id: int, role: Role) -> dict:
    role = Role(role)
    summary = await _SUMMARIES[role](storage, user_id)
    summary["role"] = role.value
    summary["unread_messages"] = await storage.count_unread_messages(user_id)
    return summary
