"""Demo accounts and content for a fresh database."""
from __future__ import annotations

import logging
from datetime import timedelta

from talent.models import PLAYER_STAT_KEYS, Role
from talent.models.base import utcnow
from talent.storage import Storage

logger = logging.getLogger("talent.seed")

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"email": "player@demo.scoutnet.io", "first_name": "Marcus", "last_name": "Silva", "role": Role.PLAYER},
    {"email": "scout@demo.scoutnet.io", "first_name": "Elena", "last_name": "Rossi", "role": Role.SCOUT},
    {"email": "academy@demo.scoutnet.io", "first_name": "Northbridge", "last_name": "Academy", "role": Role.ACADEMY},
]

PROFILES = {
    Role.PLAYER: {
        "position": "Striker",
        "age": 19,
        "location": "Lisbon, Portugal",
        "bio": "Left-footed forward with a strong finish.",
        "overall_rating": 82,
        "appearances": 48,
        "goals": 31,
        "is_elite_prospect": True,
        "stats": dict(zip(PLAYER_STAT_KEYS, (88, 84, 72, 81, 35, 70))),
    },
    Role.SCOUT: {
        "organization": "Atlantic Scouting Group",
        "position": "Senior Scout",
        "bio": "Covering Iberian youth leagues.",
        "years_of_experience": 12,
    },
    Role.ACADEMY: {
        "name": "Northbridge Football Academy",
        "location": "Manchester, UK",
        "description": "Residential academy for U15-U21 players.",
        "founded_year": 1998,
        "website": "https://northbridge.example.org",
    },
}


async def seed_demo_data(storage: Storage, password_hash: str) -> bool:
    """Insert demo data into an empty database. Returns False if users already exist."""
    if await storage.count_users() > 0:
        logger.info("Database already has users, skipping demo data")
        return False

    users = {}
    for fields in DEMO_USERS:
        user = await storage.create_user(password_hash=password_hash, **fields)
        await storage.create_profile(fields["role"], user.id, PROFILES[fields["role"]])
        users[fields["role"]] = user

    player, scout, academy = users[Role.PLAYER], users[Role.SCOUT], users[Role.ACADEMY]

    await storage.create_video(
        user_id=player.id,
        title="Season highlights",
        url="/uploads/videos/demo-highlights.mp4",
        description="Goals and assists from the league season.",
        duration=184,
    )
    await storage.create_video(
        user_id=player.id,
        title="Finishing drills",
        url="/uploads/videos/demo-finishing.mp4",
        duration=95,
    )

    now = utcnow().replace(hour=10, minute=0, second=0, microsecond=0)
    for days, title, age_group in ((14, "Open Trial: U19 Forwards", "U19"), (30, "Goalkeeper Assessment Day", "U17")):
        await storage.create_trial(
            academy.id,
            {
                "title": title,
                "organization": PROFILES[Role.ACADEMY]["name"],
                "location": PROFILES[Role.ACADEMY]["location"],
                "date": now + timedelta(days=days),
                "age_group": age_group,
                "description": "Bring boots and shin pads.",
            },
        )

    await storage.create_message(scout.id, player.id, "Hi Marcus, impressive highlights. Are you open to a chat?")
    logger.info("Seeded demo data for %d users", len(users))
    return True
