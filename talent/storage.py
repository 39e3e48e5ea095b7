"""Storage interface and its SQLAlchemy implementation.

Route handlers and services talk to ``Storage`` only. ``SQLStorage`` wraps one
``AsyncSession`` per request; every write commits on its own (single-row
operations only). Uniqueness rules live in the schema as unique constraints and
surface here as ``ConflictError`` subclasses.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from talent.errors import ConflictError, DuplicateApplication
from talent.models.base import async_session_factory
from talent.models import (
    PROFILE_MODELS,
    Message,
    PlayerProfile,
    Profile,
    Role,
    ScoutInterest,
    Trial,
    TrialApplication,
    User,
    Video,
)

logger = logging.getLogger("talent.storage")


class Storage(ABC):
    """Typed CRUD operations per entity."""

    # --- Users ---

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def get_users(self, user_ids: Iterable[int]) -> dict[int, User]: ...

    @abstractmethod
    async def count_users(self) -> int: ...

    @abstractmethod
    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        profile_image: Optional[str] = None,
    ) -> User: ...

    @abstractmethod
    async def update_user_role(self, user_id: int, role: Role) -> Optional[User]: ...

    # --- Profiles ---

    @abstractmethod
    async def get_profile(self, role: Role, user_id: int) -> Optional[Profile]: ...

    @abstractmethod
    async def list_player_profiles(
        self, position: Optional[str] = None, location: Optional[str] = None
    ) -> list[tuple[PlayerProfile, User]]: ...

    @abstractmethod
    async def create_profile(self, role: Role, user_id: int, data: dict[str, Any]) -> Profile: ...

    @abstractmethod
    async def update_profile(self, role: Role, user_id: int, data: dict[str, Any]) -> Optional[Profile]: ...

    # --- Videos ---

    @abstractmethod
    async def get_video(self, video_id: int) -> Optional[Video]: ...

    @abstractmethod
    async def list_videos(self, limit: int = 50) -> list[Video]: ...

    @abstractmethod
    async def get_videos_by_user(self, user_id: int) -> list[Video]: ...

    @abstractmethod
    async def create_video(
        self,
        user_id: int,
        title: str,
        url: str,
        description: Optional[str] = None,
        thumbnail: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Video: ...

    @abstractmethod
    async def increment_video_views(self, video_id: int) -> Optional[Video]: ...

    @abstractmethod
    async def increment_video_likes(self, video_id: int) -> Optional[Video]: ...

    # --- Trials ---

    @abstractmethod
    async def get_trial(self, trial_id: int) -> Optional[Trial]: ...

    @abstractmethod
    async def list_trials(self) -> list[Trial]: ...

    @abstractmethod
    async def get_trials_by_creator(self, creator_id: int) -> list[Trial]: ...

    @abstractmethod
    async def get_trials(self, trial_ids: Iterable[int]) -> dict[int, Trial]: ...

    @abstractmethod
    async def create_trial(self, creator_id: int, data: dict[str, Any]) -> Trial: ...

    # --- Trial applications ---

    @abstractmethod
    async def get_application(self, application_id: int) -> Optional[TrialApplication]: ...

    @abstractmethod
    async def get_applications_by_player(self, player_id: int) -> list[TrialApplication]: ...

    @abstractmethod
    async def get_applications_by_trial(self, trial_id: int) -> list[TrialApplication]: ...

    @abstractmethod
    async def get_applications_for_trials(self, trial_ids: Iterable[int]) -> list[TrialApplication]: ...

    @abstractmethod
    async def create_application(
        self, trial_id: int, player_id: int, message: Optional[str] = None
    ) -> TrialApplication: ...

    @abstractmethod
    async def set_application_status(
        self, application_id: int, status: str, from_status: str
    ) -> Optional[TrialApplication]: ...

    # --- Messages ---

    @abstractmethod
    async def get_messages_by_user(self, user_id: int) -> list[Message]: ...

    @abstractmethod
    async def get_messages_between(self, user_id: int, other_id: int) -> list[Message]: ...

    @abstractmethod
    async def create_message(self, sender_id: int, receiver_id: int, content: str) -> Message: ...

    @abstractmethod
    async def mark_thread_read(self, user_id: int, partner_id: int) -> int: ...

    @abstractmethod
    async def count_unread_messages(self, user_id: int) -> int: ...

    # --- Scout interests ---

    @abstractmethod
    async def create_interest(
        self, scout_id: int, player_id: int, type: str, resource_id: Optional[int] = None
    ) -> ScoutInterest: ...

    @abstractmethod
    async def get_interests_by_player(self, player_id: int) -> list[ScoutInterest]: ...

    @abstractmethod
    async def get_interests_by_scout(self, scout_id: int) -> list[ScoutInterest]: ...


class SQLStorage(Storage):
    """Storage backed by the relational database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _insert(self, obj, conflict: ConflictError):
        """Add and commit obj. A unique-constraint violation becomes `conflict`."""
        self.session.add(obj)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Rejected insert into %s: %s", obj.__tablename__, e.orig)
            raise conflict from e
        await self.session.refresh(obj)
        return obj

    # --- Users ---

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {u.id: u for u in result.scalars().all()}

    async def count_users(self) -> int:
        result = await self.session.execute(select(func.count(User.id)))
        return result.scalar_one()

    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        profile_image: Optional[str] = None,
    ) -> User:
        user = User(
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=Role(role).value,
            profile_image=profile_image,
        )
        return await self._insert(user, ConflictError("Email already registered"))

    async def update_user_role(self, user_id: int, role: Role) -> Optional[User]:
        user = await self.session.get(User, user_id)
        if not user:
            return None
        user.role = Role(role).value
        await self.session.commit()
        return user

    # --- Profiles ---

    async def get_profile(self, role: Role, user_id: int) -> Optional[Profile]:
        model = PROFILE_MODELS[Role(role)]
        result = await self.session.execute(select(model).where(model.user_id == user_id))
        return result.scalar_one_or_none()

    async def list_player_profiles(
        self, position: Optional[str] = None, location: Optional[str] = None
    ) -> list[tuple[PlayerProfile, User]]:
        query = (
            select(PlayerProfile, User)
            .join(User, User.id == PlayerProfile.user_id)
            .where(User.role == Role.PLAYER.value)
        )
        if position:
            query = query.where(PlayerProfile.position.ilike(f"%{position}%"))
        if location:
            query = query.where(PlayerProfile.location.ilike(f"%{location}%"))
        result = await self.session.execute(
            query.order_by(PlayerProfile.overall_rating.desc().nulls_last(), PlayerProfile.id)
        )
        return [(p, u) for p, u in result.all()]

    async def create_profile(self, role: Role, user_id: int, data: dict[str, Any]) -> Profile:
        model = PROFILE_MODELS[Role(role)]
        profile = model(user_id=user_id, **data)
        return await self._insert(profile, ConflictError("Profile already exists"))

    async def update_profile(self, role: Role, user_id: int, data: dict[str, Any]) -> Optional[Profile]:
        profile = await self.get_profile(role, user_id)
        if not profile:
            return None
        for key, value in data.items():
            setattr(profile, key, value)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    # --- Videos ---

    async def get_video(self, video_id: int) -> Optional[Video]:
        return await self.session.get(Video, video_id)

    async def list_videos(self, limit: int = 50) -> list[Video]:
        result = await self.session.execute(
            select(Video).order_by(Video.created_at.desc(), Video.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def get_videos_by_user(self, user_id: int) -> list[Video]:
        result = await self.session.execute(
            select(Video).where(Video.user_id == user_id).order_by(Video.created_at.desc(), Video.id.desc())
        )
        return list(result.scalars().all())

    async def create_video(
        self,
        user_id: int,
        title: str,
        url: str,
        description: Optional[str] = None,
        thumbnail: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Video:
        video = Video(
            user_id=user_id,
            title=title,
            url=url,
            description=description,
            thumbnail=thumbnail,
            duration=duration,
            views=0,
            likes=0,
        )
        self.session.add(video)
        await self.session.commit()
        await self.session.refresh(video)
        return video

    async def _increment_video(self, video_id: int, column) -> Optional[Video]:
        result = await self.session.execute(
            update(Video)
            .where(Video.id == video_id)
            .values({column: column + 1})
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        if result.rowcount == 0:
            return None
        return await self.session.get(Video, video_id, populate_existing=True)

    async def increment_video_views(self, video_id: int) -> Optional[Video]:
        return await self._increment_video(video_id, Video.views)

    async def increment_video_likes(self, video_id: int) -> Optional[Video]:
        return await self._increment_video(video_id, Video.likes)

    # --- Trials ---

    async def get_trial(self, trial_id: int) -> Optional[Trial]:
        return await self.session.get(Trial, trial_id)

    async def list_trials(self) -> list[Trial]:
        result = await self.session.execute(select(Trial).order_by(Trial.date, Trial.id))
        return list(result.scalars().all())

    async def get_trials_by_creator(self, creator_id: int) -> list[Trial]:
        result = await self.session.execute(
            select(Trial).where(Trial.creator_id == creator_id).order_by(Trial.date, Trial.id)
        )
        return list(result.scalars().all())

    async def get_trials(self, trial_ids: Iterable[int]) -> dict[int, Trial]:
        ids = set(trial_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(Trial).where(Trial.id.in_(ids)))
        return {t.id: t for t in result.scalars().all()}

    async def create_trial(self, creator_id: int, data: dict[str, Any]) -> Trial:
        trial = Trial(creator_id=creator_id, **data)
        self.session.add(trial)
        await self.session.commit()
        await self.session.refresh(trial)
        return trial

    # --- Trial applications ---

    async def get_application(self, application_id: int) -> Optional[TrialApplication]:
        return await self.session.get(TrialApplication, application_id)

    async def get_applications_by_player(self, player_id: int) -> list[TrialApplication]:
        result = await self.session.execute(
            select(TrialApplication)
            .where(TrialApplication.player_id == player_id)
            .order_by(TrialApplication.created_at.desc(), TrialApplication.id.desc())
        )
        return list(result.scalars().all())

    async def get_applications_by_trial(self, trial_id: int) -> list[TrialApplication]:
        result = await self.session.execute(
            select(TrialApplication)
            .where(TrialApplication.trial_id == trial_id)
            .order_by(TrialApplication.created_at, TrialApplication.id)
        )
        return list(result.scalars().all())

    async def get_applications_for_trials(self, trial_ids: Iterable[int]) -> list[TrialApplication]:
        ids = set(trial_ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(TrialApplication).where(TrialApplication.trial_id.in_(ids))
        )
        return list(result.scalars().all())

    async def create_application(
        self, trial_id: int, player_id: int, message: Optional[str] = None
    ) -> TrialApplication:
        application = TrialApplication(trial_id=trial_id, player_id=player_id, message=message)
        return await self._insert(application, DuplicateApplication())

    async def set_application_status(
        self, application_id: int, status: str, from_status: str
    ) -> Optional[TrialApplication]:
        """Move an application from from_status to status in one conditional UPDATE.

        Returns None when the row is missing or no longer in from_status.
        """
        result = await self.session.execute(
            update(TrialApplication)
            .where(TrialApplication.id == application_id, TrialApplication.status == from_status)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        if result.rowcount == 0:
            return None
        return await self.session.get(TrialApplication, application_id, populate_existing=True)

    # --- Messages ---

    async def get_messages_by_user(self, user_id: int) -> list[Message]:
        result = await self.session.execute(
            select(Message)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at, Message.id)
        )
        return list(result.scalars().all())

    async def get_messages_between(self, user_id: int, other_id: int) -> list[Message]:
        result = await self.session.execute(
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                    and_(Message.sender_id == other_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at, Message.id)
        )
        return list(result.scalars().all())

    async def create_message(self, sender_id: int, receiver_id: int, content: str) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, is_read=False)
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message

    async def mark_thread_read(self, user_id: int, partner_id: int) -> int:
        """Mark unread messages from partner_id to user_id as read. Returns rows changed."""
        result = await self.session.execute(
            update(Message)
            .where(
                Message.receiver_id == user_id,
                Message.sender_id == partner_id,
                Message.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.commit()
        return result.rowcount

    async def count_unread_messages(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Message.id)).where(Message.receiver_id == user_id, Message.is_read.is_(False))
        )
        return result.scalar_one()

    # --- Scout interests ---

    async def create_interest(
        self, scout_id: int, player_id: int, type: str, resource_id: Optional[int] = None
    ) -> ScoutInterest:
        interest = ScoutInterest(scout_id=scout_id, player_id=player_id, type=type, resource_id=resource_id)
        self.session.add(interest)
        await self.session.commit()
        await self.session.refresh(interest)
        return interest

    async def get_interests_by_player(self, player_id: int) -> list[ScoutInterest]:
        result = await self.session.execute(
            select(ScoutInterest)
            .where(ScoutInterest.player_id == player_id)
            .order_by(ScoutInterest.created_at.desc(), ScoutInterest.id.desc())
        )
        return list(result.scalars().all())

    async def get_interests_by_scout(self, scout_id: int) -> list[ScoutInterest]:
        result = await self.session.execute(
            select(ScoutInterest)
            .where(ScoutInterest.scout_id == scout_id)
            .order_by(ScoutInterest.created_at.desc(), ScoutInterest.id.desc())
        )
        return list(result.scalars().all())


async def get_storage():
    """FastAPI dependency: one SQLStorage (and session) per request."""
    async with async_session_factory() as session:
        yield SQLStorage(session)
