"""Response models shared across routers. JSON keys are camelCase; snake_case input is accepted too."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class UserSummary(ApiModel):
    """The caller's own account."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    profile_image: Optional[str] = None


class PublicUser(ApiModel):
    """Account fields anyone may see (no email)."""

    id: int
    first_name: str
    last_name: str
    role: str
    profile_image: Optional[str] = None


class PlayerProfileOut(ApiModel):
    role: Literal["player"] = "player"
    id: int
    user_id: int
    position: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    achievements: Optional[str] = None
    overall_rating: Optional[int] = None
    appearances: Optional[int] = None
    goals: Optional[int] = None
    is_elite_prospect: bool = False
    is_verified: bool = False
    stats: Optional[dict[str, int]] = None


class ScoutProfileOut(ApiModel):
    role: Literal["scout"] = "scout"
    id: int
    user_id: int
    organization: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None
    years_of_experience: Optional[int] = None
    is_verified: bool = False


class AcademyProfileOut(ApiModel):
    role: Literal["academy"] = "academy"
    id: int
    user_id: int
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    founded_year: Optional[int] = None
    website: Optional[str] = None
    is_verified: bool = False


ProfileOut = Annotated[
    Union[PlayerProfileOut, ScoutProfileOut, AcademyProfileOut],
    Field(discriminator="role"),
]

PROFILE_SCHEMAS: dict[str, type[ApiModel]] = {
    "player": PlayerProfileOut,
    "scout": ScoutProfileOut,
    "academy": AcademyProfileOut,
}


class VideoOut(ApiModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    url: str
    thumbnail: Optional[str] = None
    duration: Optional[int] = None
    views: int = 0
    likes: int = 0
    created_at: Optional[datetime] = None


class TrialOut(ApiModel):
    id: int
    creator_id: int
    title: str
    organization: str
    position: Optional[str] = None
    age_group: Optional[str] = None
    location: str
    date: datetime
    description: Optional[str] = None
    requirements: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ApplicationOut(ApiModel):
    id: int
    trial_id: int
    player_id: int
    status: str
    message: Optional[str] = None
    created_at: Optional[datetime] = None


class MessageOut(ApiModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: Optional[datetime] = None


class InterestOut(ApiModel):
    id: int
    scout_id: int
    player_id: int
    type: str
    resource_id: Optional[int] = None
    created_at: Optional[datetime] = None


class MessageResponse(ApiModel):
    """Plain acknowledgement, e.g. logout."""

    message: str
