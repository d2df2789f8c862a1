from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from podcast_api.models import Episode, Podcast, User, UserRole


# --- Results ---
#
# Every service method returns one of these instead of raising.  Payload
# fields hold ORM entities, so the models allow arbitrary types; the HTTP
# layer converts them through the *Response models further down.

class CoreOutput(BaseModel):
    ok: bool
    error: str | None = None
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _failure_needs_error(self):
        if not self.ok and not self.error:
            raise ValueError("a failed result must carry an error")
        return self


class LoginOutput(CoreOutput):
    # Holds the raw exception when the lookup itself blew up.
    error: str | Exception | None = None
    token: str | None = None


class UserProfileOutput(CoreOutput):
    user: User | None = None


class PodcastsOutput(CoreOutput):
    podcasts: list[Podcast] | None = None


class PodcastOutput(CoreOutput):
    podcast: Podcast | None = None


class CreatePodcastOutput(CoreOutput):
    id: int | None = None


class EpisodesOutput(CoreOutput):
    episodes: list[Episode] | None = None


class EpisodeOutput(CoreOutput):
    episode: Episode | None = None


class CreateEpisodeOutput(CoreOutput):
    id: int | None = None


# --- User input ---

class CreateAccountInput(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1)
    role: UserRole


class LoginInput(BaseModel):
    email: str = Field(max_length=255)
    password: str


class EditProfileInput(BaseModel):
    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, min_length=1)


# --- Podcast / Episode input ---

class CreatePodcastInput(BaseModel):
    title: str = Field(max_length=300)
    category: str = Field(max_length=100)


class UpdatePodcastPayload(BaseModel):
    title: str | None = Field(None, max_length=300)
    category: str | None = Field(None, max_length=100)
    # Range is a business rule enforced by the service, not the schema.
    rating: int | None = None


class UpdatePodcastInput(BaseModel):
    id: int
    payload: UpdatePodcastPayload


class EpisodesSearchInput(BaseModel):
    podcast_id: int
    episode_id: int


class EpisodeFields(BaseModel):
    title: str = Field(max_length=300)
    category: str = Field(max_length=100)


class CreateEpisodeInput(EpisodeFields):
    podcast_id: int


class UpdateEpisodeFields(BaseModel):
    title: str | None = Field(None, max_length=300)
    category: str | None = Field(None, max_length=100)


class UpdateEpisodeInput(EpisodesSearchInput, UpdateEpisodeFields):
    pass


# --- HTTP responses ---

class UserResponse(BaseModel):
    id: int
    email: str
    role: UserRole
    model_config = ConfigDict(from_attributes=True)


class EpisodeResponse(BaseModel):
    id: int
    title: str
    category: str
    podcast_id: int
    model_config = ConfigDict(from_attributes=True)


class PodcastResponse(BaseModel):
    id: int
    title: str
    category: str
    rating: int
    model_config = ConfigDict(from_attributes=True)


class PodcastDetail(PodcastResponse):
    episodes: list[EpisodeResponse] = []


class CoreResponse(BaseModel):
    ok: bool
    error: str | None = None
    model_config = ConfigDict(from_attributes=True)

    @field_validator("error", mode="before")
    @classmethod
    def _stringify_error(cls, value: Any) -> Any:
        if isinstance(value, Exception):
            return str(value) or type(value).__name__
        return value


class LoginResponse(CoreResponse):
    token: str | None = None


class UserProfileResponse(CoreResponse):
    user: UserResponse | None = None


class PodcastsResponse(CoreResponse):
    podcasts: list[PodcastResponse] | None = None


class PodcastDetailResponse(CoreResponse):
    podcast: PodcastDetail | None = None


class CreatedResponse(CoreResponse):
    id: int | None = None


class EpisodesResponse(CoreResponse):
    episodes: list[EpisodeResponse] | None = None


class EpisodeDetailResponse(CoreResponse):
    episode: EpisodeResponse | None = None
