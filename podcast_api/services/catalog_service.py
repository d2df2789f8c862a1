"""
Catalog service: podcasts and the episodes nested under them.

Design notes
------------
- Every store failure is logged and reported as the same
  ``INTERNAL_ERROR`` message; expected failures (missing podcast or
  episode, rating out of range) get their own messages.
- Every episode operation re-loads the parent podcast with its episodes
  and looks the episode up inside that collection, so an episode id is
  only ever resolved within the podcast named in the request.
- Updates load the full entity, overwrite the supplied fields and save
  the whole object.  Load and save are separate store calls; concurrent
  writers to the same podcast race and the last save wins.
"""
import logging

from podcast_api.models import Episode, Podcast
from podcast_api.schemas import (
    CoreOutput,
    CreateEpisodeInput,
    CreateEpisodeOutput,
    CreatePodcastInput,
    CreatePodcastOutput,
    EpisodeOutput,
    EpisodesOutput,
    EpisodesSearchInput,
    PodcastOutput,
    PodcastsOutput,
    UpdateEpisodeInput,
    UpdatePodcastInput,
)
from podcast_api.stores import Store

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error occurred."
RATING_OUT_OF_RANGE = "Rating must be between 1 and 5."

MIN_RATING = 1
MAX_RATING = 5


def podcast_not_found(podcast_id: int) -> str:
    return f"Podcast with id {podcast_id} not found"


def episode_not_found(podcast_id: int, episode_id: int) -> str:
    return f"Episode with id {episode_id} not found in podcast with id {podcast_id}"


class CatalogService:
    def __init__(self, podcasts: Store[Podcast], episodes: Store[Episode]) -> None:
        self.podcasts = podcasts
        self.episodes = episodes

    # ------------------------------------------------------------------
    # Podcasts
    # ------------------------------------------------------------------

    async def get_all_podcasts(self) -> PodcastsOutput:
        try:
            podcasts = await self.podcasts.find()
            return PodcastsOutput(ok=True, podcasts=podcasts)
        except Exception:
            logger.exception("Listing podcasts failed")
            return PodcastsOutput(ok=False, error=INTERNAL_ERROR)

    async def create_podcast(self, data: CreatePodcastInput) -> CreatePodcastOutput:
        try:
            podcast = self.podcasts.create(title=data.title, category=data.category)
            saved = await self.podcasts.save(podcast)
            return CreatePodcastOutput(ok=True, id=saved.id)
        except Exception:
            logger.exception("Creating podcast %r failed", data.title)
            return CreatePodcastOutput(ok=False, error=INTERNAL_ERROR)

    async def get_podcast(self, podcast_id: int) -> PodcastOutput:
        """Load *podcast_id* together with its episodes."""
        try:
            podcast = await self.podcasts.find_one({"id": podcast_id}, relations=("episodes",))
            if not podcast:
                return PodcastOutput(ok=False, error=podcast_not_found(podcast_id))
            return PodcastOutput(ok=True, podcast=podcast)
        except Exception:
            logger.exception("Loading podcast %s failed", podcast_id)
            return PodcastOutput(ok=False, error=INTERNAL_ERROR)

    async def delete_podcast(self, podcast_id: int) -> CoreOutput:
        try:
            found = await self.get_podcast(podcast_id)
            if not found.ok:
                return CoreOutput(ok=False, error=found.error)
            await self.podcasts.delete({"id": podcast_id})
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Deleting podcast %s failed", podcast_id)
            return CoreOutput(ok=False, error=INTERNAL_ERROR)

    async def update_podcast(self, data: UpdatePodcastInput) -> CoreOutput:
        try:
            found = await self.get_podcast(data.id)
            if not found.ok:
                return CoreOutput(ok=False, error=found.error)

            update_data = data.payload.model_dump(exclude_unset=True, exclude_none=True)
            rating = update_data.get("rating")
            if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
                return CoreOutput(ok=False, error=RATING_OUT_OF_RANGE)

            podcast = found.podcast
            for field, value in update_data.items():
                setattr(podcast, field, value)
            await self.podcasts.save(podcast)
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Updating podcast %s failed", data.id)
            return CoreOutput(ok=False, error=INTERNAL_ERROR)

    # ------------------------------------------------------------------
    # Episodes
    # ------------------------------------------------------------------

    async def get_episodes(self, podcast_id: int) -> EpisodesOutput:
        found = await self.get_podcast(podcast_id)
        if not found.ok:
            return EpisodesOutput(ok=False, error=found.error)
        return EpisodesOutput(ok=True, episodes=found.podcast.episodes)

    async def get_episode(self, data: EpisodesSearchInput) -> EpisodeOutput:
        """Find *episode_id* among the episodes of *podcast_id*."""
        found = await self.get_podcast(data.podcast_id)
        if not found.ok:
            return EpisodeOutput(ok=False, error=found.error)
        episode = next((e for e in found.podcast.episodes if e.id == data.episode_id), None)
        if not episode:
            return EpisodeOutput(ok=False, error=episode_not_found(data.podcast_id, data.episode_id))
        return EpisodeOutput(ok=True, episode=episode)

    async def create_episode(self, data: CreateEpisodeInput) -> CreateEpisodeOutput:
        try:
            found = await self.get_podcast(data.podcast_id)
            if not found.ok:
                return CreateEpisodeOutput(ok=False, error=found.error)
            episode = self.episodes.create(title=data.title, category=data.category)
            episode.podcast = found.podcast
            saved = await self.episodes.save(episode)
            return CreateEpisodeOutput(ok=True, id=saved.id)
        except Exception:
            logger.exception("Creating episode in podcast %s failed", data.podcast_id)
            return CreateEpisodeOutput(ok=False, error=INTERNAL_ERROR)

    async def delete_episode(self, data: EpisodesSearchInput) -> CoreOutput:
        try:
            found = await self.get_episode(data)
            if not found.ok:
                return CoreOutput(ok=False, error=found.error)
            await self.episodes.delete({"id": data.episode_id})
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Deleting episode %s of podcast %s failed", data.episode_id, data.podcast_id)
            return CoreOutput(ok=False, error=INTERNAL_ERROR)

    async def update_episode(self, data: UpdateEpisodeInput) -> CoreOutput:
        try:
            found = await self.get_episode(data)
            if not found.ok:
                return CoreOutput(ok=False, error=found.error)
            episode = found.episode
            update_data = data.model_dump(
                exclude={"podcast_id", "episode_id"}, exclude_unset=True, exclude_none=True
            )
            for field, value in update_data.items():
                setattr(episode, field, value)
            await self.episodes.save(episode)
            return CoreOutput(ok=True)
        except Exception:
            logger.exception("Updating episode %s of podcast %s failed", data.episode_id, data.podcast_id)
            return CoreOutput(ok=False, error=INTERNAL_ERROR)
