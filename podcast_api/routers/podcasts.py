from fastapi import APIRouter, Depends

from podcast_api.dependencies import get_catalog_service, require_host
from podcast_api.schemas import (
    CoreResponse,
    CreatedResponse,
    CreateEpisodeInput,
    CreatePodcastInput,
    EpisodeDetailResponse,
    EpisodeFields,
    EpisodesResponse,
    EpisodesSearchInput,
    PodcastDetailResponse,
    PodcastsResponse,
    UpdateEpisodeFields,
    UpdateEpisodeInput,
    UpdatePodcastInput,
    UpdatePodcastPayload,
)
from podcast_api.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/v1/podcasts", tags=["podcasts"])

@router.get("", response_model=PodcastsResponse)
async def list_podcasts(catalog: CatalogService = Depends(get_catalog_service)):
    return PodcastsResponse.model_validate(await catalog.get_all_podcasts())

@router.post("", status_code=201, response_model=CreatedResponse, dependencies=[Depends(require_host)])
async def create_podcast(data: CreatePodcastInput, catalog: CatalogService = Depends(get_catalog_service)):
    return CreatedResponse.model_validate(await catalog.create_podcast(data))

@router.get("/{podcast_id}", response_model=PodcastDetailResponse)
async def get_podcast(podcast_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return PodcastDetailResponse.model_validate(await catalog.get_podcast(podcast_id))

@router.patch("/{podcast_id}", response_model=CoreResponse, dependencies=[Depends(require_host)])
async def update_podcast(
    podcast_id: int,
    payload: UpdatePodcastPayload,
    catalog: CatalogService = Depends(get_catalog_service),
):
    result = await catalog.update_podcast(UpdatePodcastInput(id=podcast_id, payload=payload))
    return CoreResponse.model_validate(result)

@router.delete("/{podcast_id}", response_model=CoreResponse, dependencies=[Depends(require_host)])
async def delete_podcast(podcast_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return CoreResponse.model_validate(await catalog.delete_podcast(podcast_id))

@router.get("/{podcast_id}/episodes", response_model=EpisodesResponse)
async def list_episodes(podcast_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return EpisodesResponse.model_validate(await catalog.get_episodes(podcast_id))

@router.post(
    "/{podcast_id}/episodes",
    status_code=201,
    response_model=CreatedResponse,
    dependencies=[Depends(require_host)],
)
async def create_episode(
    podcast_id: int,
    data: EpisodeFields,
    catalog: CatalogService = Depends(get_catalog_service),
):
    result = await catalog.create_episode(
        CreateEpisodeInput(podcast_id=podcast_id, **data.model_dump())
    )
    return CreatedResponse.model_validate(result)

@router.get("/{podcast_id}/episodes/{episode_id}", response_model=EpisodeDetailResponse)
async def get_episode(podcast_id: int, episode_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    result = await catalog.get_episode(EpisodesSearchInput(podcast_id=podcast_id, episode_id=episode_id))
    return EpisodeDetailResponse.model_validate(result)

@router.patch(
    "/{podcast_id}/episodes/{episode_id}",
    response_model=CoreResponse,
    dependencies=[Depends(require_host)],
)
async def update_episode(
    podcast_id: int,
    episode_id: int,
    data: UpdateEpisodeFields,
    catalog: CatalogService = Depends(get_catalog_service),
):
    result = await catalog.update_episode(
        UpdateEpisodeInput(podcast_id=podcast_id, episode_id=episode_id, **data.model_dump(exclude_unset=True))
    )
    return CoreResponse.model_validate(result)

@router.delete(
    "/{podcast_id}/episodes/{episode_id}",
    response_model=CoreResponse,
    dependencies=[Depends(require_host)],
)
async def delete_episode(podcast_id: int, episode_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    result = await catalog.delete_episode(EpisodesSearchInput(podcast_id=podcast_id, episode_id=episode_id))
    return CoreResponse.model_validate(result)
