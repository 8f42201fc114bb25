from datetime import datetime, timezone
from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException

from tvcatalog.config import CustomSettings
from tvcatalog.dependencies import get_catalog_pipeline, get_settings, get_tvmaze_client
from tvcatalog.schemas import (
    CatalogDescriptor,
    CatalogResponse,
    ManifestResponse,
    MetaResponse,
)
from tvcatalog.services import CatalogBuildPipeline, get_show_meta, parse_meta_id
from tvcatalog.services.tvmaze_client import TVMazeClient


logger = logging.getLogger(__name__)

main_router = APIRouter()


@main_router.get("/")
async def root(config: Annotated[CustomSettings, Depends(get_settings)]) -> dict:
    """Root endpoint with service information"""
    return {
        "service": config.catalog_name,
        "version": config.addon_version,
        "endpoints": {
            "manifest": "/manifest.json - Add-on manifest",
            "catalog": f"/catalog/series/{config.catalog_id}.json - Recently aired shows",
            "meta": "/meta/series/tvmaze:<id>.json - Show details with episodes",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check() -> dict:
    """Health check endpoint"""
    return {"status": "ok"}


@main_router.get("/manifest.json", response_model=ManifestResponse)
async def manifest(config: Annotated[CustomSettings, Depends(get_settings)]) -> ManifestResponse:
    """Add-on manifest describing the single recently-aired catalog"""
    return ManifestResponse(
        id=config.addon_id,
        version=config.addon_version,
        name=config.catalog_name,
        description=(
            f"Shows that aired in the last {config.recency_window_days} days "
            "(TVMaze schedule merged with TMDB discover). "
            "Filtered by content policy."
        ),
        catalogs=[CatalogDescriptor(id=config.catalog_id, name=config.catalog_name)],
    )


@main_router.get("/catalog/series/{catalog_file}", response_model=CatalogResponse)
async def catalog(
    catalog_file: str,
    config: Annotated[CustomSettings, Depends(get_settings)],
    pipeline: Annotated[CatalogBuildPipeline, Depends(get_catalog_pipeline)],
) -> CatalogResponse:
    """
    Build the recently-aired catalog

    The catalog is rebuilt from the upstream feeds on every request.
    """
    if catalog_file.removesuffix(".json") != config.catalog_id:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {catalog_file}")

    logger.info("Catalog build requested for %s", config.catalog_id)
    entries = await pipeline.run(datetime.now(timezone.utc))
    return CatalogResponse(metas=entries)


@main_router.get("/meta/series/{meta_file}", response_model=MetaResponse)
async def meta(
    meta_file: str,
    tvmaze: Annotated[TVMazeClient, Depends(get_tvmaze_client)],
) -> MetaResponse:
    """Show details with the full episode list"""
    meta_id = meta_file.removesuffix(".json")
    show_id = parse_meta_id(meta_id)
    if show_id is None:
        raise HTTPException(status_code=404, detail=f"Unknown show id: {meta_id}")

    return await get_show_meta(tvmaze, meta_id, show_id)
