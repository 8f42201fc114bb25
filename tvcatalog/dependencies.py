"""
Dependency providers

FastAPI dependencies for the shared HTTP client and the services built on it.
Tests swap these out through ``app.dependency_overrides``.
"""
import logging
from typing import Annotated

import httpx
from fastapi import Depends, Request

from tvcatalog.config import CustomSettings, settings
from tvcatalog.services.catalog_builder import CatalogBuildPipeline, create_pipeline
from tvcatalog.services.tvmaze_client import TVMazeClient


logger = logging.getLogger(__name__)


def create_http_client(config: CustomSettings) -> httpx.AsyncClient:
    """Create the shared async client used for all upstream calls."""
    return httpx.AsyncClient(
        timeout=config.http_timeout_sec,
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )


def get_settings() -> CustomSettings:
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """HTTP client created in the application lifespan."""
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("HTTP client not initialized. Start the app through its lifespan.")
    return client


def get_catalog_pipeline(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> CatalogBuildPipeline:
    """A fresh pipeline per request; builds share nothing but the client."""
    return create_pipeline(client, config)


def get_tvmaze_client(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> TVMazeClient:
    return TVMazeClient(client, config.tvmaze_base_url)
