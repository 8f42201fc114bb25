"""
Services package for the recent TV catalog

This package contains all business logic and service layer components.
"""
from tvcatalog.services.catalog_builder import CatalogBuildPipeline, create_pipeline
from tvcatalog.services.content_policy import ContentPolicy
from tvcatalog.services.identity_resolver import IdentityResolver
from tvcatalog.services.meta_service import get_show_meta, parse_meta_id

__all__ = [
    'CatalogBuildPipeline',
    'ContentPolicy',
    'IdentityResolver',
    'create_pipeline',
    'get_show_meta',
    'parse_meta_id',
]
