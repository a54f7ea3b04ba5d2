"""
FastAPI application initialization and configuration.
"""

import logging
from typing import Optional
from fastapi import FastAPI

from rewrite.config import RewriteSettings, get_settings
from rewrite.store import RuleStore
from rewrite.version import __version__

logger = logging.getLogger(__name__)

def create_app(settings: Optional[RewriteSettings] = None, store: Optional[RuleStore] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use, defaults to environment settings
        store: Rule store to serve, defaults to one loaded from ``settings.rules_file``
    """
    from .rewrite import router as rewrite_router

    settings = settings or get_settings()
    if store is None:
        if settings.rules_file:
            logger.info(f"Loading rewrite rules from {settings.rules_file}")
            store = RuleStore.from_file(settings.rules_file)
        else:
            store = RuleStore()

    app = FastAPI(
        title=settings.api_title,
        description=f"API for managing content rewrite rules (Version {__version__})",
        version=__version__
    )
    app.state.settings = settings
    app.state.rule_store = store

    app.include_router(rewrite_router, prefix=settings.api_prefix)
    logger.debug(f"Created app with {len(store)} rewrite rules")
    return app

__all__ = ["create_app"]
