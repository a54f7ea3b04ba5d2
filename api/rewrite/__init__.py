"""Rewrite rule management API package."""
import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Create router first - needed by endpoints
router = APIRouter(
    tags=["rewrite"],
    responses={404: {"description": "Not found"}},
    default_response_class=JSONResponse
)

from . import endpoints  # noqa: E402,F401

__all__ = ["router"]
