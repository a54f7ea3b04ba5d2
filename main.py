"""Main application module."""
import logging

import uvicorn

from api import create_app
from rewrite.config import get_settings
from rewrite.utils import setup_logging
from rewrite.version import __version__

settings = get_settings()
setup_logging(settings.log_level, settings.log_file)
logger = logging.getLogger(__name__)

# Create the FastAPI application instance
app = create_app(settings)

def main() -> None:
    """Serve the rewrite rule API."""
    logger.info(f"Starting rewrite engine API (v{__version__})")
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())

if __name__ == "__main__":
    main()
