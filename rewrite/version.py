"""Version information for the rewrite engine."""

import sys
from typing import Dict, Any

# Version components
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# Build version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Minimum required versions of dependencies
DEPENDENCY_VERSIONS: Dict[str, str] = {
    "fastapi": ">=0.100.0",
    "uvicorn": ">=0.22.0",
    "pydantic": ">=2.0.0",
    "pydantic-settings": ">=2.0.0",
    "pyyaml": ">=6.0",
}

def get_version_info() -> Dict[str, Any]:
    """Return detailed version information."""
    return {
        "version": __version__,
        "python": ".".join(str(part) for part in sys.version_info[:3]),
        "dependencies": DEPENDENCY_VERSIONS
    }
