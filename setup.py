"""Setup file for the content rewrite engine."""
from setuptools import setup, find_packages

import re
from pathlib import Path

def get_version() -> str:
    """Get version from version.py."""
    version_file = Path(__file__).parent / "rewrite" / "version.py"
    if not version_file.exists():
        return "0.1.0"

    content = version_file.read_text()
    version_match = re.search(r"VERSION_MAJOR = (\d+)\nVERSION_MINOR = (\d+)\nVERSION_PATCH = (\d+)", content)
    if version_match:
        return ".".join(version_match.groups())
    return "0.1.0"

version = get_version()

setup(
    name="rewrite_engine",
    version=version,  # Version is read from rewrite/version.py
    description="Rule-based content rewriting for proxied SOAP/REST bodies",
    python_requires=">=3.9",
    packages=find_packages(include=[
        "rewrite",
        "rewrite.*",
        "api",
        "api.*"
    ]),
    py_modules=["main"],
    install_requires=[
        "fastapi>=0.100.0,<1.0.0",
        "uvicorn>=0.22.0,<1.0.0",
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0,<3.0.0",
        "pyyaml>=6.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0"
        ]
    },
    entry_points={
        "console_scripts": [
            "rewrite-engine=main:main"
        ]
    }
)
