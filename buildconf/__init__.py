"""
buildconf package

Client-side binding for a remote build-configuration API: fetch, create and
version build configurations, and upload a version's template payload.

Key responsibilities are split across modules:
- `models.py`: value objects and their JSON wire shapes
- `transport.py`: HTTP over `requests`, error taxonomy, bulk upload
- `client.py`: `BuildConfigClient`, one method per API operation
- `config.py`: settings from YAML file + environment
- `cli.py`: CLI entrypoint (get / create / push)
"""

from __future__ import annotations

from buildconf.client import BuildConfigClient
from buildconf.models import BuildConfig, BuildConfigBuild, BuildConfigVersion, UploadTarget
from buildconf.transport import (
    APIError,
    BuildConfigError,
    DecodeError,
    Transport,
    TransportError,
    UploadError,
)

__all__ = [
    "__version__",
    "APIError",
    "BuildConfig",
    "BuildConfigBuild",
    "BuildConfigClient",
    "BuildConfigError",
    "BuildConfigVersion",
    "DecodeError",
    "Transport",
    "TransportError",
    "UploadError",
    "UploadTarget",
]

__version__ = "0.1.0"
