"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS API client (HTTP)
- Network connectivity probe (socket)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from quakereport.shell.usgs_client import USGSClient, USGSQueryParams, build_request_url
from quakereport.shell.connectivity import has_network_connection
from quakereport.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "USGSClient",
    "USGSQueryParams",
    "build_request_url",
    "has_network_connection",
    "load_config",
    "load_config_from_env",
]
