"""User-Agent string handling for transports."""

import sys

from hattip import __version__

_PY_VERSION = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"


def get_user_agent(http_lib_version: str) -> str:
    """Build the default User-Agent string.

    Args:
        http_lib_version: The HTTP library and version (e.g., "requests/2.31.0")

    Returns:
        User-Agent string like "hattip/0.1.0 python/3.11.0 requests/2.31.0"
    """
    return f"hattip/{__version__} python/{_PY_VERSION} {http_lib_version}"
