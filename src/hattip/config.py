import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

DEFAULT_TIMEOUT = 30.0

DEFAULT_CONFIG_PATH = os.environ.get(
    "HATTIP_CONFIG",
    str(Path(os.environ.get("XDG_CONFIG_HOME", Path("~") / ".config")) / "hattip" / "config.json"),
)


@dataclass
class Profile:
    name: str
    host: Optional[str] = None
    timeout: Optional[float] = DEFAULT_TIMEOUT
    verify: bool = True
    follow_redirects: bool = True


@dataclass
class TransportConfig:
    profiles: dict = field(default_factory=dict)
    default_profile: Optional[str] = None


DEFAULT_PROFILE = Profile(name="default")


def load_transport_config(path: str = DEFAULT_CONFIG_PATH) -> TransportConfig:
    """Load transport settings from a JSON file. Returns an empty config if the file doesn't exist."""
    expanded = Path(path).expanduser()
    if not expanded.exists():
        return TransportConfig()

    data = json.loads(expanded.read_text())

    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = Profile(
            name=name,
            host=profile_data.get("host"),
            timeout=profile_data.get("timeout", DEFAULT_TIMEOUT),
            verify=profile_data.get("verify", True),
            follow_redirects=profile_data.get("follow_redirects", True),
        )

    return TransportConfig(
        profiles=profiles,
        default_profile=data.get("default_profile"),
    )


def resolve_profile(config: TransportConfig, url: str, profile_name: Optional[str] = None) -> Profile:
    """Resolve which profile applies to a given URL.

    Resolution order:
    1. Explicit profile_name
    2. Exact host match from URL
    3. Subdomain suffix match from URL
    4. default_profile from config
    5. Built-in defaults
    """
    if profile_name:
        if profile_name not in config.profiles:
            raise ValueError(f"Unknown profile: {profile_name}")
        return config.profiles[profile_name]

    hostname = urlparse(url).hostname or ""

    for profile in config.profiles.values():
        if profile.host and hostname == profile.host:
            return profile

    for profile in config.profiles.values():
        if profile.host and hostname.endswith("." + profile.host):
            return profile

    if config.default_profile and config.default_profile in config.profiles:
        return config.profiles[config.default_profile]

    return DEFAULT_PROFILE
