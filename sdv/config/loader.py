"""
Profile Loader — Load validator profiles from YAML files.

Profiles live in profiles/ next to this module. The default profile name
comes from the SDV_PROFILE environment variable, falling back to "default".
"""

import os
from pathlib import Path
from typing import Optional, Union

import yaml

from sdv.config.models import ValidatorProfile, ValidatorSettings
from sdv.core.logging import LogChannel, get_logger

PROFILES_DIR = Path(__file__).parent / "profiles"

DEFAULT_PROFILE = "default"

log = get_logger(LogChannel.CONFIG)


def get_default_profile_name() -> str:
    """Profile used when none is requested explicitly."""
    return os.environ.get("SDV_PROFILE", DEFAULT_PROFILE)


def load_profile(name: str = DEFAULT_PROFILE) -> ValidatorProfile:
    """
    Load a profile by name.

    Args:
        name: Profile name (without .yaml extension)

    Returns:
        Parsed ValidatorProfile

    Raises:
        FileNotFoundError: If the profile file doesn't exist
        ValueError: If the profile is invalid
    """
    path = PROFILES_DIR / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Profile not found: {path}")
    return load_profile_from_path(path)


def load_profile_from_path(path: Union[str, Path]) -> ValidatorProfile:
    """Load a profile from an arbitrary path."""
    with open(path) as f:
        data = yaml.safe_load(f)

    profile = parse_profile(data, default_name=Path(path).stem)
    log.verbose("profile_loaded", profile=profile.name, path=str(path))
    return profile


def parse_profile(data: dict, default_name: str = DEFAULT_PROFILE) -> ValidatorProfile:
    """Parse a profile from its dictionary form."""
    if not isinstance(data, dict):
        raise ValueError("Profile must be a mapping")

    profile_info = data.get("profile") or {}
    settings_data = data.get("settings") or {}

    unknown = set(settings_data) - {"itemtype", "table_min_tbody"}
    if unknown:
        raise ValueError(f"Unknown profile settings: {', '.join(sorted(unknown))}")

    defaults = ValidatorSettings()

    min_tbody = settings_data.get("table_min_tbody", defaults.table_min_tbody)
    if not isinstance(min_tbody, int) or isinstance(min_tbody, bool) or min_tbody < 0:
        raise ValueError(f"table_min_tbody must be a non-negative integer, got {min_tbody!r}")

    itemtype = settings_data.get("itemtype", defaults.itemtype)
    if not isinstance(itemtype, str) or not itemtype:
        raise ValueError("itemtype must be a non-empty string")

    return ValidatorProfile(
        name=profile_info.get("name", default_name),
        version=str(profile_info.get("version", "1.0")),
        description=profile_info.get("description", ""),
        settings=ValidatorSettings(
            itemtype=itemtype,
            table_min_tbody=min_tbody,
        ),
    )


def list_profiles() -> list[str]:
    """List available profile names."""
    if not PROFILES_DIR.exists():
        return []
    return sorted(p.stem for p in PROFILES_DIR.glob("*.yaml"))


# Cache for loaded profiles
_cache: dict[str, ValidatorProfile] = {}


def get_profile(name: Optional[str] = None, use_cache: bool = True) -> ValidatorProfile:
    """Get a profile, using cache by default."""
    name = name or get_default_profile_name()
    if use_cache and name in _cache:
        return _cache[name]

    profile = load_profile(name)
    _cache[name] = profile
    return profile


def clear_cache() -> None:
    """Clear the profile cache."""
    _cache.clear()
