"""
Config — Validator profiles loaded from YAML.
"""

from sdv.config.loader import (
    clear_cache,
    get_default_profile_name,
    get_profile,
    list_profiles,
    load_profile,
    load_profile_from_path,
    parse_profile,
)
from sdv.config.models import ValidatorProfile, ValidatorSettings

__all__ = [
    "ValidatorProfile",
    "ValidatorSettings",
    "clear_cache",
    "get_default_profile_name",
    "get_profile",
    "list_profiles",
    "load_profile",
    "load_profile_from_path",
    "parse_profile",
]
