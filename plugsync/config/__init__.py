"""plugsync configuration -- process settings and the registry file."""

from .registries import RegistryConfig, load_registries, parse_registries
from .settings import Settings, expand_path, get_settings

__all__ = [
    "RegistryConfig",
    "Settings",
    "expand_path",
    "get_settings",
    "load_registries",
    "parse_registries",
]
