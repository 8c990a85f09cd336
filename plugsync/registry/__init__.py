"""Remote side of the pipeline: HTTP access and latest-version resolution."""

from plugsync.registry.client import RegistryClient, is_json_media_type
from plugsync.registry.json_path import resolve_path
from plugsync.registry.resolver import VersionResolver

__all__ = [
    "RegistryClient",
    "VersionResolver",
    "is_json_media_type",
    "resolve_path",
]
