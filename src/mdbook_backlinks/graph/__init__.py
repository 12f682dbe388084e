"""Chapter identity and backlink graph construction."""

from .index import BacklinkIndex, BacklinkRecord, build_backlink_index
from .paths import NormalizedPath, normalize_path, relative_path, resolve_destination

__all__ = [
    "BacklinkIndex",
    "BacklinkRecord",
    "NormalizedPath",
    "build_backlink_index",
    "normalize_path",
    "relative_path",
    "resolve_destination",
]
