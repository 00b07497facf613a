"""Jar Cartography - Selective, queryable maps of jar (zip) archives."""

__version__ = "0.1.0"

from .cartographer import fill, get_jar_cartography
from .exceptions import (
    ArchiveReadError,
    CartographyError,
    ManifestError,
    ManifestNotFoundError,
    TruncatedContentError,
    ValidationError,
)
from .info import ResourceInfo, resolve_informations
from .models import (
    MANIFEST_MAIN_ATTRIBUTES,
    MATCH_ALL,
    Cartography,
    CartographyRequest,
    Resource,
)
from .utils import extract_files, get_archive_path

__all__ = [
    "get_jar_cartography",
    "fill",
    "extract_files",
    "get_archive_path",
    "ResourceInfo",
    "resolve_informations",
    "Cartography",
    "CartographyRequest",
    "Resource",
    "MANIFEST_MAIN_ATTRIBUTES",
    "MATCH_ALL",
    "CartographyError",
    "ValidationError",
    "ArchiveReadError",
    "TruncatedContentError",
    "ManifestError",
    "ManifestNotFoundError",
]
