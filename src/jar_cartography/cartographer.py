"""Functional jar cartography operations."""

import logging
import zipfile
from typing import Optional

from .exceptions import ArchiveReadError
from .info import ResourceInfo
from .jar.content import fill_contents
from .jar.manifest import extract_manifest
from .jar.scanner import first_entry_offset, open_archive, scan_resources
from .models import DEFAULT_CHUNK_SIZE, Cartography, CartographyRequest

logger = logging.getLogger(__name__)


def fill(cartography: Cartography) -> Cartography:
    """Run the structural, manifest and content passes on a cartography.

    The central directory view is closed before the jar is reopened as a
    stream for the content pass, which starts at the first local header so
    that a prepended launcher script is skipped.

    Raises:
        ArchiveReadError: If the jar cannot be opened or read
        ManifestError: If the manifest is requested but missing or malformed
    """
    logger.debug("Mapping %s", cartography.filename)
    with open_archive(cartography.filename) as archive:
        try:
            scan_resources(cartography, archive)
            extract_manifest(cartography, archive)
            start_offset = first_entry_offset(archive)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveReadError(f"Cannot read jar {cartography.filename}: {e}") from e
    fill_contents(cartography, start_offset)
    return cartography


def get_jar_cartography(
    filename: str,
    *informations: ResourceInfo,
    resource_filter_pattern: Optional[str] = None,
    with_manifest: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Cartography:
    """jar 파일의 리소스 지도(cartography)를 생성합니다.

    Args:
        filename: Path of the jar on the filesystem
            - "app.jar", "./libs/app.jar", "/opt/app/lib/app.jar"
        *informations: Infos (or groups of infos) to collect for each resource
            (only names by default)
        resource_filter_pattern: Regular expression matched against the whole
            entry name (every entry by default)
        with_manifest: Also collect the manifest attributes
        chunk_size: Raw bytes read at a time while streaming contents

    Returns:
        Cartography: Resources keyed by entry name, plus manifest attributes

    Raises:
        ValidationError: If the filename or the pattern is invalid
        ArchiveReadError: If the jar does not exist, is a directory, or cannot
            be read
        TruncatedContentError: If an entry ends before its declared size
        ManifestNotFoundError: If the manifest is requested but the jar has none

    Examples:
        # Names and sizes of the classes of a package
        cartography = get_jar_cartography(
            "app.jar",
            ResourceInfo.FILE_INFO,
            resource_filter_pattern=r"com/example/.*\\.class",
        )
        for path, resource in cartography.resources.items():
            print(path, resource.size)

        # Main attributes of the manifest
        cartography = get_jar_cartography("app.jar", with_manifest=True)
        print(cartography.manifest_main_attributes["Main-Class"])
    """
    request = CartographyRequest.create(
        filename,
        *informations,
        resource_filter_pattern=resource_filter_pattern,
        with_manifest=with_manifest,
        chunk_size=chunk_size,
    )
    return fill(Cartography(request))
