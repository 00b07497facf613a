"""Structural scan of a jar central directory."""

import logging
import zipfile
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from ..exceptions import ArchiveReadError
from ..info import ResourceInfo
from ..models import Cartography, Resource, resource_name
from .manifest import read_manifest
from .models import CodeSigner, Manifest
from .signatures import read_signers

logger = logging.getLogger(__name__)


@contextmanager
def open_archive(filename: str) -> Iterator[zipfile.ZipFile]:
    """Open the central directory view of a jar.

    Raises:
        ArchiveReadError: If the file is missing, unreadable, a directory
            or not a zip archive
    """
    try:
        archive = zipfile.ZipFile(filename, "r")
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveReadError(f"Cannot open jar {filename}: {e}") from e

    with archive:
        yield archive


def _comment(info: zipfile.ZipInfo) -> Optional[str]:
    if not info.comment:
        return None
    return info.comment.decode("utf-8", errors="replace")


def _time(info: zipfile.ZipInfo) -> Optional[datetime]:
    # DOS timestamps carry no timezone. A zeroed or invalid date is unknown.
    try:
        return datetime(*info.date_time)
    except ValueError:
        return None


def first_entry_offset(archive: zipfile.ZipFile) -> int:
    """Position of the first local header, past any data prepended to the jar."""
    return min((info.header_offset for info in archive.infolist()), default=0)


def scan_resources(cartography: Cartography, archive: zipfile.ZipFile) -> None:
    """Add a resource to the cartography for each selected entry of the jar.

    An entry is selected when its full name matches the filter pattern and,
    for directories, when ``ResourceInfo.INCLUDE_DIRECTORIES`` is requested.
    Only the requested infos are read from the directory, no content is.
    """
    request = cartography.request
    wants = request.wants

    manifest: Optional[Manifest] = None
    if wants(ResourceInfo.MANIFEST_ATTRIBUTES):
        manifest = read_manifest(archive)

    signers: Dict[str, List[CodeSigner]] = {}
    if wants(ResourceInfo.CERTIFICATES) or wants(ResourceInfo.CODE_SIGNERS):
        signers = read_signers(archive)

    include_directories = wants(ResourceInfo.INCLUDE_DIRECTORIES)
    for info in archive.infolist():
        entry_name = info.filename
        if not request.matches(entry_name):
            continue
        if info.is_dir() and not include_directories:
            continue

        resource = Resource(directory=info.is_dir())
        if wants(ResourceInfo.NAME):
            resource.name = resource_name(entry_name)
        if wants(ResourceInfo.MANIFEST_ATTRIBUTES) and manifest is not None:
            attributes = manifest.get_attributes(entry_name)
            if attributes is not None:
                resource.manifest_attributes = dict(attributes)
        entry_signers = signers.get(entry_name)
        if wants(ResourceInfo.CERTIFICATES) and entry_signers:
            certificates = [
                signer.block for signer in entry_signers if signer.block is not None
            ]
            if certificates:
                resource.certificates = certificates
        if wants(ResourceInfo.CODE_SIGNERS) and entry_signers:
            resource.code_signers = list(entry_signers)
        if wants(ResourceInfo.COMMENT):
            resource.comment = _comment(info)
        if wants(ResourceInfo.COMPRESSED_SIZE):
            resource.compressed_size = info.compress_size
        if wants(ResourceInfo.CHECKSUM):
            resource.checksum = info.CRC
        if wants(ResourceInfo.EXTRA):
            resource.extra = bytes(info.extra)
        if wants(ResourceInfo.COMPRESSION_METHOD):
            resource.compression_method = info.compress_type
        if wants(ResourceInfo.PATH):
            resource.path = entry_name
        if wants(ResourceInfo.SIZE):
            resource.size = info.file_size
        if wants(ResourceInfo.TIME):
            resource.time = _time(info)

        cartography.add_resource(entry_name, resource)

    logger.debug(
        "Mapped %d of %d entries of %s",
        len(cartography),
        len(archive.infolist()),
        cartography.filename,
    )
