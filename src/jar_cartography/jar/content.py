"""Content extraction, by a sequential pass over the jar entries."""

import logging
from typing import Set

from ..exceptions import ArchiveReadError, TruncatedContentError
from ..info import ResourceInfo
from ..models import Cartography
from .stream import ZipEntryStream

logger = logging.getLogger(__name__)

# Read size when the length of an entry is unknown
DEFAULT_READ_SIZE = 65536


def read_fully(stream: ZipEntryStream, expected: int) -> bytes:
    """Read the current entry of a stream.

    Args:
        stream: Stream positioned on an entry
        expected: Number of bytes to read, or a negative number to read up to
            the end of the entry

    Returns:
        Exactly ``expected`` bytes (or the whole entry)

    Raises:
        TruncatedContentError: If the entry ends before ``expected`` bytes
    """
    buffer = bytearray()
    if expected < 0:
        while True:
            chunk = stream.read(DEFAULT_READ_SIZE)
            if not chunk:
                return bytes(buffer)
            buffer += chunk

    # A single read may return less than asked
    while len(buffer) < expected:
        chunk = stream.read(expected - len(buffer))
        if not chunk:
            entry_name = stream.entry.name if stream.entry else "?"
            raise TruncatedContentError(entry_name, expected, len(buffer))
        buffer += chunk
    return bytes(buffer)


def fill_contents(cartography: Cartography, start_offset: int = 0) -> None:
    """Attach the decompressed content of each mapped file to its resource.

    Runs only if ``ResourceInfo.CONTENT`` is requested. Every entry of the jar
    is decompressed to reach the following ones, but only the bytes of
    entries already in the cartography are kept.

    Args:
        cartography: Cartography filled by the structural scan
        start_offset: Position of the first local header in the jar

    Raises:
        ArchiveReadError: If the jar cannot be opened or streamed, or if the
            stream never reaches a mapped file
    """
    if not cartography.request.wants(ResourceInfo.CONTENT):
        return

    filename = cartography.filename
    try:
        handle = open(filename, "rb")
    except OSError as e:
        raise ArchiveReadError(f"Cannot open jar {filename}: {e}") from e

    filled: Set[str] = set()
    with handle:
        try:
            handle.seek(start_offset)
            stream = ZipEntryStream(handle, chunk_size=cartography.request.chunk_size)
            for entry in stream:
                if entry.is_directory:
                    continue
                resource = cartography.get_resource(entry.name)
                if resource is not None and resource.size is not None:
                    expected = resource.size
                else:
                    expected = entry.size
                content = read_fully(stream, expected)
                if resource is not None:
                    resource.content = content
                    filled.add(entry.name)
        except OSError as e:
            raise ArchiveReadError(f"Cannot read jar {filename}: {e}") from e

    missing = sorted(
        name
        for name, resource in cartography.resources.items()
        if not resource.directory and name not in filled
    )
    if missing:
        raise ArchiveReadError(
            f"Entries of {filename} not found while streaming: {', '.join(missing)}"
        )

    logger.debug("Read the content of %d resources of %s", len(filled), filename)
