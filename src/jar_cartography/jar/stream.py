"""Sequential reader of the entries of a jar, in stream order.

Entries are found by their local file headers only, the central directory is
never read. This is the only way to reach entry contents one after another
without random access, at the cost of decompressing every entry met.

Local file header layout (30 bytes + name + extra):
  0  4  signature 0x04034b50
  4  2  version needed
  6  2  general purpose flags
  8  2  compression method
  10 2  modification time
  12 2  modification date
  14 4  crc-32
  18 4  compressed size
  22 4  uncompressed size
  26 2  name length
  28 2  extra length
"""

import struct
import zipfile
import zlib
from typing import BinaryIO, Iterator, Optional, Tuple

from ..exceptions import ArchiveReadError
from .models import StreamEntry

LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")
LOCAL_HEADER_SIGNATURE = 0x04034B50
DATA_DESCRIPTOR_SIGNATURE = 0x08074B50

FLAG_ENCRYPTED = 0x0001
FLAG_DATA_DESCRIPTOR = 0x0008
FLAG_UTF8 = 0x0800

ZIP64_EXTRA_ID = 0x0001
ZIP64_MARKER = 0xFFFFFFFF

DEFAULT_CHUNK_SIZE = 8192


def _zip64_sizes(extra: bytes) -> Optional[Tuple[int, int]]:
    """(uncompressed, compressed) sizes of a local ZIP64 extra field, if any."""
    offset = 0
    while offset + 4 <= len(extra):
        header_id, data_size = struct.unpack_from("<HH", extra, offset)
        offset += 4
        if header_id == ZIP64_EXTRA_ID and data_size >= 16:
            return struct.unpack_from("<QQ", extra, offset)
        offset += data_size
    return None


class ZipEntryStream:
    """Iterate the entries of a zip stream and read their decompressed bytes.

    Only STORED and DEFLATED entries can be read, as in any jar.

    Examples:
        with open("app.jar", "rb") as handle:
            stream = ZipEntryStream(handle)
            for entry in stream:
                data = stream.read(entry.size)
    """

    def __init__(self, fileobj: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._fileobj = fileobj
        self._chunk_size = chunk_size
        self._pushback = b""
        self._entry: Optional[StreamEntry] = None
        self._entry_done = True
        self._raw_remaining: Optional[int] = None
        self._decompressor: Optional["zlib._Decompress"] = None
        self._finished = False

    def __iter__(self) -> Iterator[StreamEntry]:
        while True:
            entry = self.next_entry()
            if entry is None:
                return
            yield entry

    @property
    def entry(self) -> Optional[StreamEntry]:
        """Entry currently being read."""
        return self._entry

    def _read_raw(self, size: int) -> bytes:
        if self._pushback:
            data = self._pushback[:size]
            self._pushback = self._pushback[size:]
            return data
        return self._fileobj.read(size)

    def _read_exact(self, size: int, what: str) -> bytes:
        data = b""
        while len(data) < size:
            chunk = self._read_raw(size - len(data))
            if not chunk:
                raise ArchiveReadError(f"Unexpected end of jar while reading {what}")
            data += chunk
        return data

    def next_entry(self) -> Optional[StreamEntry]:
        """Move to the next entry, skipping what is left of the current one.

        Returns:
            The next entry, or None once the central directory (or the end of
            the file) is reached

        Raises:
            ArchiveReadError: If a local header is truncated or the entry
                cannot be streamed
        """
        if self._finished:
            return None
        if self._entry is not None:
            self._close_entry()

        signature = self._read_raw(4)
        while 0 < len(signature) < 4:
            chunk = self._read_raw(4 - len(signature))
            if not chunk:
                break
            signature += chunk
        if len(signature) < 4 or struct.unpack("<I", signature)[0] != LOCAL_HEADER_SIGNATURE:
            self._finished = True
            self._entry = None
            return None

        header = signature + self._read_exact(LOCAL_HEADER.size - 4, "local file header")
        (
            _signature,
            _version,
            flags,
            method,
            _time,
            _date,
            crc,
            compressed_size,
            size,
            name_length,
            extra_length,
        ) = LOCAL_HEADER.unpack(header)
        raw_name = self._read_exact(name_length, "entry name")
        extra = self._read_exact(extra_length, "extra field")
        # Same decoding as zipfile, so names match the central directory ones
        try:
            name = raw_name.decode("utf-8" if flags & FLAG_UTF8 else "cp437")
        except UnicodeDecodeError as e:
            raise ArchiveReadError(f"Cannot decode entry name {raw_name!r}: {e}") from e

        if flags & FLAG_ENCRYPTED:
            raise ArchiveReadError(f"Encrypted entry {name} cannot be read")

        zip64_sizes = _zip64_sizes(extra)
        if zip64_sizes is not None:
            if size == ZIP64_MARKER:
                size = zip64_sizes[0]
            if compressed_size == ZIP64_MARKER:
                compressed_size = zip64_sizes[1]
        if flags & FLAG_DATA_DESCRIPTOR:
            compressed_size = size = -1

        entry = StreamEntry(
            name=name,
            method=method,
            flags=flags,
            crc=crc,
            compressed_size=compressed_size,
            size=size,
            zip64=zip64_sizes is not None,
        )
        if method == zipfile.ZIP_STORED and compressed_size < 0:
            raise ArchiveReadError(
                f"Stored entry {name} has its size in a data descriptor and cannot be streamed"
            )

        self._entry = entry
        self._entry_done = False
        self._raw_remaining = compressed_size if compressed_size >= 0 else None
        self._decompressor = (
            zlib.decompressobj(-zlib.MAX_WBITS) if method == zipfile.ZIP_DEFLATED else None
        )
        return entry

    def _read_compressed(self) -> bytes:
        if self._raw_remaining is None:
            return self._read_raw(self._chunk_size)
        if self._raw_remaining == 0:
            return b""
        data = self._read_raw(min(self._chunk_size, self._raw_remaining))
        if not data:
            raise ArchiveReadError(f"Unexpected end of jar in entry {self._entry.name}")
        self._raw_remaining -= len(data)
        return data

    def read(self, size: int) -> bytes:
        """Read up to ``size`` decompressed bytes of the current entry.

        Fewer bytes than requested may be returned; ``b""`` means the entry
        has no more data.

        Raises:
            ArchiveReadError: If the entry cannot be decompressed or the jar
                ends in the middle of it
        """
        if self._entry is None or self._entry_done or size <= 0:
            return b""
        entry = self._entry

        if entry.method == zipfile.ZIP_STORED:
            if self._raw_remaining == 0:
                self._finish_data()
                return b""
            data = self._read_raw(min(size, self._raw_remaining))
            if not data:
                raise ArchiveReadError(f"Unexpected end of jar in entry {entry.name}")
            self._raw_remaining -= len(data)
            return data

        if self._decompressor is None:
            raise ArchiveReadError(
                f"Unsupported compression method {entry.method} for entry {entry.name}"
            )

        decompressor = self._decompressor
        while True:
            if decompressor.eof:
                self._finish_data()
                return b""
            raw = decompressor.unconsumed_tail or self._read_compressed()
            try:
                data = decompressor.decompress(raw, size)
            except zlib.error as e:
                raise ArchiveReadError(f"Invalid deflate data in entry {entry.name}: {e}") from e
            if decompressor.eof:
                # What follows the deflate stream belongs to the next record
                self._pushback = decompressor.unused_data + self._pushback
            if data:
                return data
            if not raw and not decompressor.eof:
                raise ArchiveReadError(f"Unexpected end of jar in entry {entry.name}")

    def _finish_data(self) -> None:
        if self._entry_done:
            return
        self._entry_done = True
        if self._entry.flags & FLAG_DATA_DESCRIPTOR:
            self._read_data_descriptor()

    def _read_data_descriptor(self) -> None:
        entry = self._entry
        field = self._read_exact(4, "data descriptor")
        # The descriptor signature is optional
        if struct.unpack("<I", field)[0] == DATA_DESCRIPTOR_SIGNATURE:
            field = self._read_exact(4, "data descriptor")
        size_format = "<QQ" if entry.zip64 else "<II"
        sizes = self._read_exact(struct.calcsize(size_format), "data descriptor")
        entry.crc = struct.unpack("<I", field)[0]
        entry.compressed_size, entry.size = struct.unpack(size_format, sizes)

    def _close_entry(self) -> None:
        while self.read(self._chunk_size):
            pass
