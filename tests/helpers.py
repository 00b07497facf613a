"""Test helper functions building jar files."""

import io
import zipfile
from pathlib import Path
from typing import Dict, Optional

from jar_cartography.jar.scanner import open_archive, scan_resources
from jar_cartography.models import Cartography, CartographyRequest

MANIFEST = (
    "Manifest-Version: 1.0\r\n"
    "X: Y\r\n"
    "\r\n"
    "Name: a.txt\r\n"
    "Foo: bar\r\n"
    "\r\n"
)

SIGNATURE_FILE = (
    "Signature-Version: 1.0\r\n"
    "\r\n"
    "Name: a.txt\r\n"
    "SHA-256-Digest: 47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU=\r\n"
    "\r\n"
)

SIGNATURE_BLOCK = b"\x30\x82\x01\x00fake pkcs7 block"


def write_entries(
    jar: zipfile.ZipFile,
    entries: Dict[str, Optional[bytes]],
    compression: int = zipfile.ZIP_DEFLATED,
) -> None:
    """Write entries in order. Names ending with '/' are directories."""
    for name, data in entries.items():
        if name.endswith("/"):
            jar.writestr(name, b"", compress_type=zipfile.ZIP_STORED)
        else:
            jar.writestr(name, data or b"", compress_type=compression)


def create_test_jar(
    path: Path,
    entries: Dict[str, Optional[bytes]],
    manifest: Optional[str] = None,
    compression: int = zipfile.ZIP_DEFLATED,
) -> Path:
    """Create a jar with an optional manifest written first."""
    with zipfile.ZipFile(path, "w") as jar:
        if manifest is not None:
            jar.writestr("META-INF/MANIFEST.MF", manifest)
        write_entries(jar, entries, compression)
    return path


class UnseekableWriter:
    """Write-only stream, forcing zipfile to use data descriptors."""

    def __init__(self) -> None:
        self.buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self.buffer.write(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


def create_streamed_jar(
    path: Path,
    entries: Dict[str, Optional[bytes]],
    compression: int = zipfile.ZIP_DEFLATED,
) -> Path:
    """Create a jar as a tool writing to a pipe would: sizes in data descriptors."""
    writer = UnseekableWriter()
    with zipfile.ZipFile(writer, "w") as jar:
        write_entries(jar, entries, compression)
    path.write_bytes(writer.getvalue())
    return path


def scan(path: Path, *informations, pattern: Optional[str] = None) -> Cartography:
    """Run the structural scan of a jar only."""
    cartography = Cartography(
        CartographyRequest.create(
            str(path), *informations, resource_filter_pattern=pattern
        )
    )
    with open_archive(str(path)) as archive:
        scan_resources(cartography, archive)
    return cartography


def create_prefixed_jar(
    path: Path, entries: Dict[str, Optional[bytes]], prefix: bytes
) -> Path:
    """Create a jar preceded by arbitrary bytes, as an executable jar script."""
    create_test_jar(path, entries)
    path.write_bytes(prefix + path.read_bytes())
    return path


def zero_central_directory_dates(path: Path) -> None:
    """Clear the DOS date and time of every central directory header."""
    data = bytearray(path.read_bytes())
    offset = data.find(b"PK\x01\x02")
    while offset != -1:
        # Time at +12, date at +14
        data[offset + 12:offset + 16] = b"\x00" * 4
        offset = data.find(b"PK\x01\x02", offset + 4)
    path.write_bytes(bytes(data))
