"""Data models for jar file handling."""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class Manifest:
    """Parsed META-INF/MANIFEST.MF."""

    main_attributes: Dict[str, str] = field(default_factory=dict)
    entries: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def get_attributes(self, name: str) -> Optional[Dict[str, str]]:
        """Attributes of the per-entry section ``name``, if any."""
        return self.entries.get(name)


@dataclass(frozen=True)
class CodeSigner:
    """A signer of jar entries, as declared in META-INF."""

    alias: str
    signature_file: str  # META-INF/<alias>.SF
    block_file: Optional[str]  # META-INF/<alias>.RSA, .DSA or .EC
    block: Optional[bytes] = field(default=None, repr=False)  # PKCS#7 data


@dataclass
class StreamEntry:
    """Local file header of an entry met while streaming a jar."""

    name: str
    method: int
    flags: int
    crc: int
    compressed_size: int  # -1 when deferred to a data descriptor
    size: int  # -1 when deferred to a data descriptor
    zip64: bool = False

    @property
    def is_directory(self) -> bool:
        return self.name.endswith("/")
