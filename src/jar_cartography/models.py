"""Cartography request, resource and cartography models."""

import posixpath
import re
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from .exceptions import ValidationError
from .info import ResourceInfo, resolve_informations
from .jar.models import CodeSigner, Manifest
from .jar.stream import DEFAULT_CHUNK_SIZE

# Pattern matching any entry name
MATCH_ALL = ".*"

# Key of the manifest main attributes. NUL never appears in an entry name.
MANIFEST_MAIN_ATTRIBUTES = "\x00MANIFEST_MAIN_ATTRIBUTES"


@dataclass(frozen=True)
class CartographyRequest:
    """Parameters of a cartography query.

    Args:
        filename: Path of the jar on the filesystem
        resource_filter_pattern: Regular expression an entry name must match
            as a whole to be mapped
        with_manifest: Also read the manifest attributes
        informations: Resolved atomic infos to collect for each resource
        chunk_size: Raw bytes read at a time while streaming contents

    Raises:
        ValidationError: If any parameter is invalid
    """

    filename: str
    resource_filter_pattern: str = MATCH_ALL
    with_manifest: bool = False
    informations: Tuple[ResourceInfo, ...] = (ResourceInfo.NAME,)
    chunk_size: int = DEFAULT_CHUNK_SIZE
    _pattern: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.filename is None:
            raise ValidationError("Unexpectedly null filename")
        if not isinstance(self.filename, str) or not self.filename.strip():
            raise ValidationError("Unexpectedly empty filename")
        if (
            not isinstance(self.resource_filter_pattern, str)
            or not self.resource_filter_pattern.strip()
        ):
            raise ValidationError("Unexpectedly empty resource_filter_pattern")
        if self.chunk_size <= 0:
            raise ValidationError(f"chunk_size must be positive: {self.chunk_size}")

        try:
            pattern = re.compile(self.resource_filter_pattern)
        except re.error as e:
            raise ValidationError(
                f"Invalid resource_filter_pattern {self.resource_filter_pattern!r}: {e}"
            ) from e
        object.__setattr__(self, "_pattern", pattern)
        # Accept groups here too, keep only atomic infos
        object.__setattr__(
            self, "informations", resolve_informations(*self.informations)
        )

    @classmethod
    def create(
        cls,
        filename: str,
        *informations: ResourceInfo,
        resource_filter_pattern: Optional[str] = None,
        with_manifest: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "CartographyRequest":
        """Build a request from infos or groups of infos.

        A ``None`` pattern maps every entry; no infos maps only names.
        """
        return cls(
            filename=filename,
            resource_filter_pattern=(
                MATCH_ALL if resource_filter_pattern is None else resource_filter_pattern
            ),
            with_manifest=with_manifest,
            informations=resolve_informations(*informations),
            chunk_size=chunk_size,
        )

    def matches(self, entry_name: str) -> bool:
        """Check the whole entry name against the filter pattern."""
        return self._pattern.fullmatch(entry_name) is not None

    def wants(self, info: ResourceInfo) -> bool:
        return info in self.informations


@dataclass
class Resource:
    """Information collected about one jar entry.

    Only the fields whose info was requested are set, the others stay None.
    """

    name: Optional[str] = None
    path: Optional[str] = None
    size: Optional[int] = None
    compressed_size: Optional[int] = None
    checksum: Optional[int] = None  # CRC-32
    compression_method: Optional[int] = None  # zipfile.ZIP_STORED, ZIP_DEFLATED...
    extra: Optional[bytes] = None
    comment: Optional[str] = None
    time: Optional[datetime] = None
    certificates: Optional[List[bytes]] = None
    code_signers: Optional[List[CodeSigner]] = None
    manifest_attributes: Optional[Dict[str, str]] = None
    content: Optional[bytes] = field(default=None, repr=False)
    directory: bool = False

    def describe(self) -> str:
        """One-line summary of the resource."""
        return (
            f"{self.name}={{time={self.time}, size={self.size}, path={self.path!r}, "
            f"compressionMethod={self.compression_method}, checksum={self.checksum}, "
            f"compressedSize={self.compressed_size}, comment={self.comment!r}, "
            f"codeSigners.size={len(self.code_signers or ())}, "
            f"certificates.size={len(self.certificates or ())}, "
            f"manifestAttributes.size={len(self.manifest_attributes or ())}, "
            f"content.length={len(self.content or b'')}, directory={self.directory}}}"
        )


def resource_name(entry_name: str) -> str:
    """Last segment of an entry name, without the trailing directory separator."""
    return posixpath.basename(entry_name.rstrip("/"))


class Cartography:
    """Cartography of a jar.

    Built once per query by the cartographer, then only read.
    """

    def __init__(self, request: CartographyRequest) -> None:
        self.request = request
        self._manifest: Optional[Manifest] = None
        self._resources: Dict[str, Resource] = {}
        self._entry_attributes: Dict[str, Dict[str, str]] = {}

    @property
    def filename(self) -> str:
        return self.request.filename

    @property
    def resource_filter_pattern(self) -> str:
        return self.request.resource_filter_pattern

    @property
    def with_manifest(self) -> bool:
        return self.request.with_manifest

    @property
    def informations(self) -> Tuple[ResourceInfo, ...]:
        return self.request.informations

    @property
    def manifest(self) -> Optional[Manifest]:
        return self._manifest

    @property
    def resources(self) -> Mapping[str, Resource]:
        """Resources keyed by their full entry name."""
        return MappingProxyType(self._resources)

    def set_manifest(self, manifest: Manifest) -> None:
        self._manifest = manifest

    def add_resource(self, entry_name: str, resource: Resource) -> None:
        """Add a resource under its full entry name (e.g. ``dir/`` or ``dir/a.txt``)."""
        self._resources[entry_name] = resource

    def add_attributes(self, entry: str, attributes: Dict[str, str]) -> None:
        """Add the attributes of a manifest section.

        Use ``MANIFEST_MAIN_ATTRIBUTES`` as ``entry`` for the main section.
        """
        self._entry_attributes[entry] = attributes

    def get_resource(self, entry_name: str) -> Optional[Resource]:
        return self._resources.get(entry_name)

    def __contains__(self, entry_name: object) -> bool:
        return entry_name in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    @property
    def manifest_main_attributes(self) -> Optional[Mapping[str, str]]:
        """Main attributes of the manifest, None if it was not requested."""
        return self.get_manifest_entry_attributes(MANIFEST_MAIN_ATTRIBUTES)

    @property
    def manifest_entries(self) -> FrozenSet[str]:
        """Names of the manifest entry sections, main section excluded."""
        return frozenset(self._entry_attributes) - {MANIFEST_MAIN_ATTRIBUTES}

    def get_manifest_entry_attributes(self, entry: str) -> Optional[Mapping[str, str]]:
        attributes = self._entry_attributes.get(entry)
        if attributes is None:
            return None
        return MappingProxyType(attributes)

    def __repr__(self) -> str:
        return (
            f"Cartography(filename={self.filename!r}, "
            f"resource_filter_pattern={self.resource_filter_pattern!r}, "
            f"with_manifest={self.with_manifest}, resources={len(self._resources)})"
        )
