"""Information tags that can be requested about archive resources."""

from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class ResourceInfo(str, Enum):
    """A piece of information about a resource, or a named group of them."""

    NAME = "name"
    PATH = "path"
    SIZE = "size"
    COMPRESSED_SIZE = "compressed_size"
    COMMENT = "comment"
    CHECKSUM = "checksum"
    EXTRA = "extra"
    COMPRESSION_METHOD = "compression_method"
    TIME = "time"
    MANIFEST_ATTRIBUTES = "manifest_attributes"
    CERTIFICATES = "certificates"
    CODE_SIGNERS = "code_signers"
    CONTENT = "content"
    INCLUDE_DIRECTORIES = "include_directories"

    # Groups
    DEFAULT = "default"
    FILE_INFO = "file_info"
    FILE = "file"
    BASIC_INFO = "basic_info"
    COMPRESSION_INFO = "compression_info"
    FULL_INFO = "full_info"
    FULL = "full"

    @property
    def is_group(self) -> bool:
        """True if this member stands for several atomic infos."""
        return self in _GROUPS

    @property
    def comparable_infos(self) -> Tuple["ResourceInfo", ...]:
        """Atomic infos implied by this member.

        Atomic members return a tuple containing only themselves.
        """
        return _GROUPS.get(self, (self,))


_FULL_INFO = (
    ResourceInfo.NAME,
    ResourceInfo.PATH,
    ResourceInfo.SIZE,
    ResourceInfo.COMPRESSED_SIZE,
    ResourceInfo.COMMENT,
    ResourceInfo.CHECKSUM,
    ResourceInfo.EXTRA,
    ResourceInfo.COMPRESSION_METHOD,
    ResourceInfo.TIME,
    ResourceInfo.MANIFEST_ATTRIBUTES,
    ResourceInfo.CERTIFICATES,
    ResourceInfo.CODE_SIGNERS,
)

_GROUPS: Dict[ResourceInfo, Tuple[ResourceInfo, ...]] = {
    ResourceInfo.DEFAULT: (ResourceInfo.NAME,),
    ResourceInfo.FILE_INFO: (
        ResourceInfo.NAME,
        ResourceInfo.PATH,
        ResourceInfo.SIZE,
    ),
    ResourceInfo.FILE: (
        ResourceInfo.NAME,
        ResourceInfo.PATH,
        ResourceInfo.SIZE,
        ResourceInfo.CONTENT,
    ),
    ResourceInfo.BASIC_INFO: (
        ResourceInfo.NAME,
        ResourceInfo.SIZE,
        ResourceInfo.CHECKSUM,
        ResourceInfo.TIME,
    ),
    ResourceInfo.COMPRESSION_INFO: (
        ResourceInfo.NAME,
        ResourceInfo.SIZE,
        ResourceInfo.COMPRESSED_SIZE,
        ResourceInfo.CHECKSUM,
        ResourceInfo.COMPRESSION_METHOD,
    ),
    ResourceInfo.FULL_INFO: _FULL_INFO,
    ResourceInfo.FULL: _FULL_INFO
    + (ResourceInfo.CONTENT, ResourceInfo.INCLUDE_DIRECTORIES),
}

ATOMIC_INFOS: Tuple[ResourceInfo, ...] = tuple(
    info for info in ResourceInfo if info not in _GROUPS
)


def resolve_informations(
    *informations: Optional[ResourceInfo],
) -> Tuple[ResourceInfo, ...]:
    """Expand requested infos into the atomic infos they imply.

    Args:
        *informations: Atomic infos or groups, in any combination

    Returns:
        Ordered, de-duplicated tuple of atomic infos. Requesting nothing
        resolves to ``ResourceInfo.DEFAULT``.

    Examples:
        resolve_informations(ResourceInfo.BASIC_INFO, ResourceInfo.PATH)
        # (NAME, SIZE, CHECKSUM, TIME, PATH)
    """
    requested: Iterable[ResourceInfo] = [
        info for info in informations if info is not None
    ]
    if not requested:
        requested = [ResourceInfo.DEFAULT]

    resolved: Dict[ResourceInfo, None] = {}
    for info in requested:
        for atomic in ResourceInfo(info).comparable_infos:
            resolved.setdefault(atomic, None)
    return tuple(resolved)
