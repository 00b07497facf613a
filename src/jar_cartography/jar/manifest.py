"""Jar manifest reading."""

import logging
import re
import zipfile
from typing import Dict, List, Optional

from ..exceptions import ManifestError, ManifestNotFoundError
from ..models import MANIFEST_MAIN_ATTRIBUTES, Cartography
from .models import Manifest

logger = logging.getLogger(__name__)

MANIFEST_NAME = "META-INF/MANIFEST.MF"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _unfold(text: str) -> List[List[str]]:
    """Split manifest text into sections of logical header lines."""
    sections: List[List[str]] = []
    current: List[str] = []
    for line in _LINE_BREAK.split(text):
        if not line:
            if current:
                sections.append(current)
                current = []
            continue
        if line.startswith(" "):
            # Continuation of a line wrapped at 72 bytes
            if not current:
                raise ManifestError(f"Continuation line without header: {line!r}")
            current[-1] += line[1:]
            continue
        current.append(line)
    if current:
        sections.append(current)
    return sections


def _parse_section(lines: List[str]) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition(": ")
        if not sep:
            # "Key:" with an empty value
            if line.endswith(":"):
                key, value = line[:-1], ""
            else:
                raise ManifestError(f"Invalid manifest header: {line!r}")
        if not key or "\x00" in key or "\x00" in value:
            raise ManifestError(f"Invalid manifest header: {line!r}")
        attributes[key] = value
    return attributes


def _pop_name(attributes: Dict[str, str]) -> Optional[str]:
    # Header names are case-insensitive
    for key in list(attributes):
        if key.lower() == "name":
            return attributes.pop(key)
    return None


def parse_manifest(data: bytes) -> Manifest:
    """Parse a manifest (or signature file) in the jar manifest format.

    Args:
        data: Raw manifest bytes

    Returns:
        Manifest with its main attributes and its per-entry sections

    Raises:
        ManifestError: If the manifest is not valid UTF-8 or has a malformed header
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestError(f"Cannot decode manifest: {e}") from e

    sections = _unfold(text.lstrip("\ufeff"))
    manifest = Manifest()
    if not sections:
        return manifest

    first = sections[0]
    if first[0].lower().startswith("name:"):
        # No main section at all
        sections.insert(0, [])
    else:
        manifest.main_attributes = _parse_section(first)

    for lines in sections[1:]:
        attributes = _parse_section(lines)
        name = _pop_name(attributes)
        if not name:
            raise ManifestError(f"Manifest section without name: {lines!r}")
        # Repeated sections are merged
        manifest.entries.setdefault(name, {}).update(attributes)
    return manifest


def find_manifest_name(archive: zipfile.ZipFile) -> Optional[str]:
    """Entry name of the manifest, whatever its case."""
    for name in archive.namelist():
        if name.upper() == MANIFEST_NAME:
            return name
    return None


def read_manifest(archive: zipfile.ZipFile) -> Optional[Manifest]:
    """Read the manifest of an open jar.

    Returns:
        The parsed manifest, or None if the jar has none
    """
    name = find_manifest_name(archive)
    if name is None:
        return None
    logger.debug("Reading manifest %s from %s", name, archive.filename)
    return parse_manifest(archive.read(name))


def extract_manifest(cartography: Cartography, archive: zipfile.ZipFile) -> None:
    """Fill the manifest attributes of a cartography.

    Does nothing unless the cartography asked for the manifest.

    Raises:
        ManifestNotFoundError: If the jar has no manifest
        ManifestError: If the manifest is malformed
    """
    if not cartography.with_manifest:
        return

    manifest = read_manifest(archive)
    if manifest is None:
        raise ManifestNotFoundError(f"No {MANIFEST_NAME} in {cartography.filename}")

    cartography.set_manifest(manifest)
    cartography.add_attributes(
        MANIFEST_MAIN_ATTRIBUTES,
        {str(key): str(value) for key, value in manifest.main_attributes.items()},
    )
    for entry, attributes in manifest.entries.items():
        cartography.add_attributes(
            entry, {str(key): str(value) for key, value in attributes.items()}
        )
