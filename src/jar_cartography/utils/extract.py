"""Extraction of jar resources to the filesystem."""

import asyncio
import functools
import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import aiofiles

from ..cartographer import get_jar_cartography
from ..exceptions import ValidationError
from ..info import ResourceInfo

logger = logging.getLogger(__name__)


def safe_relative_path(entry_name: str) -> Path:
    """Turn an entry name into a relative path that stays in its directory.

    Raises:
        ValidationError: If the name is absolute or climbs with ``..``
    """
    posix = PurePosixPath(entry_name.replace("\\", "/"))
    if posix.is_absolute():
        raise ValidationError(f"Absolute entry path not allowed: {entry_name}")

    parts = [part for part in posix.parts if part not in ("", ".")]
    if ".." in parts:
        raise ValidationError(f"Path traversal not allowed: {entry_name}")
    if not parts:
        raise ValidationError(f"Invalid entry path: {entry_name!r}")
    return Path(*parts)


async def extract_files(
    filename: str,
    output_directory: Union[str, Path],
    resource_filter_pattern: Optional[str] = None,
    overwrite_if_exists: bool = False,
    respect_file_tree: bool = False,
) -> bool:
    """jar 파일의 리소스를 파일 시스템에 추출합니다.

    Args:
        filename: Path of the jar on the filesystem
        output_directory: Directory receiving the files (created if needed)
        resource_filter_pattern: Regular expression matched against the whole
            entry name (every file by default)
        overwrite_if_exists: Replace files that already exist
        respect_file_tree: Keep the directories of the jar instead of
            writing every file directly in ``output_directory``

    Returns:
        bool: True if at least one file matched the pattern

    Raises:
        ValidationError: If an entry path would escape ``output_directory``
        ArchiveReadError: If the jar cannot be read
        OSError: If a file cannot be written

    Examples:
        # Every properties file, directories kept
        await extract_files(
            "app.jar", "out", r".*\\.properties", respect_file_tree=True
        )
    """
    loop = asyncio.get_event_loop()
    cartography = await loop.run_in_executor(
        None,
        functools.partial(
            get_jar_cartography,
            filename,
            ResourceInfo.FILE,
            resource_filter_pattern=resource_filter_pattern,
        ),
    )

    output_root = Path(output_directory)
    extracted_some_files = False
    for resource in cartography.resources.values():
        output_name = resource.path if respect_file_tree else resource.name
        output = output_root / safe_relative_path(output_name)
        if overwrite_if_exists or not output.exists():
            output.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(output, "wb") as handle:
                await handle.write(resource.content or b"")
            logger.debug("Extracted %s to %s", resource.path, output)
        extracted_some_files = True

    return extracted_some_files
