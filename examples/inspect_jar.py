"""Demonstration of jar cartographies and file extraction."""

import asyncio
import logging
import sys
import tempfile
import zipfile
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, "src")

from jar_cartography import (
    CartographyError,
    ResourceInfo,
    extract_files,
    get_jar_cartography,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_demo_jar(directory: Path) -> Path:
    """Create a small jar with a manifest."""
    jar_path = directory / "demo.jar"
    with zipfile.ZipFile(jar_path, "w", compression=zipfile.ZIP_DEFLATED) as jar:
        jar.writestr(
            "META-INF/MANIFEST.MF",
            "Manifest-Version: 1.0\r\nMain-Class: com.example.Main\r\n\r\n",
        )
        jar.writestr("com/example/", b"")
        jar.writestr("com/example/Main.class", b"\xca\xfe\xba\xbe" + b"\x00" * 60)
        jar.writestr("config/app.properties", "greeting=hello\n")
    return jar_path


async def main():
    """Map a jar, then extract some of its files."""
    with tempfile.TemporaryDirectory() as workdir:
        jar_path = create_demo_jar(Path(workdir))

        try:
            cartography = get_jar_cartography(
                str(jar_path), ResourceInfo.COMPRESSION_INFO, with_manifest=True
            )
            logger.info(
                "Main-Class: %s", cartography.manifest_main_attributes["Main-Class"]
            )
            for path, resource in sorted(cartography.resources.items()):
                logger.info(
                    "%s: %d bytes (%d compressed), crc %08x",
                    path,
                    resource.size,
                    resource.compressed_size,
                    resource.checksum,
                )

            output = Path(workdir) / "out"
            extracted = await extract_files(
                str(jar_path), output, r".*\.properties", respect_file_tree=True
            )
            logger.info("Extracted properties: %s", extracted)
            for file in sorted(output.rglob("*.properties")):
                logger.info("  %s: %r", file.relative_to(output), file.read_text())

        except CartographyError as e:
            logger.error(f"Cartography error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
