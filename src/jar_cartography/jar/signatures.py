"""Signers of jar entries.

A signed jar holds, for each signer alias, a signature file
``META-INF/<ALIAS>.SF`` listing the signed entries in the manifest format
and a signature block ``META-INF/<ALIAS>.RSA`` (or ``.DSA``, ``.EC``) with the
PKCS#7 signature and its certificate chain. Signatures are read as declared,
never verified.
"""

import logging
import posixpath
import zipfile
from typing import Dict, List

from ..exceptions import ManifestError
from .manifest import parse_manifest
from .models import CodeSigner

logger = logging.getLogger(__name__)

SIGNATURE_FILE_SUFFIX = ".SF"
SIGNATURE_BLOCK_SUFFIXES = (".RSA", ".DSA", ".EC")


def _is_meta_inf_file(name: str) -> bool:
    return posixpath.dirname(name).upper() == "META-INF"


def find_signers(archive: zipfile.ZipFile) -> List[CodeSigner]:
    """All signers declared in the META-INF directory of a jar."""
    names = [name for name in archive.namelist() if _is_meta_inf_file(name)]
    blocks = {
        posixpath.splitext(name)[0].upper(): name
        for name in names
        if posixpath.splitext(name)[1].upper() in SIGNATURE_BLOCK_SUFFIXES
    }

    signers = []
    for name in names:
        stem, suffix = posixpath.splitext(name)
        if suffix.upper() != SIGNATURE_FILE_SUFFIX:
            continue
        block_file = blocks.get(stem.upper())
        signers.append(
            CodeSigner(
                alias=posixpath.basename(stem),
                signature_file=name,
                block_file=block_file,
                block=archive.read(block_file) if block_file else None,
            )
        )
    return signers


def read_signers(archive: zipfile.ZipFile) -> Dict[str, List[CodeSigner]]:
    """Map each signed entry name to the signers that signed it.

    Raises:
        ManifestError: If a signature file is malformed
    """
    signed: Dict[str, List[CodeSigner]] = {}
    for signer in find_signers(archive):
        try:
            signature_file = parse_manifest(archive.read(signer.signature_file))
        except ManifestError as e:
            raise ManifestError(
                f"Invalid signature file {signer.signature_file}: {e}"
            ) from e
        logger.debug(
            "Signer %s signs %d entries", signer.alias, len(signature_file.entries)
        )
        for entry_name in signature_file.entries:
            signed.setdefault(entry_name, []).append(signer)
    return signed
