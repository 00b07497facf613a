"""Test configuration and fixtures."""

import zipfile

import pytest

from tests.helpers import (
    MANIFEST,
    SIGNATURE_BLOCK,
    SIGNATURE_FILE,
    create_test_jar,
)


@pytest.fixture
def sample_jar(tmp_path):
    """Jar with a file, a directory and a file in that directory."""
    return create_test_jar(
        tmp_path / "sample.jar",
        {
            "a.txt": b"hello a",
            "dir/": None,
            "dir/b.txt": b"hello b" * 100,
        },
    )


@pytest.fixture
def manifest_jar(tmp_path):
    """Jar with a manifest holding a main attribute and an entry section."""
    return create_test_jar(
        tmp_path / "manifest.jar",
        {"a.txt": b"hello a", "dir/": None, "dir/b.txt": b"hello b"},
        manifest=MANIFEST,
    )


@pytest.fixture
def signed_jar(tmp_path):
    """Jar whose a.txt entry is signed by SIGNER."""
    path = create_test_jar(
        tmp_path / "signed.jar",
        {"a.txt": b"hello a", "b.txt": b"hello b"},
        manifest=MANIFEST,
    )
    with zipfile.ZipFile(path, "a") as jar:
        jar.writestr("META-INF/SIGNER.SF", SIGNATURE_FILE)
        jar.writestr("META-INF/SIGNER.RSA", SIGNATURE_BLOCK)
    return path


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
