"""Utility functions for jar cartography."""

from .extract import extract_files, safe_relative_path
from .locate import get_archive_path

__all__ = ["extract_files", "get_archive_path", "safe_relative_path"]
