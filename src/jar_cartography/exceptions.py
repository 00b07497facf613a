"""Custom exceptions for jar cartography."""


class CartographyError(Exception):
    """Base exception for all cartography-related errors."""

    pass


class ValidationError(CartographyError, ValueError):
    """Raised when a cartography request is invalid."""

    pass


class ArchiveReadError(CartographyError):
    """Raised when unable to open or read an archive."""

    pass


class TruncatedContentError(ArchiveReadError):
    """Raised when an entry ends before its expected size is read."""

    def __init__(self, entry_name: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Entry {entry_name} ended after {actual} of {expected} bytes"
        )
        self.entry_name = entry_name
        self.expected = expected
        self.actual = actual


class ManifestError(CartographyError):
    """Raised when the archive manifest cannot be parsed."""

    pass


class ManifestNotFoundError(ManifestError):
    """Raised when a manifest is requested from an archive without one."""

    pass
