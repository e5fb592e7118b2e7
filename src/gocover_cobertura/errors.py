"""Exceptions raised while converting a coverage profile."""

from __future__ import annotations


class CoberturaError(Exception):
    """Base exception for all conversion errors."""


class ConfigError(CoberturaError):
    """Raised when the configuration is invalid (e.g. a bad ignore regexp)."""


class ProfileFormatError(CoberturaError):
    """Raised when the coverage profile text is malformed."""


class PackageResolutionError(CoberturaError):
    """Raised when a profiled file cannot be attributed to a Go package/module."""


class SourceReadError(CoberturaError):
    """Raised when a source file referenced by the profile cannot be read."""

    def __init__(self, message: str, path: str, *, permission_denied: bool = False) -> None:
        """Initialize with error message and the offending path.

        Args:
            message: Error description.
            path: Path of the source file that could not be read.
            permission_denied: True when the read failed on file permissions.
        """
        super().__init__(message)
        self.path = path
        self.permission_denied = permission_denied


class SourceParseError(CoberturaError):
    """Raised when a Go source file cannot be parsed."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class OutputWriteError(CoberturaError):
    """Raised when the report cannot be written to the output stream."""
