"""Ignore filter: decide whether a profiled source file is left out of the report."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from gocover_cobertura.errors import ConfigError

logger = logging.getLogger(__name__)

# Marker written by Go code generators (https://go.dev/s/generatedcode).
GENERATED_CODE_REGEX = re.compile(rb"^// Code generated .* DO NOT EDIT\.$", re.MULTILINE)

_PATH_SEPARATORS = re.compile(r"[/\\]")


def compile_pattern(pattern: str | None, option: str) -> re.Pattern[str] | None:
    """Compile an optional ignore pattern.

    Raises:
        ConfigError: If *pattern* is not a valid regular expression.
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"bad {option} regexp {pattern!r}: {e}") from e


@dataclass(frozen=True)
class Ignore:
    """Immutable set of exclusion rules."""

    dirs: re.Pattern[str] | None = None
    files: re.Pattern[str] | None = None
    generated_files: bool = False

    @classmethod
    def from_patterns(
        cls,
        *,
        dirs: str | None = None,
        files: str | None = None,
        generated_files: bool = False,
    ) -> Ignore:
        """Build an ``Ignore`` from regexp strings, failing fast on bad patterns."""
        return cls(
            dirs=compile_pattern(dirs, "ignore-dirs"),
            files=compile_pattern(files, "ignore-files"),
            generated_files=generated_files,
        )

    def match(self, file_name: str, data: bytes) -> bool:
        """Return True if *file_name* (module-relative) must be excluded.

        Args:
            file_name: Module-relative path of the source file.
            data: Raw contents of the source file.
        """
        if self.generated_files and GENERATED_CODE_REGEX.search(data):
            logger.debug("Ignoring generated file %s", file_name)
            return True

        if self.dirs is not None:
            for part in _PATH_SEPARATORS.split(file_name)[:-1]:
                if part in ("", "."):
                    continue
                if self.dirs.search(part):
                    logger.debug("Ignoring %s (directory %r matches)", file_name, part)
                    return True

        if self.files is not None and self.files.search(file_name):
            logger.debug("Ignoring %s (file pattern matches)", file_name)
            return True

        return False
