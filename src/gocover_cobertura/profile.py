"""Go cover profile parser.

Parses the standard Go cover profile format::

    mode: set
    file:startLine.startCol,endLine.endCol numStmts count

into one ``Profile`` per source file, with blocks sorted by position and
duplicate blocks (same position, e.g. from several test binaries) merged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gocover_cobertura.errors import ProfileFormatError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_MODE_PREFIX = "mode: "
VALID_MODES = frozenset({"set", "count", "atomic"})

# Cover profile: "file:startLine.startCol,endLine.endCol numStmts count"
_COVER_LINE_REGEX = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


@dataclass
class ProfileBlock:
    """One instrumented source range with its statement and hit counts."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def position(self) -> tuple[int, int, int, int]:
        return (self.start_line, self.start_col, self.end_line, self.end_col)


@dataclass
class Profile:
    """Coverage blocks recorded for a single source file."""

    file_name: str
    mode: str
    blocks: list[ProfileBlock] = field(default_factory=list)


def parse_profiles(text: str) -> list[Profile]:
    """Parse cover profile text into per-file profiles.

    Args:
        text: Full contents of a ``go test -coverprofile`` output.

    Returns:
        Profiles sorted by file name. Empty input yields an empty list.

    Raises:
        ProfileFormatError: On a bad mode line, an unparsable block line, or
            conflicting statement counts for the same block.
    """
    return parse_profile_lines(text.splitlines())


def parse_profile_lines(lines: Iterable[str]) -> list[Profile]:
    """Parse an iterable of profile lines (see ``parse_profiles``)."""
    files: dict[str, Profile] = {}
    mode = ""

    try:
        for raw_line in lines:
            line = raw_line.rstrip("\r\n")
            if not line.strip():
                continue
            if not mode:
                mode = _parse_mode(line)
                continue
            file_name, block = _parse_block_line(line)
            profile = files.get(file_name)
            if profile is None:
                profile = Profile(file_name=file_name, mode=mode)
                files[file_name] = profile
            profile.blocks.append(block)
    except UnicodeDecodeError as e:
        # Text streams decode lazily, so bad bytes surface while iterating.
        raise ProfileFormatError(f"profile is not valid UTF-8: {e}") from e

    for profile in files.values():
        profile.blocks = _merge_blocks(profile)

    logger.debug("Parsed %d profile(s) in mode %r", len(files), mode)
    return [files[name] for name in sorted(files)]


def _parse_mode(line: str) -> str:
    if not line.startswith(_MODE_PREFIX):
        raise ProfileFormatError(f"bad mode line: {line}")
    mode = line[len(_MODE_PREFIX) :].strip()
    if mode not in VALID_MODES:
        raise ProfileFormatError(f"bad mode line: {line}")
    return mode


def _parse_block_line(line: str) -> tuple[str, ProfileBlock]:
    match = _COVER_LINE_REGEX.match(line)
    if not match:
        raise ProfileFormatError(f"line {line!r} doesn't match expected format")
    file_name, *numbers = match.groups()
    start_line, start_col, end_line, end_col, num_stmt, count = (int(n) for n in numbers)
    return file_name, ProfileBlock(
        start_line=start_line,
        start_col=start_col,
        end_line=end_line,
        end_col=end_col,
        num_stmt=num_stmt,
        count=count,
    )


def _merge_blocks(profile: Profile) -> list[ProfileBlock]:
    """Sort blocks by start position and fold repeated samples of one block."""
    ordered = sorted(profile.blocks, key=lambda b: b.position)
    merged: list[ProfileBlock] = []
    for block in ordered:
        last = merged[-1] if merged else None
        if last is None or last.position != block.position:
            merged.append(block)
            continue
        if last.num_stmt != block.num_stmt:
            raise ProfileFormatError(
                f"inconsistent NumStmt: changed from {last.num_stmt} to {block.num_stmt} "
                f"in {profile.file_name}"
            )
        if profile.mode == "set":
            last.count |= block.count
        else:
            last.count += block.count
    return merged
