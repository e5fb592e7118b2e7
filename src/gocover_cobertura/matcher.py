"""Block matcher: intersect profile blocks with one declaration's range."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gocover_cobertura.models.cobertura import Lines

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gocover_cobertura.parsing.treesitter import Declaration
    from gocover_cobertura.profile import ProfileBlock


def _ends_before(block: ProfileBlock, decl: Declaration) -> bool:
    return block.end_line < decl.start_line or (
        block.end_line == decl.start_line and block.end_col <= decl.start_col
    )


def _starts_after(block: ProfileBlock, decl: Declaration) -> bool:
    return block.start_line > decl.end_line or (
        block.start_line == decl.end_line and block.start_col >= decl.end_col
    )


def blocks_sorted(blocks: Sequence[ProfileBlock]) -> bool:
    """Whether *blocks* are ordered by start position."""
    return all(
        (a.start_line, a.start_col) <= (b.start_line, b.start_col)
        for a, b in zip(blocks, blocks[1:], strict=False)
    )


def match_blocks(
    decl: Declaration,
    blocks: Sequence[ProfileBlock],
    *,
    presorted: bool | None = None,
) -> Lines:
    """Return the per-line hit counts of the blocks overlapping *decl*.

    Every line from a block's start line to its end line (inclusive) gets
    the block's count added to it. When *blocks* are sorted by start
    position the scan stops at the first block past the declaration.
    Callers matching many declarations against the same blocks pass
    *presorted* to skip the ordering check.
    """
    lines = Lines()
    sorted_blocks = blocks_sorted(blocks) if presorted is None else presorted
    for block in blocks:
        if _starts_after(block, decl):
            if sorted_blocks:
                break
            continue
        if _ends_before(block, decl):
            continue
        for number in range(block.start_line, block.end_line + 1):
            lines.add_or_update(number, block.count)
    if not sorted_blocks:
        return Lines(sorted(lines, key=lambda line: line.number))
    return lines
