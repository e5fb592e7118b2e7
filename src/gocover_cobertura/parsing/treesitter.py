"""Tree-sitter wrapper for parsing Go source files."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

import tree_sitter
import tree_sitter_language_pack as tslp

if TYPE_CHECKING:
    from tree_sitter_language_pack import SupportedLanguage

GO_LANGUAGE = "go"


@dataclass(frozen=True)
class Declaration:
    """A Go function or method with its source range.

    Lines are 1-based; columns are 1-based byte offsets within the line.
    The end position is exclusive (one past the closing brace), matching
    the positions recorded in cover profiles.
    """

    name: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    receiver: str | None = None
    """Source text of the receiver type, ``None`` for free functions."""

    @property
    def is_method(self) -> bool:
        return self.receiver is not None


@functools.cache
def get_parser(language: str = GO_LANGUAGE) -> tree_sitter.Parser:
    """Return the parser for *language*, built once per process."""
    return tslp.get_parser(cast("SupportedLanguage", language))


def parse_code(source: bytes, language: str = GO_LANGUAGE) -> tree_sitter.Tree:
    return get_parser(language).parse(source)


def error_lines(root: tree_sitter.Node) -> list[int]:
    """Return the 1-based start lines of ERROR and MISSING nodes, in tree order."""
    lines: list[int] = []
    pending = [root]
    while pending:
        node = pending.pop()
        if node.is_error or node.is_missing:
            lines.append(node.start_point.row + 1)
        elif node.has_error:
            pending.extend(reversed(node.children))
    return lines


def node_text(node: tree_sitter.Node | None) -> str:
    """Source text of *node* (``""`` for a missing node)."""
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8", errors="replace")
