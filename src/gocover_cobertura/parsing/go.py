"""Go declaration extractor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gocover_cobertura.errors import SourceParseError
from gocover_cobertura.parsing.treesitter import (
    Declaration,
    error_lines,
    node_text,
    parse_code,
)

if TYPE_CHECKING:
    import tree_sitter

logger = logging.getLogger(__name__)

_FUNC_NODE_TYPES = frozenset({"function_declaration", "method_declaration"})


class GoExtractor:
    """Extract function and method declarations, in source order, from Go code."""

    language = "go"

    def extract(self, source: bytes, path: str = "<source>") -> list[Declaration]:
        """Parse *source* and return its declarations.

        Raises:
            SourceParseError: If the source contains syntax errors.
        """
        root = parse_code(source, self.language).root_node
        if root.has_error:
            lines = error_lines(root)
            where = f" at line {lines[0]}" if lines else ""
            raise SourceParseError(f"{path}: syntax error{where}", path)

        decls = [
            self._parse_declaration(child)
            for child in root.children
            if child.type in _FUNC_NODE_TYPES
        ]
        logger.debug("Extracted %d declaration(s) from %s", len(decls), path)
        return decls

    def _parse_declaration(self, node: tree_sitter.Node) -> Declaration:
        receiver = None
        if node.type == "method_declaration":
            receiver = self._receiver_type(node.child_by_field_name("receiver"))
        return Declaration(
            name=node_text(node.child_by_field_name("name")),
            start_line=node.start_point.row + 1,
            start_col=node.start_point.column + 1,
            end_line=node.end_point.row + 1,
            end_col=node.end_point.column + 1,
            receiver=receiver,
        )

    def _receiver_type(self, params: tree_sitter.Node | None) -> str:
        if params is None:
            return ""
        for child in params.named_children:
            if child.type == "parameter_declaration":
                return node_text(child.child_by_field_name("type"))
        return ""


def extract_declarations(source: bytes, path: str = "<source>") -> list[Declaration]:
    """Parse Go *source* and return its function/method declarations."""
    return GoExtractor().extract(source, path)
