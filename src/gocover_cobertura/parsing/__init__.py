"""Go source parsing and declaration extraction."""

from gocover_cobertura.parsing.go import GoExtractor, extract_declarations
from gocover_cobertura.parsing.treesitter import Declaration, get_parser, parse_code

__all__ = [
    "Declaration",
    "GoExtractor",
    "extract_declarations",
    "get_parser",
    "parse_code",
]
