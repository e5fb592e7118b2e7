"""Data models for the Cobertura coverage tree."""

from gocover_cobertura.models.cobertura import Class, Coverage, Line, Lines, Method, Package

__all__ = [
    "Class",
    "Coverage",
    "Line",
    "Lines",
    "Method",
    "Package",
]
