"""Class classifier: decide which report class a declaration belongs to."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gocover_cobertura.parsing.treesitter import Declaration

FREE_FUNCTION_CLASS = "-"


class ClassificationMode(Enum):
    """How methods are grouped into Cobertura classes."""

    BY_RECEIVER = "by-receiver"
    BY_FILE = "by-file"


def file_class_name(file_name: str) -> str:
    """Return a dotted class name for a module-relative file path.

    ``src/lib/util/foo.go`` becomes ``src.lib.util.foo.go``. Report viewers
    such as ReportGenerator need class names that are unique per file.
    """
    return file_name.replace("/", ".").replace("\\", ".")


def receiver_class_name(decl: Declaration) -> str:
    """Return the receiver type name of *decl*, or ``-`` for a free function."""
    if decl.receiver is None:
        return FREE_FUNCTION_CLASS
    return decl.receiver.lstrip("*").strip()


def class_name(decl: Declaration, file_name: str, mode: ClassificationMode) -> str:
    """Compute the class name for *decl* declared in *file_name*."""
    if mode is ClassificationMode.BY_FILE:
        return file_class_name(file_name)
    return receiver_class_name(decl)
