"""Go package resolution via ``go list``.

Maps the import-path directories found in a cover profile to the package
id, module and absolute source files reported by the Go toolchain.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from gocover_cobertura.errors import PackageResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass
class GoPackage:
    """A Go package as reported by the toolchain."""

    id: str
    """Package identity (its import path)."""

    dir: str = ""
    """Absolute directory holding the package sources."""

    go_files: list[str] = field(default_factory=list)
    """Absolute paths of the package's Go source files."""

    module_path: str | None = None
    """Import path of the owning module, ``None`` outside module mode."""

    module_dir: str | None = None
    """Root directory of the owning module."""

    @property
    def has_module(self) -> bool:
        return self.module_path is not None

    def find_file(self, profile_file_name: str) -> str | None:
        """Return the absolute path of the source file named in the profile."""
        base = _base_name(profile_file_name)
        for full_path in self.go_files:
            if Path(full_path).name == base:
                return full_path
        return None


class PackageResolver(Protocol):
    """Resolves import paths to ``GoPackage`` descriptions."""

    def resolve(self, import_paths: list[str]) -> dict[str, GoPackage]: ...


def package_name(file_name: str) -> str:
    """Return the directory portion of a profile file name.

    ``github.com/acme/app/pkg/foo.go`` → ``github.com/acme/app/pkg``.
    """
    idx = max(file_name.rfind("/"), file_name.rfind("\\"))
    if idx < 0:
        return ""
    return file_name[:idx].rstrip("\\/")


def _base_name(file_name: str) -> str:
    idx = max(file_name.rfind("/"), file_name.rfind("\\"))
    return file_name[idx + 1 :]


def _go_executable() -> str:
    """Resolve the full path to the ``go`` executable."""
    return shutil.which("go") or "go"


def _iter_json_objects(text: str) -> Iterable[dict[str, Any]]:
    """Decode the concatenated JSON objects printed by ``go list -json``."""
    decoder = json.JSONDecoder()
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            return
        obj, pos = decoder.raw_decode(text, pos)
        if isinstance(obj, dict):
            yield obj


def package_from_go_list(data: dict[str, Any]) -> GoPackage:
    """Build a ``GoPackage`` from one ``go list -json`` object."""
    pkg_dir = str(data.get("Dir", ""))
    files = [*data.get("GoFiles", []), *data.get("CgoFiles", [])]
    module = data.get("Module")
    if not isinstance(module, dict):
        module = {}
    return GoPackage(
        id=str(data.get("ImportPath", "")),
        dir=pkg_dir,
        go_files=[str(Path(pkg_dir) / f) for f in files],
        module_path=module.get("Path"),
        module_dir=module.get("Dir"),
    )


class GoListResolver:
    """Resolve packages by running ``go list -e -json``.

    Args:
        work_dir: Directory to run ``go list`` in (the module root).
        build_tags: Comma-separated build tags passed through as ``-tags``.
    """

    def __init__(self, work_dir: Path | None = None, build_tags: str = "") -> None:
        self.work_dir = work_dir
        self.build_tags = build_tags

    def command(self, import_paths: list[str]) -> list[str]:
        cmd = [_go_executable(), "list", "-e", "-json"]
        if self.build_tags:
            cmd.append(f"-tags={self.build_tags}")
        return [*cmd, *import_paths]

    def resolve(self, import_paths: list[str]) -> dict[str, GoPackage]:
        """Return packages keyed by package id.

        Raises:
            PackageResolutionError: If ``go`` is missing or ``go list`` fails.
        """
        unique = list(dict.fromkeys(import_paths))
        if not unique:
            return {}
        cmd = self.command(unique)
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), self.work_dir or Path.cwd())
        try:
            result = subprocess.run(
                cmd,
                cwd=self.work_dir,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise PackageResolutionError("go executable not found in PATH") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise PackageResolutionError(f"go list failed: {stderr or e}") from e

        try:
            packages = [package_from_go_list(obj) for obj in _iter_json_objects(result.stdout)]
        except json.JSONDecodeError as e:
            raise PackageResolutionError(f"cannot decode go list output: {e}") from e

        resolved: dict[str, GoPackage] = {}
        for pkg in packages:
            resolved.setdefault(pkg.id, pkg)
        logger.debug("Resolved %d package(s)", len(resolved))
        return resolved
