"""Coverage tree builder: assemble Package → Class → Method → Line.

One pass over the profile records: each record is resolved to its package,
filtered, parsed and matched before the next one is processed, so packages
and classes keep the order in which the profile lists them.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from gocover_cobertura import __version__
from gocover_cobertura.classify import ClassificationMode, class_name
from gocover_cobertura.errors import PackageResolutionError, SourceReadError
from gocover_cobertura.ignore import Ignore
from gocover_cobertura.matcher import blocks_sorted, match_blocks
from gocover_cobertura.models.cobertura import Coverage, Method
from gocover_cobertura.packages import package_name
from gocover_cobertura.parsing.go import GoExtractor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from gocover_cobertura.packages import GoPackage, PackageResolver
    from gocover_cobertura.parsing.treesitter import Declaration
    from gocover_cobertura.profile import Profile

logger = logging.getLogger(__name__)


class DeclarationExtractor(Protocol):
    def extract(self, source: bytes, path: str = ...) -> list[Declaration]: ...


def _read_source(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except PermissionError as e:
        raise SourceReadError(f"{path}: permission denied", path, permission_denied=True) from e
    except FileNotFoundError as e:
        raise SourceReadError(f"{path}: no such file", path) from e
    except OSError as e:
        raise SourceReadError(f"{path}: {e.strerror or e}", path) from e


def _relative_name(profile_file_name: str, module_path: str) -> str:
    prefix = module_path.rstrip("/") + "/"
    if profile_file_name.startswith(prefix):
        return profile_file_name[len(prefix) :]
    return profile_file_name


class CoverageBuilder:
    """Build a ``Coverage`` tree from parsed profiles.

    Args:
        resolver: Maps import-path directories to Go packages.
        ignore: Exclusion rules applied to each profiled file.
        mode: How declarations are grouped into classes.
        extractor: Parses Go sources into declarations.
    """

    def __init__(
        self,
        resolver: PackageResolver,
        ignore: Ignore | None = None,
        mode: ClassificationMode = ClassificationMode.BY_RECEIVER,
        extractor: DeclarationExtractor | None = None,
    ) -> None:
        self.resolver = resolver
        self.ignore = ignore or Ignore()
        self.mode = mode
        self.extractor = extractor or GoExtractor()

    def build(self, profiles: Sequence[Profile]) -> Coverage:
        """Return the coverage tree for *profiles*.

        Raises:
            PackageResolutionError: A profiled file has no known package/module.
            SourceReadError: A profiled source file cannot be read.
            SourceParseError: A profiled source file cannot be parsed.
        """
        coverage = Coverage(version=__version__)

        packages: dict[str, GoPackage] = {}
        if profiles:
            packages = self.resolver.resolve([package_name(p.file_name) for p in profiles])
        for pkg in packages.values():
            if pkg.module_dir:
                coverage.add_source(pkg.module_dir)

        for profile in profiles:
            self._add_profile(coverage, profile, packages)

        coverage.compute_totals()
        coverage.timestamp = time.time_ns() // 1_000_000
        logger.debug(
            "Built coverage for %d package(s): %d/%d lines covered",
            len(coverage.packages),
            coverage.lines_covered,
            coverage.lines_valid,
        )
        return coverage

    def _add_profile(
        self,
        coverage: Coverage,
        profile: Profile,
        packages: Mapping[str, GoPackage],
    ) -> None:
        pkg_name = package_name(profile.file_name)
        go_pkg = packages.get(pkg_name)
        if go_pkg is None or go_pkg.module_path is None:
            raise PackageResolutionError(
                f"{profile.file_name}: package {pkg_name!r} not found in any Go module"
            )

        file_name = _relative_name(profile.file_name, go_pkg.module_path)
        abs_path = go_pkg.find_file(profile.file_name)
        if abs_path is None:
            raise SourceReadError(
                f"{profile.file_name}: source file not found in package {go_pkg.id}",
                profile.file_name,
            )
        data = _read_source(abs_path)

        if self.ignore.match(file_name, data):
            logger.debug("Skipping ignored file %s", file_name)
            return

        declarations = self.extractor.extract(data, abs_path)
        pkg = coverage.get_or_create_package(go_pkg.id)
        presorted = blocks_sorted(profile.blocks)
        for decl in declarations:
            lines = match_blocks(decl, profile.blocks, presorted=presorted)
            method = Method(name=decl.name, lines=lines)
            cls = pkg.get_or_create_class(class_name(decl, file_name, self.mode), file_name)
            cls.add_method(method)
