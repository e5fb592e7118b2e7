"""End-to-end conversion: profile text in, Cobertura XML out."""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING

from gocover_cobertura.builder import CoverageBuilder
from gocover_cobertura.config import ConverterConfig
from gocover_cobertura.packages import GoListResolver
from gocover_cobertura.profile import parse_profile_lines
from gocover_cobertura.reporters.cobertura_xml import write_report

if TYPE_CHECKING:
    from gocover_cobertura.models.cobertura import Coverage
    from gocover_cobertura.packages import PackageResolver

logger = logging.getLogger(__name__)


def convert(
    in_stream: IO[str],
    out_stream: IO[str],
    config: ConverterConfig | None = None,
    *,
    resolver: PackageResolver | None = None,
) -> Coverage:
    """Read a cover profile from *in_stream* and write Cobertura XML to *out_stream*.

    Args:
        in_stream: Text stream holding the ``go test -coverprofile`` output.
        out_stream: Text stream receiving the XML document.
        config: Converter configuration; defaults apply when ``None``.
        resolver: Package resolver; ``go list`` in the current directory
            with the configured build tags when ``None``.

    Returns:
        The coverage tree that was written.

    Raises:
        CoberturaError: Any configuration, profile, package, source or
            output error. Nothing is written before the tree is complete.
    """
    config = config or ConverterConfig()
    ignore = config.build_ignore()
    profiles = parse_profile_lines(in_stream)

    if config.tags:
        logger.info("Using build tags: %s", config.tags)
    builder = CoverageBuilder(
        resolver or GoListResolver(build_tags=config.tags),
        ignore=ignore,
        mode=config.mode,
    )
    coverage = builder.build(profiles)
    write_report(coverage, out_stream)
    return coverage
