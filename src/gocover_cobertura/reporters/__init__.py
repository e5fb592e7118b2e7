"""Report output: Cobertura XML and terminal summaries."""

from gocover_cobertura.reporters.cobertura_xml import (
    COBERTURA_DTD_DECL,
    XML_HEADER,
    build_xml,
    load_report,
    write_report,
)
from gocover_cobertura.reporters.terminal import CLIReporter, reporter

__all__ = [
    "COBERTURA_DTD_DECL",
    "XML_HEADER",
    "CLIReporter",
    "build_xml",
    "load_report",
    "reporter",
    "write_report",
]
