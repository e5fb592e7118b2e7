"""Cobertura XML reporter: render a ``Coverage`` tree as ``coverage-04.dtd`` XML.

Produces XML consumable by CI systems (Jenkins, SonarQube, GitLab, Azure
DevOps, ReportGenerator, etc.).
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import IO, TYPE_CHECKING

from defusedxml import ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from gocover_cobertura.errors import CoberturaError, OutputWriteError
from gocover_cobertura.models.cobertura import Class, Coverage, Line, Lines, Method

if TYPE_CHECKING:
    from pathlib import Path
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
COBERTURA_DTD_DECL = (
    '<!DOCTYPE coverage SYSTEM "http://cobertura.sourceforge.net/xml/coverage-04.dtd">'
)


def format_rate(rate: float) -> str:
    """Format a rate in the shortest general form (``0``, ``0.25``, ``1``)."""
    return f"{rate:.8g}"


def write_report(coverage: Coverage, out: IO[str]) -> None:
    """Write *coverage* as a Cobertura XML document to the text stream *out*.

    Raises:
        OutputWriteError: If any part of the document cannot be written.
    """
    root = build_xml(coverage)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    _write(out, XML_HEADER, "XML header")
    _write(out, COBERTURA_DTD_DECL + "\n", "DTD declaration")
    _write(out, body, "coverage")
    _write(out, "\n", "XML footer")
    try:
        out.flush()
    except (OSError, ValueError) as e:
        raise OutputWriteError(f"flush output: {e}") from e


def _write(out: IO[str], text: str, what: str) -> None:
    try:
        out.write(text)
    except (OSError, ValueError) as e:
        raise OutputWriteError(f"write {what}: {e}") from e


def build_xml(coverage: Coverage) -> ET.Element:
    """Build the ``<coverage>`` element tree."""
    root = ET.Element("coverage")
    root.set("line-rate", format_rate(coverage.line_rate))
    root.set("branch-rate", "0")
    root.set("lines-covered", str(coverage.lines_covered))
    root.set("lines-valid", str(coverage.lines_valid))
    root.set("branches-covered", "0")
    root.set("branches-valid", "0")
    root.set("complexity", "0")
    root.set("version", coverage.version)
    root.set("timestamp", str(coverage.timestamp))

    sources = ET.SubElement(root, "sources")
    for path in coverage.sources:
        ET.SubElement(sources, "source").text = path

    packages = ET.SubElement(root, "packages")
    for pkg in coverage.packages:
        pkg_elem = ET.SubElement(packages, "package")
        pkg_elem.set("name", pkg.name)
        pkg_elem.set("line-rate", format_rate(pkg.line_rate))
        pkg_elem.set("branch-rate", "0")
        pkg_elem.set("complexity", "0")
        classes = ET.SubElement(pkg_elem, "classes")
        for cls in pkg.classes:
            _add_class(classes, cls)

    return root


def _add_class(parent: ET.Element, cls: Class) -> None:
    cls_elem = ET.SubElement(parent, "class")
    cls_elem.set("name", cls.name)
    cls_elem.set("filename", cls.filename)
    cls_elem.set("line-rate", format_rate(cls.line_rate))
    cls_elem.set("branch-rate", "0")
    cls_elem.set("complexity", "0")

    methods = ET.SubElement(cls_elem, "methods")
    for method in cls.methods:
        method_elem = ET.SubElement(methods, "method")
        method_elem.set("name", method.name)
        method_elem.set("signature", method.signature)
        method_elem.set("line-rate", format_rate(method.line_rate))
        method_elem.set("branch-rate", "0")
        method_elem.set("complexity", "0")
        _add_lines(method_elem, method.lines)

    _add_lines(cls_elem, cls.lines)


def _add_lines(parent: ET.Element, lines: Lines) -> None:
    lines_elem = ET.SubElement(parent, "lines")
    for line in lines:
        line_elem = ET.SubElement(lines_elem, "line")
        line_elem.set("number", str(line.number))
        line_elem.set("hits", str(line.hits))


# ── Reading reports back ─────────────────────────────────────────


def _float_attr(element: XmlElement, key: str) -> float:
    try:
        return float(element.get(key, "0"))
    except ValueError:
        return 0.0


def _int_attr(element: XmlElement, key: str) -> int:
    try:
        return int(element.get(key, "0"))
    except ValueError:
        return 0


def _read_lines(parent: XmlElement) -> Lines:
    return Lines(
        [
            Line(number=_int_attr(line, "number"), hits=_int_attr(line, "hits"))
            for line in parent.findall("lines/line")
        ]
    )


def load_report(source: str | Path | IO[str] | IO[bytes]) -> Coverage:
    """Parse a Cobertura XML document back into a ``Coverage`` tree.

    Args:
        source: File path or open file object holding the XML.

    Raises:
        CoberturaError: If the document is not well-formed Cobertura XML.
    """
    try:
        tree = ElementTree.parse(source)
    except DefusedParseError as e:
        raise CoberturaError(f"invalid Cobertura XML: {e}") from e
    root = tree.getroot()
    if root.tag != "coverage":
        raise CoberturaError(f"invalid Cobertura XML: unexpected root element <{root.tag}>")

    coverage = Coverage(
        lines_valid=_int_attr(root, "lines-valid"),
        lines_covered=_int_attr(root, "lines-covered"),
        line_rate=_float_attr(root, "line-rate"),
        timestamp=_int_attr(root, "timestamp"),
        version=root.get("version", ""),
    )
    for source_elem in root.findall("sources/source"):
        coverage.add_source(source_elem.text or "")

    for pkg_elem in root.findall("packages/package"):
        pkg = coverage.get_or_create_package(pkg_elem.get("name", ""))
        pkg.line_rate = _float_attr(pkg_elem, "line-rate")
        for cls_elem in pkg_elem.findall("classes/class"):
            cls = pkg.get_or_create_class(cls_elem.get("name", ""), cls_elem.get("filename", ""))
            cls.line_rate = _float_attr(cls_elem, "line-rate")
            for method_elem in cls_elem.findall("methods/method"):
                cls.methods.append(
                    Method(
                        name=method_elem.get("name", ""),
                        signature=method_elem.get("signature", ""),
                        lines=_read_lines(method_elem),
                        line_rate=_float_attr(method_elem, "line-rate"),
                    )
                )
            cls.lines = _read_lines(cls_elem)

    logger.debug("Loaded Cobertura report with %d package(s)", len(coverage.packages))
    return coverage
