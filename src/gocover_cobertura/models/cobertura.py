"""Cobertura coverage tree: Coverage → Package → Class → Method → Line.

Every aggregating level computes its line rate strictly from its own lines.
Line rates are 0.0 (never NaN) for entities without lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Line:
    """Hit count for a single source line."""

    number: int
    hits: int

    @property
    def is_covered(self) -> bool:
        """Return True if this line was executed at least once."""
        return self.hits > 0


class Lines(list[Line]):
    """Ordered collection of ``Line`` objects, unique by line number.

    A line-number → index map backs ``add_or_update`` so repeated hits on the
    same line are folded into the existing entry instead of appended.
    """

    def __init__(self, lines: list[Line] | None = None) -> None:
        super().__init__()
        self._index: dict[int, int] = {}
        for line in lines or []:
            self.add_or_update(line.number, line.hits)

    def add_or_update(self, number: int, hits: int) -> None:
        """Add hits to line *number*, inserting the line if it is new."""
        idx = self._index.get(number)
        if idx is None:
            self._index[number] = len(self)
            self.append(Line(number=number, hits=hits))
            return
        self[idx].hits += hits

    def merge(self, other: list[Line]) -> None:
        """Fold every line of *other* into this collection (sum on conflict)."""
        for line in other:
            self.add_or_update(line.number, line.hits)

    def get(self, number: int) -> Line | None:
        idx = self._index.get(number)
        return None if idx is None else self[idx]

    @property
    def num_lines(self) -> int:
        return len(self)

    @property
    def num_lines_with_hits(self) -> int:
        return sum(1 for line in self if line.is_covered)

    @property
    def hit_rate(self) -> float:
        """Return covered / total lines, or 0.0 when there are no lines."""
        if not self:
            return 0.0
        return self.num_lines_with_hits / self.num_lines


@dataclass
class Method:
    """A Go function or method and the lines its body spans."""

    name: str
    signature: str = ""
    lines: Lines = field(default_factory=Lines)
    line_rate: float = 0.0

    def compute_line_rate(self) -> float:
        self.line_rate = self.lines.hit_rate
        return self.line_rate


@dataclass
class Class:
    """Group of methods sharing a receiver type (or a source file)."""

    name: str
    filename: str
    methods: list[Method] = field(default_factory=list)
    lines: Lines = field(default_factory=Lines)
    line_rate: float = 0.0

    def add_method(self, method: Method) -> None:
        """Attach *method* and merge its lines into the class line union."""
        self.methods.append(method)
        self.lines.merge(method.lines)

    def compute_line_rate(self) -> float:
        for method in self.methods:
            method.compute_line_rate()
        self.line_rate = self.lines.hit_rate
        return self.line_rate


@dataclass
class Package:
    """A Go package and the classes found in its profiled files."""

    name: str
    classes: list[Class] = field(default_factory=list)
    line_rate: float = 0.0
    _class_index: dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    def find_class(self, name: str) -> Class | None:
        idx = self._class_index.get(name)
        return None if idx is None else self.classes[idx]

    def get_or_create_class(self, name: str, filename: str) -> Class:
        """Return the class called *name*, creating it on first use.

        The first occurrence fixes the class filename and its position in
        the package.
        """
        existing = self.find_class(name)
        if existing is not None:
            return existing
        cls = Class(name=name, filename=filename)
        self._class_index[name] = len(self.classes)
        self.classes.append(cls)
        return cls

    @property
    def num_lines(self) -> int:
        return sum(cls.lines.num_lines for cls in self.classes)

    @property
    def num_lines_with_hits(self) -> int:
        return sum(cls.lines.num_lines_with_hits for cls in self.classes)

    @property
    def hit_rate(self) -> float:
        total = self.num_lines
        if total == 0:
            return 0.0
        return self.num_lines_with_hits / total

    def compute_line_rate(self) -> float:
        for cls in self.classes:
            cls.compute_line_rate()
        self.line_rate = self.hit_rate
        return self.line_rate


@dataclass
class Coverage:
    """Root of the coverage tree for one conversion run."""

    sources: list[str] = field(default_factory=list)
    packages: list[Package] = field(default_factory=list)
    lines_valid: int = 0
    lines_covered: int = 0
    line_rate: float = 0.0
    timestamp: int = 0
    """Capture time in milliseconds since the epoch."""
    version: str = ""
    _package_index: dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    def add_source(self, path: str) -> None:
        """Append *path* to the source roots unless it is already listed."""
        if path not in self.sources:
            self.sources.append(path)

    def find_package(self, name: str) -> Package | None:
        idx = self._package_index.get(name)
        return None if idx is None else self.packages[idx]

    def get_or_create_package(self, name: str) -> Package:
        existing = self.find_package(name)
        if existing is not None:
            return existing
        pkg = Package(name=name)
        self._package_index[name] = len(self.packages)
        self.packages.append(pkg)
        return pkg

    @property
    def num_lines(self) -> int:
        return sum(pkg.num_lines for pkg in self.packages)

    @property
    def num_lines_with_hits(self) -> int:
        return sum(pkg.num_lines_with_hits for pkg in self.packages)

    def compute_totals(self) -> None:
        """Roll up line rates bottom-up and fill the root totals."""
        for pkg in self.packages:
            pkg.compute_line_rate()
        self.lines_valid = self.num_lines
        self.lines_covered = self.num_lines_with_hits
        self.line_rate = self.lines_covered / self.lines_valid if self.lines_valid else 0.0
