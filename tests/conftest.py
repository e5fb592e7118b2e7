"""Shared fixtures: a small Go module on disk and an in-memory package resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gocover_cobertura.packages import GoPackage

MODULE_PATH = "github.com/acme/cov"
PACKAGE_ID = f"{MODULE_PATH}/testdata"

# ── Go sources ───────────────────────────────────────────────────

FUNC1_GO = """\
package testdata

import "fmt"

func Func1() {
	fmt.Println("one")
	fmt.Println("two")
}
"""

FUNC2_GO = """\
package testdata

type Type1 struct{ n int }

func (t *Type1) Func2() int {
	return t.n
}

func (t Type1) Func3() int {
	return t.n * 2
}

func (t *Type1) Func4(v int) {
	t.n = v
}
"""

FUNC3_GO = """\
// Code generated by mockgen. DO NOT EDIT.

package testdata

func Generated() int {
	return 42
}
"""

FUNC4_GO = """\
package testdata

func Func5() int {
	return 5
}
"""

# Block lines are relative to the module path prefix.
PROFILE_SET = f"""\
mode: set
{MODULE_PATH}/testdata/func1.go:5.14,5.15 1 1
{MODULE_PATH}/testdata/func1.go:6.2,8.2 2 0
{MODULE_PATH}/testdata/func2.go:5.29,7.2 1 1
{MODULE_PATH}/testdata/func2.go:9.28,11.2 1 0
{MODULE_PATH}/testdata/func2.go:13.30,15.2 1 1
{MODULE_PATH}/testdata/func3.go:5.22,7.2 1 1
{MODULE_PATH}/testdata/func4.go:3.20,5.2 1 1
"""


def write_file(root: Path, rel: str, content: str) -> Path:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


@dataclass
class StaticResolver:
    """Package resolver backed by a fixed mapping, recording every call."""

    packages: dict[str, GoPackage]
    calls: list[list[str]] = field(default_factory=list)

    def resolve(self, import_paths: list[str]) -> dict[str, GoPackage]:
        self.calls.append(list(import_paths))
        return {p: self.packages[p] for p in dict.fromkeys(import_paths) if p in self.packages}


@dataclass
class GoModule:
    """A Go module written to a temporary directory."""

    root: Path
    resolver: StaticResolver
    profile: str = PROFILE_SET


@pytest.fixture
def go_module(tmp_path: Path) -> GoModule:
    """A module with one package holding free functions, methods and generated code."""
    files = {
        "testdata/func1.go": FUNC1_GO,
        "testdata/func2.go": FUNC2_GO,
        "testdata/func3.go": FUNC3_GO,
        "testdata/func4.go": FUNC4_GO,
    }
    for rel, content in files.items():
        write_file(tmp_path, rel, content)
    write_file(tmp_path, "go.mod", f"module {MODULE_PATH}\n")

    pkg = GoPackage(
        id=PACKAGE_ID,
        dir=str(tmp_path / "testdata"),
        go_files=[str(tmp_path / rel) for rel in files],
        module_path=MODULE_PATH,
        module_dir=str(tmp_path),
    )
    return GoModule(root=tmp_path, resolver=StaticResolver({PACKAGE_ID: pkg}))


TWO_PACKAGE_MODULE = "m.io/x"

A_GO = """\
package a

func A() int {
	return 1
}
"""

B_GO = """\
package b

func B(n int) int {
	if n > 0 {
		return n
	}
	return 0
}
"""

PROFILE_TWO_PACKAGES = f"""\
mode: set
{TWO_PACKAGE_MODULE}/b/b.go:3.19,4.11 1 1
{TWO_PACKAGE_MODULE}/b/b.go:4.11,6.3 1 0
{TWO_PACKAGE_MODULE}/b/b.go:7.2,7.10 1 1
{TWO_PACKAGE_MODULE}/a/a.go:3.14,5.2 1 1
"""


@pytest.fixture
def two_package_module(tmp_path: Path) -> GoModule:
    """A module with packages ``a`` (fully covered) and ``b`` (partly covered)."""
    packages = {}
    for name, content in (("a", A_GO), ("b", B_GO)):
        path = write_file(tmp_path, f"{name}/{name}.go", content)
        pkg_id = f"{TWO_PACKAGE_MODULE}/{name}"
        packages[pkg_id] = GoPackage(
            id=pkg_id,
            dir=str(path.parent),
            go_files=[str(path)],
            module_path=TWO_PACKAGE_MODULE,
            module_dir=str(tmp_path),
        )
    write_file(tmp_path, "go.mod", f"module {TWO_PACKAGE_MODULE}\n")
    return GoModule(
        root=tmp_path,
        resolver=StaticResolver(packages),
        profile=PROFILE_TWO_PACKAGES,
    )
