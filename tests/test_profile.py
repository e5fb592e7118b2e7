"""Tests for the cover profile parser (profile.py)."""

from __future__ import annotations

import io

import pytest

from gocover_cobertura.errors import ProfileFormatError
from gocover_cobertura.profile import ProfileBlock, parse_profile_lines, parse_profiles

_PROFILE = """\
mode: count
example.com/pkg/b.go:10.1,12.3 3 0
example.com/pkg/a.go:5.2,7.4 2 1
example.com/pkg/b.go:1.1,3.2 2 2
"""


class TestModeLine:
    def test_empty_input_yields_no_profiles(self) -> None:
        assert parse_profiles("") == []

    def test_mode_only(self) -> None:
        assert parse_profiles("mode: set") == []

    def test_bad_mode_line(self) -> None:
        with pytest.raises(ProfileFormatError, match="bad mode line: invalid data"):
            parse_profiles("invalid data")

    def test_unknown_mode(self) -> None:
        with pytest.raises(ProfileFormatError, match="bad mode line"):
            parse_profiles("mode: sometimes\n")

    @pytest.mark.parametrize("mode", ["set", "count", "atomic"])
    def test_valid_modes(self, mode: str) -> None:
        profiles = parse_profiles(f"mode: {mode}\nexample.com/pkg/a.go:1.1,2.2 1 1\n")
        assert profiles[0].mode == mode


class TestBlockLines:
    def test_profiles_sorted_by_file_name(self) -> None:
        profiles = parse_profiles(_PROFILE)
        assert [p.file_name for p in profiles] == ["example.com/pkg/a.go", "example.com/pkg/b.go"]

    def test_blocks_sorted_by_position(self) -> None:
        b = parse_profiles(_PROFILE)[1]
        assert [blk.start_line for blk in b.blocks] == [1, 10]

    def test_block_fields(self) -> None:
        a = parse_profiles(_PROFILE)[0]
        assert a.blocks == [
            ProfileBlock(start_line=5, start_col=2, end_line=7, end_col=4, num_stmt=2, count=1)
        ]

    def test_blank_lines_are_skipped(self) -> None:
        lines = ["", "mode: set", "", "example.com/pkg/a.go:1.1,2.2 1 1", ""]
        profiles = parse_profile_lines(lines)
        assert len(profiles) == 1

    def test_windows_line_endings(self) -> None:
        profiles = parse_profiles("mode: set\r\nexample.com/pkg/a.go:1.1,2.2 1 1\r\n")
        assert profiles[0].blocks[0].count == 1

    def test_malformed_block_line(self) -> None:
        with pytest.raises(ProfileFormatError, match="doesn't match expected format"):
            parse_profiles("mode: set\nexample.com/pkg/a.go:1.1 2.2 1\n")

    def test_undecodable_bytes(self) -> None:
        raw = b"mode: set\nexample.com/m/\xff.go:1.1,2.2 1 1\n"
        stream = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8")
        with pytest.raises(ProfileFormatError, match="not valid UTF-8") as exc_info:
            parse_profile_lines(stream)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


class TestDuplicateBlocks:
    def test_set_mode_ors_counts(self) -> None:
        profiles = parse_profiles(
            "mode: set\n"
            "example.com/pkg/a.go:1.1,2.2 1 0\n"
            "example.com/pkg/a.go:1.1,2.2 1 1\n"
            "example.com/pkg/a.go:1.1,2.2 1 1\n"
        )
        assert len(profiles[0].blocks) == 1
        assert profiles[0].blocks[0].count == 1

    def test_count_mode_sums_counts(self) -> None:
        profiles = parse_profiles(
            "mode: count\n"
            "example.com/pkg/a.go:1.1,2.2 1 3\n"
            "example.com/pkg/a.go:4.1,5.2 1 1\n"
            "example.com/pkg/a.go:1.1,2.2 1 4\n"
        )
        assert [b.count for b in profiles[0].blocks] == [7, 1]

    def test_inconsistent_statement_count(self) -> None:
        with pytest.raises(ProfileFormatError, match="inconsistent NumStmt"):
            parse_profiles(
                "mode: count\n"
                "example.com/pkg/a.go:1.1,2.2 1 3\n"
                "example.com/pkg/a.go:1.1,2.2 2 4\n"
            )
