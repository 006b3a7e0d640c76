"""Tests for the major-version heuristic and update classification."""

from __future__ import annotations

import pytest

from depsonar.core.models import UpdateKind
from depsonar.core.versions import classify_update, is_major_update, major_token


class TestIsMajorUpdate:
    """Leading-numeric-token comparison after prefix stripping."""

    def test_prefixed_range_crossing_major(self) -> None:
        assert is_major_update("^1.2.3", "2.0.0") is True

    def test_go_style_same_major(self) -> None:
        assert is_major_update("v3.1", "v3.9") is False

    def test_non_numeric_current_never_major(self) -> None:
        assert is_major_update("latest", "5.0.0") is False

    def test_minor_bump_is_not_major(self) -> None:
        assert is_major_update("1.0.0", "1.5.0") is False

    def test_unknown_marker_never_major(self) -> None:
        assert is_major_update("?", "2.0.0") is False

    @pytest.mark.parametrize(
        ("current", "latest"),
        [("~4.1.0", "5.0.0"), (">=1.0", "2.1"), ("v1.9.9", "v2.0.0")],
    )
    def test_operator_prefixes_are_stripped(self, current: str, latest: str) -> None:
        assert is_major_update(current, latest) is True

    @pytest.mark.parametrize(
        ("current", "latest", "expected"),
        [
            ("2.3.1", "3.0.0", True),
            ("2.3.1", "2.9.0", False),
            ("^1.2.0", "^1.9.0", False),
            ("abc", "def", False),
        ],
    )
    def test_reference_cases(self, current: str, latest: str, expected: bool) -> None:
        assert is_major_update(current, latest) is expected


class TestMajorToken:

    def test_strips_leading_non_digits(self) -> None:
        assert major_token("^12.4.1") == "12"

    def test_empty_without_digits(self) -> None:
        assert major_token("next") == ""


class TestClassifyUpdate:
    """Major / minor / patch / unknown classification."""

    def test_major(self) -> None:
        assert classify_update("1.2.3", "2.0.0") is UpdateKind.MAJOR

    def test_minor(self) -> None:
        assert classify_update("^1.2.3", "1.4.0") is UpdateKind.MINOR

    def test_patch(self) -> None:
        assert classify_update("1.2.3", "1.2.9") is UpdateKind.PATCH

    def test_unknown_for_non_numeric(self) -> None:
        assert classify_update("latest", "1.0.0") is UpdateKind.UNKNOWN

    def test_short_versions_are_padded(self) -> None:
        assert classify_update("v3", "v3.1") is UpdateKind.MINOR
