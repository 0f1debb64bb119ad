"""Tests for urlspine.humanize."""

from __future__ import annotations

from datetime import timedelta

import pytest

from urlspine.humanize import humanize, pluralize


class TestHumanize:
    """Tests for humanize() thresholds."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (45, "45 seconds"),
            (90, "1 minute"),
            (7200, "2 hours"),
            (90000, "1 day"),
            (0, "0 second"),
            (1, "1 second"),
            (59, "59 seconds"),
            (60, "1 minute"),
            (3599, "59 minutes"),
            (3600, "1 hour"),
            (86399, "23 hours"),
            (86400, "1 day"),
            (2 * 86400, "2 days"),
            (400 * 86400, "400 days"),
        ],
    )
    def test_thresholds(self, seconds: int, expected: str) -> None:
        assert humanize(timedelta(seconds=seconds)) == expected

    def test_truncates_fractions(self) -> None:
        """Values are truncated to whole units, never rounded up."""
        assert humanize(timedelta(seconds=119.9)) == "1 minute"
        assert humanize(timedelta(milliseconds=999)) == "0 second"

    def test_negative_is_zero(self) -> None:
        """Clock skew never produces a negative phrase."""
        assert humanize(timedelta(seconds=-30)) == "0 second"


class TestPluralize:
    """Tests for pluralize()."""

    def test_zero_is_singular(self) -> None:
        assert pluralize(0, "second") == "0 second"

    def test_one_is_singular(self) -> None:
        assert pluralize(1, "day") == "1 day"

    def test_two_is_plural(self) -> None:
        assert pluralize(2, "day") == "2 days"
