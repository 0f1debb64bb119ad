"""Tests for urlspine.models.sighting and urlspine.models.events."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from urlspine.models.events import Source
from urlspine.models.sighting import PriorSighting, SightingEvent


class TestSightingEventCreation:
    """Tests for SightingEvent creation."""

    def test_create_minimal(self) -> None:
        event = SightingEvent(url="http://a.io/", src="alice!a@h", dst="#x")
        assert event.id is None
        assert event.nick is None
        assert event.timestamp.tzinfo is not None

    def test_naive_timestamp_is_utc(self) -> None:
        event = SightingEvent(url="http://a.io/", src="s", dst="#x", timestamp=datetime(2024, 1, 1))
        assert event.timestamp == datetime(2024, 1, 1, tzinfo=UTC)

    def test_aware_timestamp_kept(self) -> None:
        tz = timezone(timedelta(hours=2))
        event = SightingEvent(url="http://a.io/", src="s", dst="#x", timestamp=datetime(2024, 1, 1, tzinfo=tz))
        assert event.timestamp.utcoffset() == timedelta(hours=2)

    def test_with_id(self) -> None:
        event = SightingEvent(url="http://a.io/", src="s", dst="#x")
        stored = event.with_id(7)
        assert stored.id == 7
        assert event.id is None
        assert stored.url == event.url


class TestSightingEventValidation:
    """Tests for SightingEvent validation."""

    @pytest.mark.parametrize("field", ["url", "src", "dst"])
    def test_required_fields_non_empty(self, field: str) -> None:
        values = {"url": "http://a.io/", "src": "s", "dst": "#x", field: ""}
        with pytest.raises(ValidationError):
            SightingEvent(**values)

    def test_immutable(self) -> None:
        event = SightingEvent(url="http://a.io/", src="s", dst="#x")
        with pytest.raises(ValidationError):
            event.url = "http://b.io/"

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SightingEvent(url="http://a.io/", src="s", dst="#x", channel="#y")


class TestDisplayName:
    """nick when set, raw source otherwise."""

    def test_nick(self) -> None:
        assert SightingEvent(url="http://a.io/", nick="bob", src="bob!b@h", dst="#x").display_name == "bob"

    @pytest.mark.parametrize("nick", [None, ""])
    def test_fallback(self, nick: str | None) -> None:
        event = SightingEvent(url="http://a.io/", nick=nick, src="irc.example.net", dst="#x")
        assert event.display_name == "irc.example.net"


class TestPriorSighting:
    def test_none(self) -> None:
        prior = PriorSighting.none()
        assert not prior.seen_before
        assert prior.count == 0

    def test_seen_before(self) -> None:
        event = SightingEvent(url="http://a.io/", src="s", dst="#x")
        assert PriorSighting(event=event, count=1).seen_before


class TestSource:
    """Tests for Source.parse()."""

    def test_full_prefix(self) -> None:
        source = Source.parse("alice!~a@example.org")
        assert source.nick == "alice"
        assert source.raw == "alice!~a@example.org"

    def test_server_prefix(self) -> None:
        source = Source.parse("irc.example.net")
        assert source.nick is None
        assert source.raw == "irc.example.net"

    def test_empty_nick(self) -> None:
        assert Source.parse("!user@host").nick is None
