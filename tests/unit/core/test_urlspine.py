"""Tests for urlspine.core.urlspine - the host-facing orchestrator."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from urlspine.core.config import get_settings
from urlspine.core.exceptions import StorageError
from urlspine.core.urlspine import UrlSpine
from urlspine.models.events import CommandEvent, MessageEvent, Notice, Source
from urlspine.notifier.memory import MemoryNotifier
from urlspine.storage.memory import MemoryHistoryStore
from urlspine.storage.sqlite import SQLiteHistoryStore

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)

# =============================================================================
# Test Fixtures
# =============================================================================


class FakeClock:
    def __init__(self) -> None:
        self.now = T0

    def __call__(self) -> datetime:
        return self.now


class FlakyNotifier(MemoryNotifier):
    """Fails the first send, delivers the rest."""

    def __init__(self) -> None:
        super().__init__()
        self.failed = False

    async def send(self, notice: Notice) -> bool:
        if not self.failed:
            self.failed = True
            raise ConnectionError("socket closed")
        return await super().send(notice)


def say(text: str, dst: str = "#python", raw: str = "alice!a@example.org") -> MessageEvent:
    return MessageEvent(source=Source.parse(raw), destination=dst, text=text, session=object())


def ask(argument: str = "", *, private: bool = True, name: str = "urls") -> CommandEvent:
    return CommandEvent(
        source=Source.parse("alice!a@example.org"),
        command=name,
        argument=argument,
        destination="alice" if private else "#python",
        is_private=private,
    )


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestUrlSpineLifecycle:
    """Tests for initialize/close."""

    async def test_context_manager(self, notifier: MemoryNotifier) -> None:
        store = MemoryHistoryStore()
        async with UrlSpine(notifier, store=store) as spine:
            assert spine.info()["initialized"] is True
            assert spine.store is store
        assert spine.info()["initialized"] is False

    async def test_builds_store_from_settings(self, notifier: MemoryNotifier, tmp_path: Path) -> None:
        settings = get_settings(database_path=tmp_path / "history.db")
        async with UrlSpine(notifier, settings=settings) as spine:
            assert isinstance(spine.store, SQLiteHistoryStore)
        assert (tmp_path / "history.db").exists()

    async def test_store_failure_is_fatal(self, notifier: MemoryNotifier, tmp_path: Path) -> None:
        """A store that cannot be opened aborts startup."""
        spine = UrlSpine(notifier, store=SQLiteHistoryStore(tmp_path))
        with pytest.raises(StorageError):
            await spine.initialize()

    async def test_close_ends_bus_subscriptions(self, notifier: MemoryNotifier) -> None:
        async with UrlSpine(notifier, store=MemoryHistoryStore()) as spine:
            sub = spine.bus.subscribe()
        assert sub.closed


# =============================================================================
# Message Handling
# =============================================================================


class TestUrlSpineMessages:
    """End-to-end duplicate detection."""

    async def test_duplicate_notice_end_to_end(self, notifier: MemoryNotifier, tmp_path: Path) -> None:
        clock = FakeClock()
        settings = get_settings(database_path=tmp_path / "history.db")
        async with UrlSpine(notifier, settings=settings, clock=clock) as spine:
            await spine.on_message(say("check https://example.com/a", raw="alice!a@example.org"))
            clock.now = T0 + timedelta(days=3, hours=4)
            await spine.on_message(say("https://example.com/a is neat", raw="bob!b@example.org"))

        assert notifier.notices == [
            Notice("#python", "URL 'https://example.com/a' was last seen 3 days ago by alice (1 total)")
        ]

    async def test_restart_keeps_history(self, tmp_path: Path) -> None:
        """State lives only in the store, so a restart still detects repeats."""
        settings = get_settings(database_path=tmp_path / "history.db")

        async with UrlSpine(MemoryNotifier(), settings=settings) as spine:
            await spine.on_message(say("http://a.io/"))

        notifier = MemoryNotifier()
        async with UrlSpine(notifier, settings=settings) as spine:
            await spine.on_message(say("http://a.io/"))

        assert len(notifier.notices) == 1

    async def test_url_observed_carries_session(self, notifier: MemoryNotifier) -> None:
        async with UrlSpine(notifier, store=MemoryHistoryStore()) as spine:
            sub = spine.bus.subscribe()
            message = say("http://a.io/")
            await spine.on_message(message)
            event = await sub.get()

        assert event is not None
        assert event.session is message.session
        assert event.url == "http://a.io/"


# =============================================================================
# Command Handling
# =============================================================================


class TestUrlSpineCommands:
    """Tests for on_command()."""

    async def test_lists_recent(self, notifier: MemoryNotifier) -> None:
        async with UrlSpine(notifier, store=MemoryHistoryStore(), clock=FakeClock()) as spine:
            await spine.on_message(say("http://a.io/ http://b.io/"))
            notices = await spine.on_command(ask())

        assert [n.text for n in notices] == [
            "05-01 12:00:00: #python: http://b.io/ by alice",
            "05-01 12:00:00: #python: http://a.io/ by alice",
            "(no more URLs)",
        ]
        assert notifier.notices == notices

    async def test_public_rejection(self, notifier: MemoryNotifier) -> None:
        async with UrlSpine(notifier, store=MemoryHistoryStore()) as spine:
            notices = await spine.on_command(ask(private=False))
        assert notices == [Notice("#python", "urls: URL querying must be done over private messages")]

    async def test_other_commands_ignored(self, notifier: MemoryNotifier) -> None:
        async with UrlSpine(notifier, store=MemoryHistoryStore()) as spine:
            assert await spine.on_command(ask(name="weather")) == []
        assert notifier.notices == []

    async def test_configured_command_name(self, notifier: MemoryNotifier) -> None:
        settings = get_settings(command_name="links", history_limit=2)
        async with UrlSpine(notifier, store=MemoryHistoryStore(), settings=settings) as spine:
            notices = await spine.on_command(ask("help", name="links"))
        assert [n.text for n in notices] == [
            "links: usage: !links",
            "links: Prints the last 2 URLs seen in all channels",
        ]

    async def test_failed_reply_send_is_contained(self, caplog: pytest.LogCaptureFixture) -> None:
        notifier = FlakyNotifier()
        async with UrlSpine(notifier, store=MemoryHistoryStore()) as spine:
            with caplog.at_level(logging.ERROR, logger="urlspine.core.urlspine"):
                notices = await spine.on_command(ask("help"))

        assert len(notices) == 2
        assert notifier.notices == notices[1:]
        assert "Failed to send reply to alice" in caplog.text
