"""Tests for the watchfiles outline watcher adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from codoc.watcher.watchfiles_adapter import (
    WatchfilesOutlineWatcher,
    _is_outline_file,
)


class TestIsOutlineFile:
    def test_outline_file(self) -> None:
        assert _is_outline_file(Path("project.codoc")) is True

    def test_source_file(self) -> None:
        assert _is_outline_file(Path("main.ts")) is False

    def test_no_extension(self) -> None:
        assert _is_outline_file(Path("codoc")) is False


class TestWatchfilesOutlineWatcher:
    def test_implements_protocol(self) -> None:
        from codoc.core.ports.watcher import OutlineWatcherPort

        callback = AsyncMock()
        watcher: OutlineWatcherPort = WatchfilesOutlineWatcher("/tmp", callback, debounce_ms=10)
        assert hasattr(watcher, "start")
        assert hasattr(watcher, "stop")

    def test_debounce_defaults_to_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODOC_WATCH_DEBOUNCE_MS", "75")
        watcher = WatchfilesOutlineWatcher("/tmp", AsyncMock())
        assert watcher._debounce_ms == 75

    @pytest.mark.asyncio
    async def test_start_creates_task(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesOutlineWatcher("/tmp", callback, debounce_ms=10)

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            assert watcher._task is not None
            await watcher.stop()
            assert watcher._task is None

    @pytest.mark.asyncio
    async def test_passes_debounce_to_awatch(self) -> None:
        watcher = WatchfilesOutlineWatcher("/tmp", AsyncMock(), debounce_ms=123)

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            await asyncio.sleep(0.01)
            await watcher.stop()

        mock_awatch.assert_called_once_with(Path("/tmp"), debounce=123)

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self) -> None:
        watcher = WatchfilesOutlineWatcher("/tmp", AsyncMock(), debounce_ms=10)
        await watcher.stop()

    @pytest.mark.asyncio
    async def test_double_start_is_noop(self) -> None:
        watcher = WatchfilesOutlineWatcher("/tmp", AsyncMock(), debounce_ms=10)

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            task1 = watcher._task
            await watcher.start()
            assert watcher._task is task1
            await watcher.stop()

    @pytest.mark.asyncio
    async def test_callback_receives_outline_files(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesOutlineWatcher("/tmp", callback, debounce_ms=10)

        changes = {(1, "/tmp/app.codoc"), (2, "/tmp/main.ts"), (1, "/tmp/lib/api.codoc")}

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        callback.assert_called_once()
        paths = callback.call_args[0][0]
        assert paths == {Path("/tmp/app.codoc"), Path("/tmp/lib/api.codoc")}

    @pytest.mark.asyncio
    async def test_single_file_target_filters_by_name(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesOutlineWatcher("/tmp/app.codoc", callback, debounce_ms=10)

        changes = {(2, "/tmp/app.codoc"), (2, "/tmp/other.codoc")}

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        assert callback.call_args[0][0] == {Path("/tmp/app.codoc")}

    @pytest.mark.asyncio
    async def test_callback_not_called_for_other_files(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesOutlineWatcher("/tmp", callback, debounce_ms=10)

        changes = {(1, "/tmp/readme.md"), (2, "/tmp/Makefile")}

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_callback_error_keeps_watching(self) -> None:
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        watcher = WatchfilesOutlineWatcher("/tmp", callback, debounce_ms=10)

        with patch("codoc.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter({(1, "/tmp/app.codoc")})
            await watcher.start()
            await asyncio.sleep(0.05)
            task = watcher._task
            assert task is not None
            assert not task.done()
            await watcher.stop()

        callback.assert_called_once()


async def _empty_async_iter() -> AsyncIterator[Any]:
    """Async iterator that never yields, just blocks until cancelled."""
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
    yield  # pragma: no cover


async def _single_change_iter(changes: set[tuple[int, str]]) -> AsyncIterator[set[tuple[int, str]]]:
    """Async iterator that yields one set of changes then blocks."""
    yield changes
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
