from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import awatch

from codoc.config import get_watch_debounce_ms

logger = logging.getLogger(__name__)

OUTLINE_SUFFIX = ".codoc"


def _is_outline_file(path: Path) -> bool:
    return path.suffix == OUTLINE_SUFFIX


class WatchfilesOutlineWatcher:
    """Watch a directory (or a single outline file) and report changed outlines.

    Implements the ``OutlineWatcherPort`` protocol.
    """

    def __init__(
        self,
        target: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
        debounce_ms: int | None = None,
    ) -> None:
        self._target = Path(target)
        self._on_change = on_change
        self._debounce_ms = get_watch_debounce_ms() if debounce_ms is None else debounce_ms
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._target)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._target)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    def _accepts(self, path: Path) -> bool:
        if self._target.suffix:
            return path.name == self._target.name
        return _is_outline_file(path)

    async def _watch(self) -> None:
        async for changes in awatch(self._target, debounce=self._debounce_ms):
            paths = {Path(p) for _, p in changes if self._accepts(Path(p))}
            if paths:
                logger.info("Detected changes in %d outline(s)", len(paths))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Error in watcher callback")
