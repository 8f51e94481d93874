from typing import Protocol


class OutlineWatcherPort(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...
