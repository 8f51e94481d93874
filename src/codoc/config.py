import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_DEBOUNCE_MS = 200


def get_log_level() -> str:
    return os.getenv("CODOC_LOG_LEVEL", _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL


def get_watch_debounce_ms() -> int:
    raw = os.getenv("CODOC_WATCH_DEBOUNCE_MS")
    if not raw:
        return _DEFAULT_DEBOUNCE_MS
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"CODOC_WATCH_DEBOUNCE_MS must be an integer, got {raw!r}") from None
    return max(value, 0)


def configure_logging(level: str | None = None) -> None:
    """Route ``codoc`` loggers through rich on stderr. Called once by the CLI."""
    resolved = (level or get_log_level()).upper()
    if resolved not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level '{resolved}'")
    logging.basicConfig(
        level=resolved,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
