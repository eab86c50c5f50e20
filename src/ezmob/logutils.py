"""
Import activity log for EZMob.

All output goes through the ``ezmob`` logger. ``ImportLog`` adds the
importer's presentation rules on top of it: nested sections are
indented, INFO chatter only appears in verbose mode, and debug traces
only in debug mode. One ``ImportLog`` is built per import run from the
current ``ImporterConfig`` so nothing here is process-global.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import ImporterConfig

logger = logging.getLogger("ezmob")


class Status(str, Enum):
    """Severity of an import log message."""
    INFO = "info"
    IMPL = "impl"
    GOOD = "good"
    WARN = "warn"
    ERROR = "error"

    @property
    def level(self) -> int:
        """The ``logging`` level used when emitting this status."""
        if self is Status.WARN:
            return logging.WARNING
        if self is Status.ERROR:
            return logging.ERROR
        return logging.INFO


@dataclass
class LogEntry:
    """A message that was written to the import log."""
    message: str
    status: Status
    depth: int


LogSink = Callable[[str, Status], None]


@dataclass
class ImportLog:
    """Indented, flag-aware activity log for a single import run.

    Attributes:
        debug_mode: Emit ``debug()`` traces.
        verbose: Emit INFO messages (other statuses are always emitted).
        sink: Optional callable receiving every emitted, indented message,
            typically the host's own log window.
        depth: Current indentation depth.
        entries: Every emitted message, in order.
    """
    debug_mode: bool = False
    verbose: bool = False
    sink: LogSink | None = None
    depth: int = 0
    entries: list[LogEntry] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: "ImporterConfig", sink: LogSink | None = None) -> "ImportLog":
        return cls(debug_mode=config.debug, verbose=config.verbose, sink=sink)

    def write(self, message: str, status: Status = Status.INFO, indent: int = 0) -> None:
        """Write a message to the log.

        A negative *indent* is applied before the message, a positive one
        after it, so a section's opening and closing lines line up.
        """
        if indent < 0:
            self.depth = max(0, self.depth + indent)

        if self.verbose or status is not Status.INFO:
            text = f"{'  ' * self.depth}{message}"
            self.entries.append(LogEntry(message=message, status=status, depth=self.depth))
            logger.log(status.level, text)
            if self.sink is not None:
                self.sink(text, status)

        if indent > 0:
            self.depth += indent

    def info(self, message: str) -> None:
        self.write(message, Status.INFO)

    def impl(self, message: str) -> None:
        self.write(message, Status.IMPL)

    def warn(self, message: str) -> None:
        self.write(f"!!!! {message}", Status.WARN)

    def error(self, message: str) -> None:
        self.write(f"!!!! {message}", Status.ERROR)

    def debug(self, fmt: str, *args: object) -> None:
        """printf-style trace, only emitted in debug mode."""
        if self.debug_mode and fmt:
            logger.debug("EZMOB:: " + (fmt % args if args else fmt))

    @contextmanager
    def section(self, title: str) -> Iterator[None]:
        """Log ``<title> starting.`` and ``<title> complete.`` around a block."""
        self.write(f"{title} starting.", Status.INFO, 1)
        try:
            yield
        finally:
            self.write(f"{title} complete.", Status.INFO, -1)

    @property
    def warnings(self) -> list[str]:
        """Messages logged with WARN or ERROR status."""
        return [e.message for e in self.entries if e.status in (Status.WARN, Status.ERROR)]

    def mark(self) -> int:
        """Position in ``entries``, for collecting the messages of one step."""
        return len(self.entries)

    def warnings_since(self, mark: int) -> list[str]:
        return [
            e.message for e in self.entries[mark:]
            if e.status in (Status.WARN, Status.ERROR)
        ]


def toggle_flags(config: "ImporterConfig", args: str | None) -> str:
    """Flip the debug (``d``) and verbose (``v``) flags on *config*.

    Args:
        config: Settings object to update in place.
        args: Any string; each of ``d``/``v`` present toggles its flag.

    Returns:
        A one-line summary of both flags after the change.
    """
    flags = (args or "").lower()
    if "d" in flags:
        config.debug = not config.debug
    if "v" in flags:
        config.verbose = not config.verbose
    logger.info(f"EZMob flags changed: debug={config.debug} verbose={config.verbose}")
    return f"[d]ebug: {config.debug} [v]erbose: {config.verbose}"
