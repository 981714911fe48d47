from __future__ import annotations

"""Timing helpers for logging how long chain computations take."""

import logging
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from time import perf_counter
from types import TracebackType
from typing import Literal, Optional, Sequence


def format_duration(seconds: float) -> str:
    """Render a duration in seconds into a human-readable ASCII string."""

    duration = timedelta(seconds=max(seconds, 0.0))
    total_seconds = duration.total_seconds()

    if total_seconds < 1.0:
        return f"{total_seconds * 1000.0:.0f} ms"
    if total_seconds < 60.0:
        return f"{total_seconds:.2f} s"

    days = duration.days
    remaining_seconds = duration.seconds
    hours, remaining_seconds = divmod(remaining_seconds, 3600)
    minutes, seconds_whole = divmod(remaining_seconds, 60)
    seconds_fraction = seconds_whole + duration.microseconds / 1_000_000

    if days == 0 and hours == 0:
        return f"{minutes} min {seconds_fraction:.1f} s"
    if days == 0:
        return f"{hours} h {minutes} min {seconds_fraction:.1f} s"
    return f"{days} d {hours} h {minutes} min"


@dataclass
class StageTimer:
    """Context manager that measures execution time and logs completion.

    Completion messages go to the logger; with ``print_on_complete`` they are
    also echoed to stderr so that stdout stays free for command output.
    """

    label: str
    logger: logging.Logger
    print_on_complete: bool = False
    details: Sequence[str] | None = None

    _start: float = field(init=False, default=0.0)
    elapsed: float = field(init=False, default=0.0)

    def __enter__(self) -> "StageTimer":
        self._start = perf_counter()
        self.logger.debug("%s started", self.label)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        _tb: TracebackType | None,
    ) -> Literal[False]:
        self.elapsed = perf_counter() - self._start
        status = "completed" if exc is None else "failed"
        message = f"{self.label} {status} in {format_duration(self.elapsed)}."
        if self.print_on_complete:
            print(message, file=sys.stderr, flush=True)
        log_level = logging.ERROR if exc is not None else logging.INFO
        self.logger.log(log_level, message)
        if exc is None and self.details:
            for line in self.details:
                self.logger.info(line)
        return False


def configure_logging(level: int | str = logging.WARNING, fmt: Optional[str] = None) -> None:
    """Route ``markovlab`` log records to the current stderr at ``level``.

    Calling it again replaces the handler installed by a previous call.
    """

    logger = logging.getLogger("markovlab")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_markovlab_console", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler._markovlab_console = True  # type: ignore[attr-defined]
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
