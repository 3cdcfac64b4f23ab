"""Timer strategies wrapped around the timed call."""

import logging
import time
from collections.abc import Callable

from giglio.domain.models import FunctionEntry, GiglioError, Module
from giglio.domain.protocols import Timer

logger = logging.getLogger(__name__)

_Key = tuple[str, str]


class _MarkTimer:
    """Keeps one start mark per (module, function) pair."""

    has_output = True

    def __init__(self, clock: Callable[[], float]) -> None:
        self._clock = clock
        self._marks: dict[_Key, float] = {}

    def env_compatible(self) -> bool:
        return True

    def time_start(self, module: Module, entry: FunctionEntry) -> None:
        self._marks[(module.name, entry.name)] = self._clock()

    def _elapsed_ms(self, module: Module, entry: FunctionEntry) -> float | None:
        end = self._clock()
        start = self._marks.pop((module.name, entry.name), None)
        if start is None:
            logger.warning("time_end for %s/%s without time_start", module.name, entry.name)
            return None
        return self._to_ms(end - start)

    def _to_ms(self, delta: float) -> float:
        return delta * 1000.0

    def time_end(self, module: Module, entry: FunctionEntry) -> float | None:
        return self._elapsed_ms(module, entry)


class HighResolutionTimer(_MarkTimer):
    """Nanosecond monotonic timer based on ``time.perf_counter_ns``."""

    def __init__(self) -> None:
        super().__init__(time.perf_counter_ns)

    def env_compatible(self) -> bool:
        return time.get_clock_info("perf_counter").monotonic

    def _to_ms(self, delta: float) -> float:
        return delta / 1_000_000


class WallClockTimer(_MarkTimer):
    """Wall-clock timer based on ``time.time``. Coarse but available everywhere."""

    def __init__(self) -> None:
        super().__init__(time.time)


class LoggingTimer(_MarkTimer):
    """Logs the elapsed time itself and hands no measurement to the frontend.

    Pair it with a frontend that does not require output (``"quiet"``).
    """

    has_output = False

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(time.perf_counter)
        self._level = level

    def time_end(self, module: Module, entry: FunctionEntry) -> float | None:
        elapsed = self._elapsed_ms(module, entry)
        if elapsed is not None:
            logger.log(self._level, "%s: %.3fms", entry.name, elapsed)
        return None


TIMERS: dict[str, Callable[[], Timer]] = {
    "highres": HighResolutionTimer,
    "wallclock": WallClockTimer,
    "log": LoggingTimer,
}

_AUTO_ORDER = ("highres", "wallclock")


def create_timer(name: str) -> Timer:
    """Build a timer by registry name; ``"auto"`` picks the best compatible one."""
    if name == "auto":
        for candidate in _AUTO_ORDER:
            timer = TIMERS[candidate]()
            if timer.env_compatible():
                return timer
        raise GiglioError("No compatible timer found for this environment")
    try:
        factory = TIMERS[name]
    except KeyError:
        choices = ", ".join(sorted([*TIMERS, "auto"]))
        raise GiglioError(f"Unknown timer {name!r} (choose from {choices})") from None
    return factory()
