"""Minimum-interval throttle for frame processing."""

from __future__ import annotations

import threading


class RateGate:
    """
    Accept at most one call per ``min_interval_s``.

    The gate never catches up: after an idle period a burst of calls still
    yields a single acceptance per interval.
    """

    def __init__(self, start_s: float, *, min_interval_s: float = 0.05) -> None:
        """
        Create a gate whose first window starts at ``start_s``.

        :param start_s:
            Construction timestamp in seconds.
        :param min_interval_s:
            Minimum spacing between accepted calls.
        :raises ValueError:
            If ``min_interval_s`` is not positive.
        """
        if min_interval_s <= 0.0:
            raise ValueError(f"min_interval_s must be greater than 0, got {min_interval_s!r}")
        self._min_interval_s = min_interval_s
        self._last_accepted_s = start_s
        self._lock = threading.Lock()

    @classmethod
    def from_rate(cls, start_s: float, max_rate_hz: float) -> RateGate:
        """Build a gate from a maximum rate in hertz."""
        if max_rate_hz <= 0.0:
            raise ValueError(f"max_rate_hz must be greater than 0, got {max_rate_hz!r}")
        return cls(start_s, min_interval_s=1.0 / max_rate_hz)

    @property
    def min_interval_s(self) -> float:
        return self._min_interval_s

    @property
    def last_accepted_s(self) -> float:
        return self._last_accepted_s

    def should_process(self, now_s: float) -> bool:
        """Return whether ``now_s`` opens a new window, recording it if so."""
        with self._lock:
            if now_s - self._last_accepted_s < self._min_interval_s:
                return False
            self._last_accepted_s = now_s
            return True
