"""Background runtime for ingesting SDK hand frames into a bounded queue."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from hand_tracking_sdk import (
    HandSide,
    HTSClient,
    HTSClientConfig,
    StreamOutput,
    TransportMode,
)
from hand_tracking_sdk.frame import HandFrame

from .adapters import is_valid_landmark_count, to_frame
from .hand_model import Frame


@dataclass(frozen=True, slots=True)
class RuntimeStats:
    """Runtime counters."""

    frames_in: int = 0
    frames_dropped_queue: int = 0
    frames_invalid: int = 0
    frames_out: int = 0
    loop_errors: int = 0
    parse_errors: int = 0
    dropped_lines: int = 0
    callback_errors: int = 0


_SIDE_ORDER = (HandSide.LEFT, HandSide.RIGHT)


def latest_per_side(hand_frames: Iterable[HandFrame]) -> list[HandFrame]:
    """Keep the newest frame of each side, ordered left then right."""
    newest: dict[HandSide, HandFrame] = {}
    for hand_frame in hand_frames:
        newest[hand_frame.side] = hand_frame
    return [newest[side] for side in _SIDE_ORDER if side in newest]


class FrameRuntime:
    """Owns an SDK client loop and assembles buffered frames into snapshots."""

    def __init__(
        self,
        *,
        transport_mode: str,
        host: str,
        port: int,
        timeout_s: float,
        reconnect_delay_s: float,
        queue_size: int,
        millimeters_per_unit: float = 1000.0,
        landmarks_are_wrist_relative: bool = False,
        hand_timeout_s: float = 0.25,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._queue: deque[HandFrame] = deque(maxlen=queue_size)
        self._queue_lock = threading.Lock()
        self._stats = RuntimeStats()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_exception: Exception | None = None
        self._millimeters_per_unit = millimeters_per_unit
        self._landmarks_are_wrist_relative = landmarks_are_wrist_relative
        self._hand_timeout_s = hand_timeout_s
        self._clock = clock
        # Newest valid frame per side and the clock reading when it was drained.
        self._latest: dict[HandSide, tuple[HandFrame, float]] = {}

        client_config = HTSClientConfig(
            transport_mode=TransportMode(transport_mode),
            host=host,
            port=port,
            timeout_s=timeout_s,
            reconnect_delay_s=reconnect_delay_s,
            output=StreamOutput.FRAMES,
            include_wall_time=True,
        )
        self._client = HTSClient(client_config)

    def start(self) -> None:
        """Start background ingest thread once."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True, name="leap-frame-runtime")
        self._thread.start()

    def stop(self) -> None:
        """
        Request background thread stop.

        Note: SDK iterators can block in transport receive. Thread is daemonized
        so process shutdown still completes cleanly.
        """
        self._stop_event.set()

    def pop_frame(self) -> Frame | None:
        """
        Drain buffered SDK frames into one snapshot of every tracked hand.

        The newest valid frame of each side is kept across drains, so a
        snapshot holds both hands even when only one side arrived since the
        previous call. A side not refreshed within ``hand_timeout_s`` drops
        out. Returns ``None`` when nothing valid arrived since the previous
        call.
        """
        with self._queue_lock:
            pending = list(self._queue)
            self._queue.clear()

        now_s = self._clock()
        self._expire_stale(now_s)
        if not pending:
            return None

        valid = [hand_frame for hand_frame in pending if is_valid_landmark_count(hand_frame)]
        self._refresh_stats(
            frames_invalid=self._stats.frames_invalid + len(pending) - len(valid),
        )
        if not valid:
            return None

        for hand_frame in latest_per_side(valid):
            self._latest[hand_frame.side] = (hand_frame, now_s)

        frame = to_frame(
            [self._latest[side][0] for side in _SIDE_ORDER if side in self._latest],
            millimeters_per_unit=self._millimeters_per_unit,
            landmarks_are_wrist_relative=self._landmarks_are_wrist_relative,
        )
        self._refresh_stats(frames_out=self._stats.frames_out + 1)
        return frame

    def get_stats(self) -> RuntimeStats:
        """Return runtime counters snapshot."""
        return self._stats

    def get_last_exception(self) -> Exception | None:
        """Return last fatal loop exception, if any."""
        return self._last_exception

    def _expire_stale(self, now_s: float) -> None:
        for side, (_, seen_s) in list(self._latest.items()):
            if now_s - seen_s > self._hand_timeout_s:
                del self._latest[side]

    def _refresh_stats(self, **changes: int) -> None:
        client_stats = self._client.get_stats()
        self._stats = replace(
            self._stats,
            parse_errors=client_stats.parse_errors,
            dropped_lines=client_stats.dropped_lines,
            callback_errors=client_stats.callback_errors,
            **changes,
        )

    def _run(self) -> None:
        try:
            for event in self._client.iter_events():
                if self._stop_event.is_set():
                    return

                dropped = 0
                with self._queue_lock:
                    if len(self._queue) == self._queue.maxlen:
                        self._queue.popleft()
                        dropped = 1
                    self._queue.append(event)

                self._refresh_stats(
                    frames_in=self._stats.frames_in + 1,
                    frames_dropped_queue=self._stats.frames_dropped_queue + dropped,
                )
        except Exception as exc:  # pragma: no cover - integration path
            self._last_exception = exc
            self._refresh_stats(loop_errors=self._stats.loop_errors + 1)
