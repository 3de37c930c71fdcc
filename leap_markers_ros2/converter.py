"""Rate-limited conversion of hand frames into published marker arrays."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from builtin_interfaces.msg import Time
from visualization_msgs.msg import MarkerArray

from .adapters import to_marker_array
from .hand_model import Frame
from .markers import MARKER_FRAME_ID
from .rate_gate import RateGate


@dataclass(frozen=True, slots=True)
class ConverterStats:
    """Converter counters."""

    frames_received: int = 0
    frames_rate_limited: int = 0
    frames_without_markers: int = 0
    batches_published: int = 0
    markers_published: int = 0


class FrameToMarkersConverter:
    """Throttle incoming frames and hand each marker batch to a publish sink."""

    def __init__(
        self,
        publish: Callable[[MarkerArray], None],
        *,
        rate_gate: RateGate,
        frame_id: str = MARKER_FRAME_ID,
    ) -> None:
        self._publish = publish
        self._rate_gate = rate_gate
        self._frame_id = frame_id
        self._stats = ConverterStats()

    @property
    def rate_gate(self) -> RateGate:
        return self._rate_gate

    def convert(self, frame: Frame, *, stamp: Time) -> MarkerArray:
        """Build the marker batch for ``frame`` without touching the rate gate."""
        return to_marker_array(frame, stamp=stamp, frame_id=self._frame_id)

    def on_frame(self, frame: Frame, *, now_s: float, stamp: Time) -> bool:
        """
        Handle one frame delivery.

        The rate gate is consulted first, so a frame without a right hand
        still uses up the current window. Publish errors propagate to the
        caller and the window stays consumed.

        :returns:
            ``True`` if a batch was published.
        """
        self._stats = replace(self._stats, frames_received=self._stats.frames_received + 1)

        if not self._rate_gate.should_process(now_s):
            self._stats = replace(
                self._stats, frames_rate_limited=self._stats.frames_rate_limited + 1
            )
            return False

        if not frame.hands:
            self._count_empty()
            return False

        marker_array = self.convert(frame, stamp=stamp)
        if not marker_array.markers:
            self._count_empty()
            return False

        self._publish(marker_array)
        self._stats = replace(
            self._stats,
            batches_published=self._stats.batches_published + 1,
            markers_published=self._stats.markers_published + len(marker_array.markers),
        )
        return True

    def get_stats(self) -> ConverterStats:
        """Return converter counters snapshot."""
        return self._stats

    def _count_empty(self) -> None:
        self._stats = replace(
            self._stats, frames_without_markers=self._stats.frames_without_markers + 1
        )
