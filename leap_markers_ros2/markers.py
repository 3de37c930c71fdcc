"""Marker constants and skeleton layout for hand arrow visualization."""

from __future__ import annotations

from typing import Final

MARKER_TOPIC: Final[str] = "/leap_markers"
MARKER_FRAME_ID: Final[str] = "leap_frame"
MAX_RATE_HZ: Final[float] = 20.0

MILLIMETERS_PER_METER: Final[float] = 1000.0
# Basis vectors are unit length; dividing by 100 draws a 10 cm arrow.
AXIS_LENGTH_DIVISOR: Final[float] = 100.0

FINGERS_DRAWN: Final[int] = 4
FINGER_ARROW_NS_PREFIX: Final[str] = "finger_arrow_"
FINGER_ARROW_SCALE: Final[tuple[float, float, float]] = (0.005, 0.01, 0.02)

AXIS_ARROW_SCALE: Final[tuple[float, float, float]] = (0.1, 0.1, 0.1)
AXIS_ARROWS: Final[tuple[tuple[str, tuple[float, float, float, float]], ...]] = (
    ("x_axis", (1.0, 0.0, 0.0, 1.0)),
    ("y_axis", (0.0, 1.0, 0.0, 1.0)),
    ("z_axis", (0.0, 0.0, 1.0, 1.0)),
)

MARKERS_PER_HAND: Final[int] = FINGERS_DRAWN * 4 + len(AXIS_ARROWS)


def finger_arrow_ns(finger_index: int) -> str:
    """Namespace for arrows of one finger."""
    return f"{FINGER_ARROW_NS_PREFIX}{finger_index}"


def finger_arrow_color(finger_index: int) -> tuple[float, float, float, float]:
    """RGBA color for one finger; red is fixed, green rises and blue falls by 0.2."""
    # Computed in tenths so finger 2 is exactly (0.9, 0.7, 0.6, 1.0).
    return (0.9, (3 + 2 * finger_index) / 10.0, (10 - 2 * finger_index) / 10.0, 1.0)


# Edges in streamed landmark index order, four per finger, proximal to distal.
BONE_EDGES: tuple[tuple[int, int], ...] = (
    # Thumb
    (0, 1),
    (1, 2),
    (2, 3),
    (3, 4),
    # Index
    (0, 5),
    (5, 6),
    (6, 7),
    (7, 8),
    # Middle
    (0, 9),
    (9, 10),
    (10, 11),
    (11, 12),
    # Ring
    (0, 13),
    (13, 14),
    (14, 15),
    (15, 16),
    # Little
    (0, 17),
    (17, 18),
    (18, 19),
    (19, 20),
)

# Wrist plus the four non-thumb knuckles; their centroid approximates the palm.
PALM_LANDMARKS: tuple[int, ...] = (0, 5, 9, 13, 17)


def finger_edges(finger_index: int) -> tuple[tuple[int, int], ...]:
    """Landmark edges forming the bones of one finger."""
    start = finger_index * 4
    return BONE_EDGES[start:start + 4]
