"""Immutable hand skeleton values consumed by the marker converter."""

from __future__ import annotations

from dataclasses import dataclass

from hand_tracking_sdk import HandSide

Vector3 = tuple[float, float, float]

BONES_PER_FINGER = 4
FINGERS_PER_HAND = 5


@dataclass(frozen=True, slots=True)
class Bone:
    """Rigid segment between two joints, in millimeters."""

    prev_joint: Vector3
    next_joint: Vector3


@dataclass(frozen=True, slots=True)
class Finger:
    """Four bones ordered metacarpal, proximal, intermediate, distal."""

    bones: tuple[Bone, ...]

    def __post_init__(self) -> None:
        if len(self.bones) != BONES_PER_FINGER:
            raise ValueError(
                f"finger must have {BONES_PER_FINGER} bones, got {len(self.bones)}"
            )

    def bone(self, bone_type: int) -> Bone:
        """Return bone by type index (0 is metacarpal, 3 is distal)."""
        return self.bones[bone_type]


@dataclass(frozen=True, slots=True)
class Basis:
    """Orthonormal hand orientation axes."""

    x_basis: Vector3
    y_basis: Vector3
    z_basis: Vector3


@dataclass(frozen=True, slots=True)
class Hand:
    """One tracked hand."""

    side: HandSide
    palm_position: Vector3
    basis: Basis
    fingers: tuple[Finger, ...]

    def __post_init__(self) -> None:
        if len(self.fingers) != FINGERS_PER_HAND:
            raise ValueError(
                f"hand must have {FINGERS_PER_HAND} fingers, got {len(self.fingers)}"
            )

    @property
    def is_right(self) -> bool:
        return self.side == HandSide.RIGHT


@dataclass(frozen=True, slots=True)
class Frame:
    """Snapshot of all hands seen at one instant."""

    hands: tuple[Hand, ...] = ()
    sequence_id: int | None = None
