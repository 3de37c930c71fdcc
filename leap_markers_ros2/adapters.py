"""Conversions between SDK frames, hand skeletons and ROS message types."""

from __future__ import annotations

from collections.abc import Sequence

from builtin_interfaces.msg import Time
from geometry_msgs.msg import Point
from hand_tracking_sdk import HandFrame, JointName
from std_msgs.msg import ColorRGBA, Header
from visualization_msgs.msg import Marker, MarkerArray

from .hand_model import (
    BONES_PER_FINGER,
    FINGERS_PER_HAND,
    Basis,
    Bone,
    Finger,
    Frame,
    Hand,
    Vector3,
)
from .markers import (
    AXIS_ARROW_SCALE,
    AXIS_ARROWS,
    AXIS_LENGTH_DIVISOR,
    FINGERS_DRAWN,
    FINGER_ARROW_SCALE,
    MARKER_FRAME_ID,
    MILLIMETERS_PER_METER,
    PALM_LANDMARKS,
    finger_arrow_color,
    finger_arrow_ns,
    finger_edges,
)


def make_header(stamp: Time, frame_id: str) -> Header:
    """Build standard ROS header."""
    return Header(stamp=stamp, frame_id=frame_id)


def to_marker_array(
    frame: Frame,
    *,
    stamp: Time,
    frame_id: str = MARKER_FRAME_ID,
) -> MarkerArray:
    """
    Build bone and palm-axis arrows for every right hand in ``frame``.

    Each right hand yields sixteen finger arrows followed by three axis
    arrows. Marker ids come from a single counter shared by all hands in the
    frame, so ids in the returned array are ``0..n-1`` in emission order.
    Left hands contribute nothing.
    """
    marker_array = MarkerArray()
    next_id = 0

    for hand in frame.hands:
        if not hand.is_right:
            continue

        for finger_index in range(FINGERS_DRAWN):
            finger = hand.fingers[finger_index]
            for bone_type in range(BONES_PER_FINGER):
                bone = finger.bone(bone_type)
                marker_array.markers.append(
                    _arrow(
                        stamp=stamp,
                        frame_id=frame_id,
                        ns=finger_arrow_ns(finger_index),
                        marker_id=next_id,
                        scale=FINGER_ARROW_SCALE,
                        rgba=finger_arrow_color(finger_index),
                        tail=_to_meters(bone.prev_joint),
                        head=_to_meters(bone.next_joint),
                    )
                )
                next_id += 1

        origin = _to_meters(hand.palm_position)
        directions = (hand.basis.x_basis, hand.basis.y_basis, hand.basis.z_basis)
        for (ns, rgba), direction in zip(AXIS_ARROWS, directions):
            head = (
                origin[0] + direction[0] / AXIS_LENGTH_DIVISOR,
                origin[1] + direction[1] / AXIS_LENGTH_DIVISOR,
                origin[2] + direction[2] / AXIS_LENGTH_DIVISOR,
            )
            marker_array.markers.append(
                _arrow(
                    stamp=stamp,
                    frame_id=frame_id,
                    ns=ns,
                    marker_id=next_id,
                    scale=AXIS_ARROW_SCALE,
                    rgba=rgba,
                    tail=origin,
                    head=head,
                )
            )
            next_id += 1

    return marker_array


def _arrow(
    *,
    stamp: Time,
    frame_id: str,
    ns: str,
    marker_id: int,
    scale: tuple[float, float, float],
    rgba: tuple[float, float, float, float],
    tail: Vector3,
    head: Vector3,
) -> Marker:
    """Build one two-point arrow marker."""
    arrow = Marker()
    arrow.header = make_header(stamp=stamp, frame_id=frame_id)
    arrow.ns = ns
    arrow.id = marker_id
    arrow.type = Marker.ARROW
    arrow.action = Marker.ADD
    arrow.scale.x, arrow.scale.y, arrow.scale.z = scale
    arrow.color = ColorRGBA(r=rgba[0], g=rgba[1], b=rgba[2], a=rgba[3])
    arrow.points.append(Point(x=tail[0], y=tail[1], z=tail[2]))
    arrow.points.append(Point(x=head[0], y=head[1], z=head[2]))
    return arrow


def _to_meters(point: Vector3) -> Vector3:
    return (
        point[0] / MILLIMETERS_PER_METER,
        point[1] / MILLIMETERS_PER_METER,
        point[2] / MILLIMETERS_PER_METER,
    )


def is_valid_landmark_count(frame: HandFrame) -> bool:
    """Return whether frame carries expected landmark point count."""
    return len(frame.landmarks.points) == len(JointName)


def to_hand(
    frame: HandFrame,
    *,
    millimeters_per_unit: float = 1000.0,
    landmarks_are_wrist_relative: bool = False,
) -> Hand:
    """
    Convert one SDK hand frame into a millimeter-scaled hand skeleton.

    :param frame:
        SDK frame carrying the canonical 21 landmarks and wrist pose.
    :param millimeters_per_unit:
        Scale from SDK position units to millimeters (SDK streams meters).
    :param landmarks_are_wrist_relative:
        Transform landmarks from wrist-local into world coordinates first.
    :returns:
        Hand with five fingers, palm centroid and wrist orientation basis.
    """
    points = frame.landmarks.points
    if landmarks_are_wrist_relative:
        points = _landmarks_wrist_local_to_world(points=points, frame=frame)

    scaled = tuple(
        (x * millimeters_per_unit, y * millimeters_per_unit, z * millimeters_per_unit)
        for x, y, z in points
    )

    fingers = tuple(
        Finger(
            bones=tuple(
                Bone(prev_joint=scaled[idx_a], next_joint=scaled[idx_b])
                for idx_a, idx_b in finger_edges(finger_index)
            )
        )
        for finger_index in range(FINGERS_PER_HAND)
    )

    palm = [scaled[idx] for idx in PALM_LANDMARKS]
    palm_position = (
        sum(p[0] for p in palm) / len(palm),
        sum(p[1] for p in palm) / len(palm),
        sum(p[2] for p in palm) / len(palm),
    )

    return Hand(
        side=frame.side,
        palm_position=palm_position,
        basis=wrist_basis(frame),
        fingers=fingers,
    )


def to_frame(
    hand_frames: Sequence[HandFrame],
    *,
    millimeters_per_unit: float = 1000.0,
    landmarks_are_wrist_relative: bool = False,
) -> Frame:
    """Combine per-side SDK frames into one snapshot, in the given order."""
    hands = tuple(
        to_hand(
            hand_frame,
            millimeters_per_unit=millimeters_per_unit,
            landmarks_are_wrist_relative=landmarks_are_wrist_relative,
        )
        for hand_frame in hand_frames
    )
    sequence_ids = [hand_frame.sequence_id for hand_frame in hand_frames]
    return Frame(hands=hands, sequence_id=max(sequence_ids) if sequence_ids else None)


def wrist_basis(frame: HandFrame) -> Basis:
    """Return the wrist orientation as three rotated unit axes."""
    wrist = frame.wrist

    def rotate(x: float, y: float, z: float) -> Vector3:
        return _rotate_vector_by_quaternion(
            x=x, y=y, z=z, qx=wrist.qx, qy=wrist.qy, qz=wrist.qz, qw=wrist.qw
        )

    return Basis(
        x_basis=rotate(1.0, 0.0, 0.0),
        y_basis=rotate(0.0, 1.0, 0.0),
        z_basis=rotate(0.0, 0.0, 1.0),
    )


def _landmarks_wrist_local_to_world(
    *,
    points: tuple[tuple[float, float, float], ...],
    frame: HandFrame,
) -> tuple[tuple[float, float, float], ...]:
    """Transform wrist-local landmark points into world coordinates."""
    world_points: list[tuple[float, float, float]] = []
    for x, y, z in points:
        rx, ry, rz = _rotate_vector_by_quaternion(
            x=x,
            y=y,
            z=z,
            qx=frame.wrist.qx,
            qy=frame.wrist.qy,
            qz=frame.wrist.qz,
            qw=frame.wrist.qw,
        )
        world_points.append((rx + frame.wrist.x, ry + frame.wrist.y, rz + frame.wrist.z))
    return tuple(world_points)


def _rotate_vector_by_quaternion(
    *,
    x: float,
    y: float,
    z: float,
    qx: float,
    qy: float,
    qz: float,
    qw: float,
) -> tuple[float, float, float]:
    """Rotate a vector using quaternion orientation."""
    norm = (qx * qx + qy * qy + qz * qz + qw * qw) ** 0.5
    if norm == 0.0:
        return (x, y, z)

    qx_n = qx / norm
    qy_n = qy / norm
    qz_n = qz / norm
    qw_n = qw / norm

    # Equivalent to q * v * conj(q), expanded for speed.
    tx = 2.0 * (qy_n * z - qz_n * y)
    ty = 2.0 * (qz_n * x - qx_n * z)
    tz = 2.0 * (qx_n * y - qy_n * x)

    rx = x + qw_n * tx + (qy_n * tz - qz_n * ty)
    ry = y + qw_n * ty + (qz_n * tx - qx_n * tz)
    rz = z + qw_n * tz + (qx_n * ty - qy_n * tx)
    return (rx, ry, rz)
