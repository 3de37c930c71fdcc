"""Unit tests for adapter conversion helpers."""

from __future__ import annotations

from math import isclose, sqrt

from builtin_interfaces.msg import Time
from hand_tracking_sdk import HandFrame, HandLandmarks, HandSide, WristPose
from visualization_msgs.msg import Marker

from leap_markers_ros2.adapters import (
    is_valid_landmark_count,
    to_frame,
    to_hand,
    to_marker_array,
    wrist_basis,
)
from leap_markers_ros2.hand_model import Basis, Bone, Finger, Frame, Hand
from leap_markers_ros2.markers import MARKERS_PER_HAND

IDENTITY_WRIST = WristPose(x=0.0, y=0.0, z=0.0, qx=0.0, qy=0.0, qz=0.0, qw=1.0)


def _hand(
    *,
    side: HandSide = HandSide.RIGHT,
    palm: tuple[float, float, float] = (0.0, 0.0, 0.0),
    basis: Basis | None = None,
    first_bone: Bone | None = None,
) -> Hand:
    fingers = []
    for finger_index in range(5):
        bones = []
        for bone_type in range(4):
            base = float(finger_index * 100 + bone_type * 10)
            bones.append(Bone(prev_joint=(base, base, base), next_joint=(base + 10, base + 10, base + 10)))
        fingers.append(Finger(bones=tuple(bones)))
    if first_bone is not None:
        fingers[0] = Finger(bones=(first_bone,) + fingers[0].bones[1:])
    return Hand(
        side=side,
        palm_position=palm,
        basis=basis or Basis(x_basis=(1.0, 0.0, 0.0), y_basis=(0.0, 1.0, 0.0), z_basis=(0.0, 0.0, 1.0)),
        fingers=tuple(fingers),
    )


def _sdk_frame(
    *,
    side: HandSide = HandSide.RIGHT,
    wrist: WristPose = IDENTITY_WRIST,
    points: tuple[tuple[float, float, float], ...] | None = None,
    sequence_id: int = 1,
) -> HandFrame:
    return HandFrame(
        side=side,
        frame_id='wrist',
        wrist=wrist,
        landmarks=HandLandmarks(points=points if points is not None else _canonical_points()),
        sequence_id=sequence_id,
        recv_ts_ns=1,
        recv_time_unix_ns=1,
        source_ts_ns=None,
        wrist_recv_ts_ns=1,
        landmarks_recv_ts_ns=1,
    )


def _canonical_points() -> tuple[tuple[float, float, float], ...]:
    return tuple((float(i), float(i + 1), float(i + 2)) for i in range(21))


def test_empty_frame_yields_no_markers() -> None:
    """A frame without hands converts to an empty batch."""
    marker_array = to_marker_array(Frame(), stamp=Time(sec=3, nanosec=0))
    assert marker_array.markers == []


def test_left_hand_is_skipped() -> None:
    """Only right hands are drawn."""
    frame = Frame(hands=(_hand(side=HandSide.LEFT),))
    marker_array = to_marker_array(frame, stamp=Time(sec=0, nanosec=0))
    assert marker_array.markers == []


def test_right_hand_yields_nineteen_sequential_markers() -> None:
    """One right hand produces 16 bone arrows then 3 axis arrows, ids 0..18."""
    frame = Frame(hands=(_hand(side=HandSide.LEFT), _hand()))
    marker_array = to_marker_array(frame, stamp=Time(sec=4, nanosec=5))

    markers = marker_array.markers
    assert len(markers) == MARKERS_PER_HAND
    assert [marker.id for marker in markers] == list(range(MARKERS_PER_HAND))
    assert [marker.ns for marker in markers[:16]] == [
        f'finger_arrow_{finger}' for finger in range(4) for _ in range(4)
    ]
    assert [marker.ns for marker in markers[16:]] == ['x_axis', 'y_axis', 'z_axis']
    for marker in markers:
        assert marker.type == Marker.ARROW
        assert marker.action == Marker.ADD
        assert marker.header.frame_id == 'leap_frame'
        assert marker.header.stamp.sec == 4
        assert marker.header.stamp.nanosec == 5
        assert len(marker.points) == 2


def test_two_right_hands_share_one_id_counter() -> None:
    """Ids keep counting across hands within one batch."""
    frame = Frame(hands=(_hand(), _hand()))
    marker_array = to_marker_array(frame, stamp=Time(sec=0, nanosec=0))
    assert [marker.id for marker in marker_array.markers] == list(range(2 * MARKERS_PER_HAND))


def test_bone_arrow_converts_millimeters_to_meters() -> None:
    """Bone joints are divided by 1000."""
    frame = Frame(
        hands=(_hand(first_bone=Bone(prev_joint=(10.0, 20.0, 30.0), next_joint=(40.0, 50.0, 60.0))),)
    )
    arrow = to_marker_array(frame, stamp=Time(sec=0, nanosec=0)).markers[0]

    tail, head = arrow.points
    assert (tail.x, tail.y, tail.z) == (0.01, 0.02, 0.03)
    assert (head.x, head.y, head.z) == (0.04, 0.05, 0.06)
    assert (arrow.scale.x, arrow.scale.y, arrow.scale.z) == (0.005, 0.01, 0.02)


def test_axis_arrows_start_at_palm_and_extend_basis() -> None:
    """Axis arrows run from the palm to palm + basis / 100."""
    frame = Frame(hands=(_hand(palm=(100.0, 200.0, 300.0)),))
    markers = to_marker_array(frame, stamp=Time(sec=0, nanosec=0)).markers
    x_axis, y_axis, z_axis = markers[16:]

    tail, head = x_axis.points
    assert (tail.x, tail.y, tail.z) == (0.1, 0.2, 0.3)
    assert isclose(head.x, 0.11, rel_tol=0.0, abs_tol=1e-9)
    assert isclose(head.y, 0.2, rel_tol=0.0, abs_tol=1e-9)
    assert isclose(head.z, 0.3, rel_tol=0.0, abs_tol=1e-9)

    assert isclose(y_axis.points[1].y, 0.21, rel_tol=0.0, abs_tol=1e-9)
    assert isclose(z_axis.points[1].z, 0.31, rel_tol=0.0, abs_tol=1e-9)

    assert (x_axis.color.r, x_axis.color.g, x_axis.color.b, x_axis.color.a) == (1.0, 0.0, 0.0, 1.0)
    assert (y_axis.color.r, y_axis.color.g, y_axis.color.b, y_axis.color.a) == (0.0, 1.0, 0.0, 1.0)
    assert (z_axis.color.r, z_axis.color.g, z_axis.color.b, z_axis.color.a) == (0.0, 0.0, 1.0, 1.0)
    assert (x_axis.scale.x, x_axis.scale.y, x_axis.scale.z) == (0.1, 0.1, 0.1)


def test_finger_color_depends_only_on_finger_index() -> None:
    """Finger 2 arrows are (0.9, 0.7, 0.6, 1.0) for every bone."""
    markers = to_marker_array(Frame(hands=(_hand(),)), stamp=Time(sec=0, nanosec=0)).markers
    for arrow in markers[8:12]:
        assert arrow.ns == 'finger_arrow_2'
        assert (arrow.color.r, arrow.color.g, arrow.color.b, arrow.color.a) == (0.9, 0.7, 0.6, 1.0)


def test_conversion_is_repeatable() -> None:
    """Same frame and stamp give identical batches; a new stamp only changes headers."""
    frame = Frame(hands=(_hand(palm=(1.0, 2.0, 3.0)),))

    first = to_marker_array(frame, stamp=Time(sec=1, nanosec=0))
    second = to_marker_array(frame, stamp=Time(sec=1, nanosec=0))
    later = to_marker_array(frame, stamp=Time(sec=2, nanosec=0))

    assert first == second
    for early, late in zip(first.markers, later.markers):
        assert late.header.stamp.sec == 2
        late.header.stamp = early.header.stamp
        assert early == late


def test_to_hand_scales_landmarks_into_bones() -> None:
    """SDK meters become millimeter bones along the canonical skeleton."""
    hand = to_hand(_sdk_frame())

    assert hand.is_right
    index_metacarpal = hand.fingers[1].bone(0)
    assert index_metacarpal.prev_joint == (0.0, 1000.0, 2000.0)
    assert index_metacarpal.next_joint == (5000.0, 6000.0, 7000.0)
    thumb_tip = hand.fingers[0].bone(3)
    assert thumb_tip.prev_joint == (3000.0, 4000.0, 5000.0)
    assert thumb_tip.next_joint == (4000.0, 5000.0, 6000.0)


def test_to_hand_palm_is_knuckle_centroid() -> None:
    """Palm is the mean of wrist and the four non-thumb knuckles."""
    hand = to_hand(_sdk_frame(), millimeters_per_unit=1.0)

    assert isclose(hand.palm_position[0], 8.8, rel_tol=0.0, abs_tol=1e-9)
    assert isclose(hand.palm_position[1], 9.8, rel_tol=0.0, abs_tol=1e-9)
    assert isclose(hand.palm_position[2], 10.8, rel_tol=0.0, abs_tol=1e-9)


def test_to_hand_wrist_relative_landmarks_are_offset_by_wrist() -> None:
    """Wrist-local landmarks are moved into world coordinates before scaling."""
    frame = _sdk_frame(wrist=WristPose(x=1.0, y=2.0, z=3.0, qx=0.0, qy=0.0, qz=0.0, qw=1.0))
    hand = to_hand(frame, millimeters_per_unit=1.0, landmarks_are_wrist_relative=True)

    assert hand.fingers[1].bone(0).prev_joint == (1.0, 3.0, 5.0)


def test_wrist_basis_identity() -> None:
    """Identity orientation gives the unit axes."""
    basis = wrist_basis(_sdk_frame())
    assert basis.x_basis == (1.0, 0.0, 0.0)
    assert basis.y_basis == (0.0, 1.0, 0.0)
    assert basis.z_basis == (0.0, 0.0, 1.0)


def test_wrist_basis_follows_rotation() -> None:
    """A quarter turn about z maps x onto y and y onto -x."""
    sin_45 = 1.0 / sqrt(2.0)
    frame = _sdk_frame(wrist=WristPose(x=0.0, y=0.0, z=0.0, qx=0.0, qy=0.0, qz=sin_45, qw=sin_45))
    basis = wrist_basis(frame)

    for actual, expected in zip(basis.x_basis, (0.0, 1.0, 0.0)):
        assert isclose(actual, expected, rel_tol=0.0, abs_tol=1e-6)
    for actual, expected in zip(basis.y_basis, (-1.0, 0.0, 0.0)):
        assert isclose(actual, expected, rel_tol=0.0, abs_tol=1e-6)
    for actual, expected in zip(basis.z_basis, (0.0, 0.0, 1.0)):
        assert isclose(actual, expected, rel_tol=0.0, abs_tol=1e-6)


def test_to_frame_collects_hands_and_newest_sequence() -> None:
    """Combined frame keeps input order and the largest sequence id."""
    frame = to_frame(
        [
            _sdk_frame(side=HandSide.LEFT, sequence_id=3),
            _sdk_frame(side=HandSide.RIGHT, sequence_id=5),
        ]
    )

    assert [hand.side for hand in frame.hands] == [HandSide.LEFT, HandSide.RIGHT]
    assert frame.sequence_id == 5
    assert to_frame([]) == Frame()


def test_is_valid_landmark_count_checks_expected_joint_count() -> None:
    """Validator should enforce canonical landmark count."""
    assert is_valid_landmark_count(_sdk_frame())
    assert not is_valid_landmark_count(_sdk_frame(points=((0.0, 0.0, 0.0),)))
