"""ROS topic publisher helpers for the marker node."""

from __future__ import annotations

from rclpy.node import Node
from rclpy.qos import DurabilityPolicy, HistoryPolicy, QoSProfile, ReliabilityPolicy
from visualization_msgs.msg import MarkerArray

from .markers import MARKER_TOPIC


def sensor_qos_profile(reliability_mode: str) -> QoSProfile:
    """
    Build marker-topic QoS profile from a configuration string.

    :param reliability_mode:
        One of ``best_effort`` or ``reliable``.
    :returns:
        QoS profile used for the marker topic.
    :raises ValueError:
        If the reliability mode is unsupported.
    """
    mode = reliability_mode.strip().lower()

    if mode == "best_effort":
        reliability = ReliabilityPolicy.BEST_EFFORT
    elif mode == "reliable":
        reliability = ReliabilityPolicy.RELIABLE
    else:
        raise ValueError(
            "qos_reliability must be one of {'best_effort', 'reliable'}, "
            f"got {reliability_mode!r}"
        )

    return QoSProfile(
        reliability=reliability,
        durability=DurabilityPolicy.VOLATILE,
        history=HistoryPolicy.KEEP_LAST,
        depth=10,
    )


class MarkerPublisher:
    """Publisher for hand arrow marker batches."""

    def __init__(self, node: Node, *, qos: QoSProfile, topic_name: str = MARKER_TOPIC) -> None:
        self._publisher = node.create_publisher(MarkerArray, topic_name, qos)

    def publish(self, message: MarkerArray) -> None:
        """Publish one marker batch."""
        self._publisher.publish(message)
