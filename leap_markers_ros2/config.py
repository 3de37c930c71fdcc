"""Configuration structures for the leap marker node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rclpy.node import Node

from .markers import MARKER_FRAME_ID, MARKER_TOPIC, MAX_RATE_HZ

PARAMETER_DEFAULTS: dict[str, Any] = {
    "transport_mode": "tcp_server",
    "host": "0.0.0.0",
    "port": 9000,
    "timeout_s": 1.0,
    "reconnect_delay_s": 0.25,
    "queue_size": 256,
    "marker_topic": MARKER_TOPIC,
    "marker_frame_id": MARKER_FRAME_ID,
    "max_rate_hz": MAX_RATE_HZ,
    "millimeters_per_unit": 1000.0,
    "landmarks_are_wrist_relative": False,
    "hand_timeout_s": 0.25,
    "qos_reliability": "reliable",
    "poll_period_s": 0.005,
    "enable_diagnostics": True,
    "diagnostics_period_s": 1.0,
}


@dataclass(frozen=True, slots=True)
class MarkersNodeConfig:
    """Resolved runtime configuration for :class:`LeapMarkersNode`."""

    transport_mode: str
    host: str
    port: int
    timeout_s: float
    reconnect_delay_s: float
    queue_size: int
    marker_topic: str
    marker_frame_id: str
    max_rate_hz: float
    millimeters_per_unit: float
    landmarks_are_wrist_relative: bool
    hand_timeout_s: float
    qos_reliability: str
    poll_period_s: float
    enable_diagnostics: bool
    diagnostics_period_s: float

    def __post_init__(self) -> None:
        for name in (
            "max_rate_hz",
            "millimeters_per_unit",
            "hand_timeout_s",
            "poll_period_s",
            "diagnostics_period_s",
        ):
            value = getattr(self, name)
            if value <= 0.0:
                raise ValueError(f"{name} must be greater than 0, got {value!r}")
        if not self.marker_topic:
            raise ValueError("marker_topic must not be empty")
        if not self.marker_frame_id:
            raise ValueError("marker_frame_id must not be empty")


def declare_parameters(node: Node) -> None:
    """Declare every node parameter with its default."""
    for name, default in PARAMETER_DEFAULTS.items():
        node.declare_parameter(name, default)


def load_config(node: Node) -> MarkersNodeConfig:
    """Read declared parameters into a validated config."""

    def value(name: str) -> Any:
        return node.get_parameter(name).value

    return MarkersNodeConfig(
        transport_mode=str(value("transport_mode")),
        host=str(value("host")),
        port=int(value("port")),
        timeout_s=float(value("timeout_s")),
        reconnect_delay_s=float(value("reconnect_delay_s")),
        queue_size=int(value("queue_size")),
        marker_topic=str(value("marker_topic")),
        marker_frame_id=str(value("marker_frame_id")),
        max_rate_hz=float(value("max_rate_hz")),
        millimeters_per_unit=float(value("millimeters_per_unit")),
        landmarks_are_wrist_relative=bool(value("landmarks_are_wrist_relative")),
        hand_timeout_s=float(value("hand_timeout_s")),
        qos_reliability=str(value("qos_reliability")),
        poll_period_s=float(value("poll_period_s")),
        enable_diagnostics=bool(value("enable_diagnostics")),
        diagnostics_period_s=float(value("diagnostics_period_s")),
    )
