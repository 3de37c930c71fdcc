"""ROS 2 node publishing hand bone and palm-axis arrows as markers."""

from __future__ import annotations

import rclpy
from rclpy.node import Node

from .config import declare_parameters, load_config
from .converter import FrameToMarkersConverter
from .diagnostics import DiagnosticsPublisher
from .publishers import MarkerPublisher, sensor_qos_profile
from .rate_gate import RateGate
from .runtime import FrameRuntime


class LeapMarkersNode(Node):
    """Node that turns tracked right hands into a throttled MarkerArray stream."""

    def __init__(self) -> None:
        super().__init__("leap_markers")

        declare_parameters(self)
        self._config = load_config(self)
        config = self._config

        self._marker_publisher = MarkerPublisher(
            self,
            qos=sensor_qos_profile(config.qos_reliability),
            topic_name=config.marker_topic,
        )

        now = self.get_clock().now()
        self._converter = FrameToMarkersConverter(
            self._marker_publisher.publish,
            rate_gate=RateGate.from_rate(now.nanoseconds / 1e9, config.max_rate_hz),
            frame_id=config.marker_frame_id,
        )

        self._runtime = FrameRuntime(
            transport_mode=config.transport_mode,
            host=config.host,
            port=config.port,
            timeout_s=config.timeout_s,
            reconnect_delay_s=config.reconnect_delay_s,
            queue_size=config.queue_size,
            millimeters_per_unit=config.millimeters_per_unit,
            landmarks_are_wrist_relative=config.landmarks_are_wrist_relative,
            hand_timeout_s=config.hand_timeout_s,
        )
        self._runtime.start()

        self._last_frame_time = now
        self._frames_invalid_seen = 0
        self._last_sequence_id: int | None = None
        self._reported_exception: Exception | None = None

        self.create_timer(config.poll_period_s, self._on_poll)

        self._diagnostics: DiagnosticsPublisher | None = None
        if config.enable_diagnostics:
            self._diagnostics = DiagnosticsPublisher(self)
            self.create_timer(config.diagnostics_period_s, self._publish_diagnostics)

        self.get_logger().info(
            "Started leap_markers transport=%s host=%s port=%d topic=%s max_rate_hz=%.1f qos=%s"
            % (
                config.transport_mode,
                config.host,
                config.port,
                config.marker_topic,
                config.max_rate_hz,
                config.qos_reliability,
            )
        )

    def destroy_node(self) -> bool:
        self._runtime.stop()
        return super().destroy_node()

    def _on_poll(self) -> None:
        frame = self._runtime.pop_frame()
        self._check_runtime_health()
        if frame is None:
            return

        now = self.get_clock().now()
        self._last_frame_time = now
        self._last_sequence_id = frame.sequence_id
        self._converter.on_frame(frame, now_s=now.nanoseconds / 1e9, stamp=now.to_msg())

    def _check_runtime_health(self) -> None:
        frames_invalid = self._runtime.get_stats().frames_invalid
        if frames_invalid > self._frames_invalid_seen:
            self.get_logger().warn(
                "Dropped %d frame(s) with unexpected landmark count"
                % (frames_invalid - self._frames_invalid_seen)
            )
            self._frames_invalid_seen = frames_invalid

        exception = self._runtime.get_last_exception()
        if exception is not None and exception is not self._reported_exception:
            self.get_logger().error("Frame runtime stopped: %r" % (exception,))
            self._reported_exception = exception

    def _publish_diagnostics(self) -> None:
        if self._diagnostics is None:
            return
        self._diagnostics.publish(
            runtime_stats=self._runtime.get_stats(),
            converter_stats=self._converter.get_stats(),
            last_frame_time=self._last_frame_time,
            last_sequence_id=self._last_sequence_id,
            last_exception=self._runtime.get_last_exception(),
        )


def main(args: list[str] | None = None) -> None:
    """Run marker node."""
    rclpy.init(args=args)
    node = LeapMarkersNode()
    try:
        rclpy.spin(node)
    finally:
        node.destroy_node()
        rclpy.shutdown()
