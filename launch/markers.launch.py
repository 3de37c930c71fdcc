"""Launch the leap marker node."""

from pathlib import Path

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description() -> LaunchDescription:
    """Generate marker node launch description."""
    share_dir = Path(get_package_share_directory("leap_markers_ros2"))
    default_params = str(share_dir / "config" / "markers.params.yaml")

    return LaunchDescription(
        [
            DeclareLaunchArgument(
                "params_file",
                default_value=default_params,
                description="Path to YAML parameters file.",
            ),
            DeclareLaunchArgument(
                "max_rate_hz",
                default_value="20.0",
                description="Upper bound on published marker batches per second.",
            ),
            Node(
                package="leap_markers_ros2",
                executable="leap_markers",
                name="leap_markers",
                output="screen",
                parameters=[
                    LaunchConfiguration("params_file"),
                    {"max_rate_hz": LaunchConfiguration("max_rate_hz")},
                ],
            ),
        ]
    )
