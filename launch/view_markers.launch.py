"""Launch the leap marker node with an RViz view."""

from pathlib import Path

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description() -> LaunchDescription:
    """Generate launch description for marker node + RViz."""
    share_dir = Path(get_package_share_directory("leap_markers_ros2"))
    default_params = str(share_dir / "config" / "markers.params.yaml")
    default_rviz = str(share_dir / "rviz" / "leap_markers.rviz")

    params_file = LaunchConfiguration("params_file")
    rviz_config = LaunchConfiguration("rviz_config")

    return LaunchDescription(
        [
            DeclareLaunchArgument("params_file", default_value=default_params),
            DeclareLaunchArgument("rviz_config", default_value=default_rviz),
            Node(
                package="leap_markers_ros2",
                executable="leap_markers",
                name="leap_markers",
                output="screen",
                parameters=[params_file],
            ),
            # Sensor origin at the world origin, identity rotation.
            Node(
                package="tf2_ros",
                executable="static_transform_publisher",
                name="static_tf_world_to_leap_frame",
                output="screen",
                arguments=[
                    "--frame-id", "world",
                    "--child-frame-id", "leap_frame",
                ],
            ),
            Node(
                package="rviz2",
                executable="rviz2",
                name="rviz2",
                output="screen",
                arguments=["-d", rviz_config],
            ),
        ]
    )
