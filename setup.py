from setuptools import find_packages, setup
from glob import glob

package_name = 'leap_markers_ros2'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml', 'README.md']),
        ('share/' + package_name + '/launch', glob('launch/*.py')),
        ('share/' + package_name + '/config', glob('config/*.yaml')),
        ('share/' + package_name + '/rviz', glob('rviz/*.rviz')),
    ],
    install_requires=[
        'setuptools',
        # Frame source: parsing/transport/frame assembly for the hand stream.
        'hand-tracking-sdk>=1.0.0,<2.0.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='leap_markers_ros2 maintainers',
    maintainer_email='maintainers@example.com',
    description='ROS 2 node publishing hand bone and palm-axis arrow markers',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'leap_markers = leap_markers_ros2.markers_node:main',
        ],
    },
)
