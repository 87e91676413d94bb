"""
CLI Commands.

Organized by resource.
"""

from qbfs_tool.cli.commands.cluster import app as cluster_app
from qbfs_tool.cli.commands.mount import app as mount_app
from qbfs_tool.cli.commands.service import app as service_app

__all__ = [
    "cluster_app",
    "mount_app",
    "service_app",
]
