"""
qbfs-tool.

Command-line client for the QBFS router service. Fetches the mount table and
cluster metadata from the router metastore and resolves paths between the
qbfs:// virtual namespace and the physical filesystems behind it.
"""

__version__ = "0.1.0"
