"""Allow ``python -m qbfs_tool``."""

from qbfs_tool.cli.app import main

if __name__ == "__main__":
    main()
