"""
CLI Module.

Typer application for operators of the QBFS router.

Architecture:
- CLI is a thin presentation layer over qbfs_tool.services
- Metastore data is fetched via HTTP (httpx) per invocation, never cached
- Rich renders tables on stdout; errors and logs go to stderr

Usage:
    qbfs-tool --help
    qbfs-tool mount list -c cluster-1
    qbfs-tool mount resolve qbfs://c1/a/example.txt
    qbfs-tool service state -n 10
"""
