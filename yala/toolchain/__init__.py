"""Wrappers around the external binaries yala drives (``snc``, ``node``, ``npm``)."""

from yala.toolchain.node import check_node_version, detect_node_version, install_dependencies
from yala.toolchain.snc import SncClient, ToolResult

__all__ = [
    "SncClient",
    "ToolResult",
    "check_node_version",
    "detect_node_version",
    "install_dependencies",
]
