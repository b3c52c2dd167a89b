"""Node.js version check and ``npm install``."""

from __future__ import annotations

from pathlib import Path

from yala.errors import ExternalToolFailure
from yala.utils import run_command


def parse_node_version(output: str) -> str:
    """``"v12.16.1\\n"`` -> ``"12.16.1"``."""
    return output.strip().lstrip("v")


async def detect_node_version(node_binary: str = "node") -> str:
    """Return the running node version, without the leading ``v``.

    Raises:
        ExternalToolFailure: node is missing or wrote to stderr.
    """
    exit_code, stdout, stderr = await run_command([node_binary, "--version"])
    if exit_code != 0 or stderr or not stdout:
        raise ExternalToolFailure(
            "Unable to determine the node.js version",
            command=f"{node_binary} --version",
            output=stderr,
        )
    return parse_node_version(stdout)


async def check_node_version(supported: list[str], node_binary: str = "node") -> str | None:
    """Return the node version if it is one of *supported*, else ``None``."""
    try:
        version = await detect_node_version(node_binary)
    except ExternalToolFailure:
        return None
    return version if version in supported else None


async def install_dependencies(cwd: str | Path, npm_binary: str = "npm") -> int:
    """Run ``npm install`` in *cwd* with the terminal attached."""
    exit_code, _, _ = await run_command([npm_binary, "install"], cwd=cwd, capture=False)
    return exit_code
