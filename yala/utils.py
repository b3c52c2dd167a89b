"""Shared utility functions for yala.

Provides async command execution, JSON I/O, and Rich-based console output.
Every command prints through the single ``console`` defined here.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int | None = None,
    capture: bool = True,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: List of arguments; the first item is the binary.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, which interactive tools need).

    Returns:
        A ``(returncode, stdout, stderr)`` tuple. A binary that cannot be
        found yields returncode ``127``.
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_command_streaming(
    cmd: list[str],
    cwd: str | Path | None = None,
    on_line: Callable[[str], None] | None = None,
) -> tuple[int, str]:
    """Run a command, handing each stdout line to *on_line* as it arrives.

    Stdin and stderr stay attached to the terminal so the child can prompt
    the user. Stdout is piped, echoed through *on_line* and collected.

    Returns:
        A ``(returncode, stdout)`` tuple. A binary that cannot be found yields
        returncode ``127`` and empty output.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (127, "")

    assert process.stdout is not None  # guaranteed by PIPE
    lines: list[str] = []
    while True:
        line_bytes = await process.stdout.readline()
        if not line_bytes:
            break
        line = line_bytes.decode("utf-8", errors="replace").rstrip("\n")
        lines.append(line)
        if on_line is not None:
            on_line(line)

    returncode = await process.wait()
    return (returncode or 0, "\n".join(lines))


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))


def dump_json(data: Any) -> str:
    """Serialise *data* the way every yala-written JSON file is formatted."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_text_atomic(path: str | Path, content: str) -> None:
    """Replace *path* with *content* in one step.

    The text goes to a temp file in the same directory first and is then
    moved over the target with ``os.replace``.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(version: str, clear: bool = True) -> None:
    """Print the welcome banner, clearing the screen first when asked."""
    if clear:
        console.clear()
    console.print(
        Panel(
            "[bold]Yansa Labs' improved CLI solution for ServiceNow custom "
            "component development[/bold]",
            title=f"[bold black on bright_green] yala-component-cli v{version} [/]",
            border_style="bright_green",
        )
    )


def print_header(text: str) -> None:
    """Print a section header in the standard format."""
    console.print()
    console.print(f"[bold white on blue]- {text} -[/bold white on blue]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a blue informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_failure_banner(command: str) -> None:
    """Print the banner shown when a command aborts."""
    console.print()
    console.print(f"[bold white on red] yala {command} failed [/bold white on red]")
    console.print()


def print_debug(detail: Any) -> None:
    """Print raw debug detail inside a ``DEBUG LOG`` panel."""
    console.print(
        Panel(Text(str(detail)), title="[bold]DEBUG LOG[/bold]", border_style="yellow")
    )
