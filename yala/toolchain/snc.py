"""ServiceNow CLI (``snc``) process management.

Every ``snc`` call goes through ``SncClient.run``, which returns a
structured ``ToolResult``. Older ``snc`` releases exit ``0`` even when a
deploy or scaffold fails, so ``run`` also scans the streamed output for the
known failure messages; callers only ever look at ``ToolResult.success``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from yala.errors import ExternalToolFailure
from yala.utils import console, run_command, run_command_streaming

# Each marker is a group of substrings that must all appear in one line.
FailureMarker = tuple[str, ...]

PROJECT_FAILURE_MARKERS: tuple[FailureMarker, ...] = (
    ("Response code 400 (Bad Request)",),
    ("Cannot scaffold a project in a non-empty folder!",),
)
DEPLOY_FAILURE_MARKERS: tuple[FailureMarker, ...] = (("Deployment to", "failed"),)
UPDATE_SET_FAILURE_MARKERS: tuple[FailureMarker, ...] = (
    ("Generation of updateSet failed",),
)


@dataclass
class ToolResult:
    """Outcome of one external command."""

    success: bool
    exit_code: int
    output: str = ""
    failure: str = ""


def find_failure(line: str, markers: tuple[FailureMarker, ...]) -> FailureMarker | None:
    """Return the first marker whose substrings all occur in *line*."""
    for marker in markers:
        if all(part in line for part in marker):
            return marker
    return None


class SncClient:
    """Runs ``snc`` sub-commands for a project.

    Args:
        binary: Path or name of the ``snc`` executable.
        cwd: Directory commands run in (usually the project root).
    """

    def __init__(self, binary: str = "snc", cwd: str | Path | None = None) -> None:
        self.binary = binary
        self.cwd = Path(cwd) if cwd else None

    # ------------------------------------------------------------------
    # Generic runner
    # ------------------------------------------------------------------

    async def run(
        self,
        *args: str,
        failure_markers: tuple[FailureMarker, ...] = (),
        cwd: str | Path | None = None,
        stream: bool = True,
    ) -> ToolResult:
        """Run ``snc <args>`` and classify the outcome.

        With *stream* the child keeps the terminal for stdin/stderr and each
        stdout line is echoed as it arrives (lines matching a failure marker
        in red). Without it, stdout and stderr are captured silently.
        """
        cmd = [self.binary, *args]
        workdir = cwd or self.cwd
        failure = ""

        if stream:
            def _echo(line: str) -> None:
                nonlocal failure
                marker = find_failure(line, failure_markers)
                if marker is not None:
                    failure = failure or line.strip()
                    console.print(line, style="red", markup=False, highlight=False)
                else:
                    console.print(line, markup=False, highlight=False)

            exit_code, output = await run_command_streaming(cmd, cwd=workdir, on_line=_echo)
        else:
            exit_code, stdout, stderr = await run_command(cmd, cwd=workdir)
            output = stdout
            for line in stdout.splitlines():
                if find_failure(line, failure_markers) is not None:
                    failure = line.strip()
                    break
            if exit_code not in (0, 127) and not failure and stderr:
                failure = stderr

        if exit_code == 127 and not failure:
            failure = f"Command not found: {self.binary}"
        elif exit_code != 0 and not failure:
            failure = f"{' '.join(cmd)} exited with {exit_code}"

        return ToolResult(
            success=exit_code == 0 and not failure,
            exit_code=exit_code,
            output=output,
            failure=failure,
        )

    def _require(self, result: ToolResult, what: str) -> ToolResult:
        if not result.success:
            raise ExternalToolFailure(
                f"{what} failed: {result.failure}",
                command=self.binary,
                output=result.output,
            )
        return result

    # ------------------------------------------------------------------
    # Installation checks
    # ------------------------------------------------------------------

    async def is_installed(self) -> bool:
        result = await self.run("--help", stream=False)
        return result.exit_code != 127

    async def has_ui_extension(self) -> bool:
        exit_code, _, stderr = await run_command([self.binary, "ui-component", "help"])
        return exit_code == 0 and not stderr

    async def add_ui_extension(self) -> bool:
        result = await self.run("extension", "add", "--name", "ui-component", stream=False)
        return result.success

    async def cli_version(self) -> str:
        """Version of the ui-component extension (``...@24.1.0`` -> ``24.1.0``)."""
        result = await self.run("ui-component", "--version", stream=False)
        self._require(result, "snc ui-component --version")
        return result.output.strip().rsplit("@", 1)[-1].strip()

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def list_profiles(self) -> dict[str, Any]:
        """Configured profiles as ``{name: {"host": ..., "username": ...}}``."""
        result = await self.run("configure", "profile", "list", stream=False)
        self._require(result, "Listing snc profiles")
        try:
            profiles = json.loads(result.output or "{}")
        except json.JSONDecodeError as exc:
            raise ExternalToolFailure(
                f"Unable to read existing profiles: {exc}",
                command=f"{self.binary} configure profile list",
                output=result.output,
            ) from exc
        return profiles if isinstance(profiles, dict) else {}

    async def create_profile(self, profile: str) -> str:
        """Run the interactive ``snc configure profile set`` for *profile*."""
        exit_code, _, stderr = await run_command(
            [self.binary, "configure", "profile", "set", "--profile", profile],
            cwd=self.cwd,
            capture=False,
        )
        if exit_code != 0:
            raise ExternalToolFailure(
                f"Error while setting profile {profile}",
                command=f"{self.binary} configure profile set",
                output=stderr,
            )
        return profile

    # ------------------------------------------------------------------
    # Project commands
    # ------------------------------------------------------------------

    async def create_project(self, profile: str, scope: str, name: str, cwd: Path) -> ToolResult:
        return await self.run(
            "ui-component", "project",
            "--profile", profile,
            "--scope", scope,
            "--name", name,
            failure_markers=PROJECT_FAILURE_MARKERS,
            cwd=cwd,
        )

    async def develop(self) -> int:
        """Start the development server; returns when the user stops it."""
        exit_code, _, _ = await run_command(
            [self.binary, "ui-component", "develop"], cwd=self.cwd, capture=False
        )
        return exit_code

    async def deploy(self, profile: str, force: bool = False) -> ToolResult:
        args = ["ui-component", "deploy", "--profile", profile]
        if force:
            args.append("--force")
        return await self.run(*args, failure_markers=DEPLOY_FAILURE_MARKERS)

    async def generate_update_set(self) -> ToolResult:
        return await self.run(
            "ui-component", "generate-update-set",
            failure_markers=UPDATE_SET_FAILURE_MARKERS,
        )
