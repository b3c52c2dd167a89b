"""Shared pytest fixtures for the yala test suite.

Provides reusable fixtures for:
- A temporary component project (now-ui.json, src/index.js, example/element.js)
- A scripted ``Prompter`` that replays canned answers
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from yala.config import Config, ProjectPaths
from yala.errors import ValidationError


# ---------------------------------------------------------------------------
# Component project on disk
# ---------------------------------------------------------------------------

SCOPE_NAME = "x_abcd_app"

BARREL_TEXT = "// Add import statements for each deployed component here\n"
HARNESS_TEXT = (
    "import '../src/index.js';\n"
    "\n"
    "const el = document.createElement('DIV');\n"
    "document.body.appendChild(el);\n"
    "\n"
    'el.innerHTML = "";\n'
)


def _write_registry(root: Path, data: dict[str, Any]) -> Path:
    path = root / "now-ui.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_registry():
    """Write a ``now-ui.json`` (2-space indented) into a directory.

    Usage:
        def test_load(tmp_path, write_registry):
            path = write_registry(tmp_path, {"scopeName": "x_a_b", "components": {}})
    """
    return _write_registry


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A freshly set-up project with no components."""
    root = tmp_path / "app-components"
    (root / "src").mkdir(parents=True)
    (root / "example").mkdir()
    (root / "src" / "index.js").write_text(BARREL_TEXT, encoding="utf-8")
    (root / "example" / "element.js").write_text(HARNESS_TEXT, encoding="utf-8")
    _write_registry(root, {"scopeName": SCOPE_NAME, "components": {}})
    yield root


@pytest.fixture
def project_paths(project_dir: Path) -> ProjectPaths:
    return ProjectPaths(root=project_dir)


@pytest.fixture
def project_config(project_dir: Path) -> Config:
    return Config(project_root=project_dir, clear=False)


@pytest.fixture
def sample_registry() -> dict[str, Any]:
    """A registry with one deployed component carrying a property and an action."""
    return {
        "scopeName": SCOPE_NAME,
        "components": {
            "x-abcd-card": {
                "innerComponents": [],
                "uiBuilder": {
                    "associatedTypes": ["global.core", "global.landing-page"],
                    "label": "Card",
                    "icon": "document-outline",
                    "description": "A card",
                    "category": "primitives",
                },
                "properties": [
                    {
                        "name": "title",
                        "label": "Title",
                        "required": True,
                        "readOnly": False,
                        "description": "Card title",
                        "fieldType": "string",
                        "defaultValue": "Hello",
                    }
                ],
                "actions": [
                    {
                        "name": "CARD_CLICKED",
                        "label": "Card clicked",
                        "description": "Fired on click",
                        "payload": [{"id": "string"}],
                    }
                ],
            }
        },
    }


# ---------------------------------------------------------------------------
# Scripted prompts
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Replays answers in order and records every question asked.

    Text answers go through the validator like a real prompt would; an
    answer that fails validation is recorded in ``rejected`` and the next
    answer is used instead.
    """

    def __init__(self, answers: Sequence[Any]) -> None:
        self.answers = list(answers)
        self.asked: list[str] = []
        self.rejected: list[tuple[str, str]] = []

    def _next(self, message: str) -> Any:
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for {message!r}")
        return self.answers.pop(0)

    def confirm(self, message: str, default: bool = False) -> bool:
        return bool(self._next(message))

    def select(self, message: str, choices: Sequence[str]) -> str:
        answer = self._next(message)
        assert answer in choices, f"{answer!r} not offered for {message!r}: {list(choices)}"
        return answer

    def text(
        self,
        message: str,
        validate: Optional[Any] = None,
        default: Optional[str] = None,
        password: bool = False,
    ) -> str:
        while True:
            answer = self._next(message)
            if answer is None:
                answer = default or ""
            if validate is None:
                return answer
            try:
                validate(answer)
            except ValidationError as exc:
                self.rejected.append((answer, str(exc)))
                continue
            return answer


@pytest.fixture
def scripted_prompter():
    """Factory for ``ScriptedPrompter``.

    Usage:
        def test_prompt(scripted_prompter):
            prompter = scripted_prompter(["Deployed component", "card", ...])
    """
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes. ``stdout.readline`` yields the stdout
    lines one by one for streamed commands.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        lines = [line.encode("utf-8") for line in stdout.splitlines(keepends=True)]
        mock_proc.stdout = MagicMock()
        mock_proc.stdout.readline = AsyncMock(side_effect=[*lines, b""])
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
