"""Keep the import barrel and the example harness in step with the registry.

``src/index.js`` carries one ``import './<name>';`` line per deployed
component and ``example/element.js`` one ``el.innerHTML += '<name></name>';``
line. ``snc`` scaffolds its default component into the harness as an
``import '../src/<name>';`` line plus a template-literal tag. All of these
are treated as ordered lists of text lines; adding appends a line, removing
drops every line that references the component.

Two match modes decide what "references" means:

* ``exact`` -- each line is parsed into the component identifiers it names
  (the folder a relative import points at, element tag names) and only an
  identical identifier matches. ``x-app-card`` does not match a line about
  ``x-app-card-list``.
* ``substring`` -- any line containing the name as a substring matches.
  This reproduces artifacts written by older tooling byte for byte but will
  also drop unrelated lines that happen to contain the name.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from yala.config import MatchMode
from yala.errors import IOFailure

_IMPORT_TARGET = re.compile(r"""\bimport\b[^'"]*['"](\.{1,2}/[^'"]+)['"]""")
_TAG_NAME = re.compile(r"</?([A-Za-z][\w.-]*)")


def barrel_line(name: str) -> str:
    """The import line a deployed component contributes to ``src/index.js``."""
    return f"import './{name}';"


def harness_line(name: str) -> str:
    """The usage line a deployed component contributes to ``example/element.js``."""
    return f"el.innerHTML += '<{name}></{name}>';"


def imported_names(line: str) -> set[str]:
    """Component folders targeted by relative imports in *line*.

    The folder is the last path segment once a trailing ``index.js`` and a
    ``.js`` suffix are stripped: ``./x-a``, ``./x-a/index.js`` and
    ``../src/x-a`` all name ``x-a``.
    """
    names = set()
    for target in _IMPORT_TARGET.findall(line):
        segments = [s for s in target.split("/") if s not in ("", ".", "..")]
        if not segments:
            continue
        last = segments[-1]
        if last.endswith(".js"):
            last = last[: -len(".js")]
        if last == "index" and len(segments) > 1:
            last = segments[-2]
        names.add(last)
    return names


def tag_names(line: str) -> set[str]:
    """Element tag names used in a harness line."""
    return set(_TAG_NAME.findall(line))


def harness_names(line: str) -> set[str]:
    """Components a harness line refers to, by import or by tag."""
    return imported_names(line) | tag_names(line)


class ArtifactSync:
    """Applies matching add/remove edits to the barrel and harness files."""

    def __init__(
        self,
        barrel_path: str | Path,
        harness_path: str | Path,
        match_mode: MatchMode = MatchMode.EXACT,
    ) -> None:
        self.barrel_path = Path(barrel_path)
        self.harness_path = Path(harness_path)
        self.match_mode = MatchMode(match_mode)

    # -- Matching ----------------------------------------------------------

    def _matcher(self, name: str, parse: Callable[[str], set[str]]) -> Callable[[str], bool]:
        if self.match_mode is MatchMode.SUBSTRING:
            return lambda line: name in line
        return lambda line: name in parse(line)

    # -- Public API --------------------------------------------------------

    def add(self, name: str) -> None:
        """Append the barrel import and harness usage lines for *name*."""
        _append_line(self.barrel_path, barrel_line(name))
        _append_line(self.harness_path, harness_line(name))

    def remove(self, name: str) -> dict[str, int]:
        """Drop every line referencing *name* from both artifacts.

        Returns:
            ``{"barrel": n, "harness": m}`` -- how many lines each lost.
            Files that do not exist are skipped and report ``0``.
        """
        return {
            "barrel": _filter_lines(self.barrel_path, self._matcher(name, imported_names)),
            "harness": _filter_lines(
                self.harness_path, self._matcher(name, harness_names)
            ),
        }

    def references(self, name: str) -> dict[str, list[int]]:
        """1-based line numbers in each artifact that reference *name*."""
        return {
            "barrel": _matching_line_numbers(
                self.barrel_path, self._matcher(name, imported_names)
            ),
            "harness": _matching_line_numbers(
                self.harness_path, self._matcher(name, harness_names)
            ),
        }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"Unable to read {path}: {exc}") from exc


def _write(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"Unable to write {path}: {exc}") from exc


def _append_line(path: Path, line: str) -> None:
    content = _read(path) if path.exists() else ""
    if content and not content.endswith("\n"):
        content += "\n"
    _write(path, f"{content}{line}\n")


def _filter_lines(path: Path, matches: Callable[[str], bool]) -> int:
    if not path.exists():
        return 0
    lines = _read(path).split("\n")
    kept = [line for line in lines if not matches(line)]
    removed = len(lines) - len(kept)
    if removed:
        _write(path, "\n".join(kept))
    return removed


def _matching_line_numbers(path: Path, matches: Callable[[str], bool]) -> list[int]:
    if not path.exists():
        return []
    return [i for i, line in enumerate(_read(path).split("\n"), start=1) if matches(line)]
