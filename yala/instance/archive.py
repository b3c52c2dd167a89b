"""Zip a component project so a copy can be kept locally and on the instance."""

from __future__ import annotations

import re
import zipfile
from pathlib import Path

from yala.errors import IOFailure, ValidationError

ARCHIVE_NAME = re.compile(r"^[a-zA-Z0-9_\-]+$")
SKIPPED_DIR_PARTS = ("node_modules", ".now-cli", "target")


def check_archive_name(value: str) -> str:
    if not ARCHIVE_NAME.match(value):
        raise ValidationError("Invalid filename")
    return value


def _skipped(directory: str) -> bool:
    return any(part in directory for part in SKIPPED_DIR_PARTS)


def iter_project_files(project_root: Path) -> list[Path]:
    """Files to archive, relative to *project_root*, in a stable order.

    Directories whose name contains ``node_modules``, ``.now-cli`` or
    ``target`` are skipped along with everything under them.
    """
    files: list[Path] = []
    for path in sorted(project_root.rglob("*")):
        rel = path.relative_to(project_root)
        if any(_skipped(part) for part in rel.parts[:-1]):
            continue
        if path.is_dir():
            continue
        files.append(rel)
    return files


def create_project_archive(project_root: str | Path, name: str) -> Path:
    """Write ``<name>.zip`` next to the project folder and return its path."""
    check_archive_name(name)
    root = Path(project_root).resolve()
    archive_path = root.parent / f"{name}.zip"
    try:
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for rel in iter_project_files(root):
                zf.write(root / rel, rel.as_posix())
    except OSError as exc:
        raise IOFailure(f"Failed to create '{archive_path.name}': {exc}") from exc
    return archive_path
