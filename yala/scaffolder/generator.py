"""Writes component source folders and project starter files.

A component folder holds four files::

    <name>/
        actionHandlers.js
        index.js
        <name>.js
        styles.scss

Deployed components live directly in ``src/``; inner components live in
``src/inner-components/``.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from yala.config import ProjectPaths
from yala.errors import IOFailure
from yala.registry.models import ComponentKind
from yala.scaffolder.templates import TemplateRenderer

# template -> output file name ("{name}" is replaced with the component name)
COMPONENT_FILES: dict[str, str] = {
    "component/actionHandlers.js.j2": "actionHandlers.js",
    "component/index.js.j2": "index.js",
    "component/component.js.j2": "{name}.js",
    "component/styles.scss.j2": "styles.scss",
}


class ComponentGenerator:
    """Renders component and project files under a project root."""

    def __init__(self, paths: ProjectPaths, renderer: TemplateRenderer | None = None) -> None:
        self.paths = paths
        self.renderer = renderer or TemplateRenderer()

    def create_component_files(self, name: str, kind: ComponentKind) -> list[Path]:
        """Create the component folder and its four starter files."""
        folder = self.paths.component_dir(name, inner=kind is ComponentKind.INNER)
        context = {"component_name": name}
        written: list[Path] = []
        try:
            folder.mkdir(parents=True, exist_ok=True)
            for template, output_name in COMPONENT_FILES.items():
                target = folder / output_name.format(name=name)
                written.append(self.renderer.render_to_file(template, target, context))
        except OSError as exc:
            raise IOFailure(f"Unable to create component files in {folder}: {exc}") from exc
        return written

    def remove_component_files(self, name: str) -> Path | None:
        """Delete the component's folder, wherever it lives.

        Returns:
            The removed folder, or ``None`` if neither location had one.
        """
        for inner in (False, True):
            folder = self.paths.component_dir(name, inner=inner)
            if folder.is_dir():
                try:
                    shutil.rmtree(folder)
                except OSError as exc:
                    raise IOFailure(f"Unable to remove {folder}: {exc}") from exc
                return folder
        return None

    def reset_sources(self) -> None:
        """Replace ``src/`` and the example harness with empty starters.

        Used by ``setup`` to drop the default component ``snc`` scaffolds.
        """
        try:
            if self.paths.src_dir.exists():
                shutil.rmtree(self.paths.src_dir)
            self.paths.src_dir.mkdir(parents=True)
            self.renderer.render_to_file("project/index.js.j2", self.paths.barrel_path, {})
            self.renderer.render_to_file("project/element.js.j2", self.paths.harness_path, {})
        except OSError as exc:
            raise IOFailure(f"Unable to reset project sources: {exc}") from exc
