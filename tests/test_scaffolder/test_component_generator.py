"""Unit tests for ComponentGenerator (yala.scaffolder.generator).

Tests cover:
- deployed and inner component folders
- rendered file content
- folder removal from either location
- project source reset
- OSError wrapping
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from yala.config import ProjectPaths
from yala.errors import IOFailure
from yala.registry.models import ComponentKind
from yala.scaffolder.generator import ComponentGenerator

pytestmark = pytest.mark.unit


@pytest.fixture
def generator(project_paths: ProjectPaths) -> ComponentGenerator:
    return ComponentGenerator(project_paths)


class TestCreateComponentFiles:
    def test_deployed_layout(self, generator: ComponentGenerator, project_paths: ProjectPaths):
        written = generator.create_component_files("x-abcd-card", ComponentKind.DEPLOYED)
        folder = project_paths.src_dir / "x-abcd-card"
        assert sorted(written) == sorted([
            folder / "actionHandlers.js",
            folder / "index.js",
            folder / "x-abcd-card.js",
            folder / "styles.scss",
        ])
        assert all(p.is_file() for p in written)

    def test_inner_layout(self, generator: ComponentGenerator, project_paths: ProjectPaths):
        written = generator.create_component_files("x-abcd-part", ComponentKind.INNER)
        assert {p.parent for p in written} == {
            project_paths.src_dir / "inner-components" / "x-abcd-part"
        }

    def test_content_names_component(self, generator: ComponentGenerator, project_paths: ProjectPaths):
        generator.create_component_files("x-abcd-card", ComponentKind.DEPLOYED)
        folder = project_paths.src_dir / "x-abcd-card"

        assert (folder / "index.js").read_text(encoding="utf-8") == "import './x-abcd-card.js';\n"
        component = (folder / "x-abcd-card.js").read_text(encoding="utf-8")
        assert "createCustomElement('x-abcd-card'" in component
        assert "x-abcd-card: Hello World!" in component
        assert "import { actionHandlers } from './actionHandlers';" in component
        assert "export const actionHandlers" in (folder / "actionHandlers.js").read_text(
            encoding="utf-8"
        )
        assert (folder / "styles.scss").read_text(encoding="utf-8") == (
            "@import '@servicenow/sass-kit/host';\n"
        )

    def test_write_failure(self, generator: ComponentGenerator):
        with patch.object(Path, "write_text", side_effect=PermissionError("ro")):
            with pytest.raises(IOFailure, match="Unable to create component files"):
                generator.create_component_files("x-abcd-card", ComponentKind.DEPLOYED)


class TestRemoveComponentFiles:
    @pytest.mark.parametrize("kind", [ComponentKind.DEPLOYED, ComponentKind.INNER])
    def test_removes_folder(self, generator: ComponentGenerator, kind):
        written = generator.create_component_files("x-abcd-card", kind)
        folder = written[0].parent
        assert generator.remove_component_files("x-abcd-card") == folder
        assert not folder.exists()

    def test_missing_folder(self, generator: ComponentGenerator):
        assert generator.remove_component_files("x-abcd-none") is None

    def test_rmtree_failure(self, generator: ComponentGenerator):
        generator.create_component_files("x-abcd-card", ComponentKind.DEPLOYED)
        with patch("yala.scaffolder.generator.shutil.rmtree", side_effect=PermissionError("busy")):
            with pytest.raises(IOFailure, match="Unable to remove"):
                generator.remove_component_files("x-abcd-card")


class TestResetSources:
    def test_replaces_src_and_harness(self, generator: ComponentGenerator, project_paths: ProjectPaths):
        generator.create_component_files("x-abcd-card", ComponentKind.DEPLOYED)
        project_paths.harness_path.write_text("el.innerHTML += '<x-abcd-card></x-abcd-card>';\n")

        generator.reset_sources()

        assert [p.name for p in project_paths.src_dir.iterdir()] == ["index.js"]
        assert project_paths.barrel_path.read_text(encoding="utf-8") == (
            "// Add import statements for each deployed component here\n"
        )
        harness = project_paths.harness_path.read_text(encoding="utf-8")
        assert harness.startswith("import '../src/index.js';\n")
        assert "x-abcd-card" not in harness

    def test_creates_src_when_missing(self, tmp_path: Path):
        paths = ProjectPaths(root=tmp_path)
        ComponentGenerator(paths).reset_sources()
        assert paths.barrel_path.is_file()
        assert paths.harness_path.is_file()
