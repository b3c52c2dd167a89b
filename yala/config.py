"""yala configuration.

Centralised, typed configuration for every command. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class MatchMode(str, Enum):
    """How barrel/harness lines are matched against a component name."""

    EXACT = "exact"
    SUBSTRING = "substring"


class ProjectPaths(BaseModel):
    """Every file location a command touches, derived from the project root.

    Commands never change the working directory; they receive one of these
    and pass explicit paths (and ``cwd=`` for child processes) everywhere.
    """

    root: Path = Field(default=Path("."))

    @property
    def src_dir(self) -> Path:
        """Directory holding deployed component folders and the barrel."""
        return self.root / "src"

    @property
    def inner_components_dir(self) -> Path:
        """Directory holding inner (non-deployed) component folders."""
        return self.src_dir / "inner-components"

    @property
    def registry_path(self) -> Path:
        """Path to ``now-ui.json``."""
        return self.root / "now-ui.json"

    @property
    def backup_path(self) -> Path:
        """Path to the transient registry backup used during deploy."""
        return self.root / "now-ui-backup.json"

    @property
    def barrel_path(self) -> Path:
        """Path to ``src/index.js``."""
        return self.src_dir / "index.js"

    @property
    def harness_path(self) -> Path:
        """Path to ``example/element.js``."""
        return self.root / "example" / "element.js"

    def component_dir(self, name: str, *, inner: bool = False) -> Path:
        """Return the source folder for component *name*."""
        base = self.inner_components_dir if inner else self.src_dir
        return base / name


class ToolchainConfig(BaseModel):
    """Settings for the external node / npm / snc binaries."""

    snc_binary: str = Field(default="snc")
    node_binary: str = Field(default="node")
    npm_binary: str = Field(default="npm")
    supported_node_versions: list[str] = Field(default=["12.16.1", "14.21.3"])
    legacy_node_version: str = Field(
        default="12.16.1",
        description="Node version whose snc deploy rejects component-level actions",
    )
    min_update_set_cli_major: int = Field(
        default=24, ge=1, description="Oldest ui-component major that can generate update sets"
    )


class InstanceConfig(BaseModel):
    """Settings for saving the project archive on the instance."""

    upload_timeout: int = Field(default=240, ge=10, description="Upload timeout in seconds")
    request_timeout: int = Field(default=30, ge=1, description="Timeout for other API calls")
    app_table: str = Field(default="sys_app")


class Config(BaseModel):
    """Global yala configuration.

    Instances are created once by the CLI entry point and then passed through
    the rest of the system.
    """

    project_root: Path = Field(default=Path("."))
    match_mode: MatchMode = Field(default=MatchMode.EXACT)
    debug: bool = Field(default=False)
    clear: bool = Field(default=True)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    instance: InstanceConfig = Field(default_factory=InstanceConfig)

    @property
    def paths(self) -> ProjectPaths:
        """File locations for the configured project root."""
        return ProjectPaths(root=self.project_root)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            YALA_PROJECT_DIR, YALA_MATCH_MODE, YALA_DEBUG,
            YALA_SNC_BINARY, YALA_NODE_BINARY, YALA_NPM_BINARY,
            YALA_LEGACY_NODE_VERSION, YALA_UPLOAD_TIMEOUT.
        """
        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("YALA_SNC_BINARY"):
            toolchain_kwargs["snc_binary"] = os.environ["YALA_SNC_BINARY"]
        if os.environ.get("YALA_NODE_BINARY"):
            toolchain_kwargs["node_binary"] = os.environ["YALA_NODE_BINARY"]
        if os.environ.get("YALA_NPM_BINARY"):
            toolchain_kwargs["npm_binary"] = os.environ["YALA_NPM_BINARY"]
        if os.environ.get("YALA_LEGACY_NODE_VERSION"):
            toolchain_kwargs["legacy_node_version"] = os.environ["YALA_LEGACY_NODE_VERSION"]

        instance_kwargs: dict[str, Any] = {}
        if os.environ.get("YALA_UPLOAD_TIMEOUT"):
            instance_kwargs["upload_timeout"] = int(os.environ["YALA_UPLOAD_TIMEOUT"])

        return cls(
            project_root=Path(os.environ.get("YALA_PROJECT_DIR", ".")),
            match_mode=MatchMode(os.environ.get("YALA_MATCH_MODE", MatchMode.EXACT.value)),
            debug=os.environ.get("YALA_DEBUG", "").lower() in ("1", "true", "yes"),
            toolchain=ToolchainConfig(**toolchain_kwargs),
            instance=InstanceConfig(**instance_kwargs),
        )
