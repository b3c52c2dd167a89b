"""``setup``, ``develop`` and ``create-xml``."""

from __future__ import annotations

import re

from yala.commands.checks import choose_profile, ensure_snc, require_node, required
from yala.config import Config, ProjectPaths
from yala.errors import ExternalToolFailure, IOFailure, ValidationError
from yala.prompts import Prompter
from yala.registry.lifecycle import ComponentManager
from yala.toolchain.node import install_dependencies
from yala.toolchain.snc import SncClient
from yala.utils import print_header, print_info, print_success

_SCOPE = re.compile(r"^[a-z0-9_]+$")
_APP_NAME = re.compile(r"^[a-z0-9-]+$")
MAX_SCOPE_LENGTH = 18


def check_scope(value: str) -> str:
    required(value)
    if len(value) > MAX_SCOPE_LENGTH:
        raise ValidationError(f"Scopes must be at most {MAX_SCOPE_LENGTH} characters")
    if not _SCOPE.match(value):
        raise ValidationError("Scope names must be lowercased letters, numbers, or underscores")
    return value


def check_app_name(value: str) -> str:
    required(value)
    if not _APP_NAME.match(value):
        raise ValidationError(
            "Application names can only contain lowercased letters, numbers, and hyphens"
        )
    return value


async def setup(config: Config, prompter: Prompter) -> None:
    print_header("Checking requirements")
    await require_node(config)
    snc = SncClient(config.toolchain.snc_binary, cwd=config.project_root)
    await ensure_snc(snc)

    print_header("Select ServiceNow instance profile")
    profile = await choose_profile(snc, prompter)

    print_header("Create project")
    scope = prompter.text(
        "What scope do you want to create/use for your project?", validate=check_scope
    )
    name = prompter.text(
        "Enter the name of the application that this component project should be "
        "connected to:",
        validate=check_app_name,
    )
    folder = prompter.text(
        "Project folder name:", validate=required, default=f"{name}-components"
    )

    project_root = config.project_root / folder
    try:
        project_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"Unable to create {project_root}: {exc}") from exc

    print_info("\nBuilding project")
    result = await snc.create_project(profile, scope, f"{name}-components", cwd=project_root)
    if not result.success:
        raise ExternalToolFailure(
            f"Project not created: {result.failure}",
            command="snc ui-component project",
            output=result.output,
        )

    if prompter.confirm("Remove the default component from this project?"):
        ComponentManager(ProjectPaths(root=project_root)).remove_default_component()

    print_header("Installing dependencies")
    exit_code = await install_dependencies(project_root, config.toolchain.npm_binary)
    if exit_code != 0:
        raise ExternalToolFailure(
            f"npm install exited with code {exit_code}. Run it again inside '{folder}'.",
            command=f"{config.toolchain.npm_binary} install",
        )

    print_success(
        f"\n🎉 New component project created! Switch to '{folder}' and run "
        "'yala create-component' to create a component 🎉\n"
    )


async def develop(config: Config) -> None:
    await require_node(config)
    print_header("Starting development server")
    await SncClient(config.toolchain.snc_binary, cwd=config.project_root).develop()


def cli_major_version(version: str) -> int:
    try:
        return int(version.split(".")[0])
    except ValueError:
        raise ExternalToolFailure(
            f"Unrecognised ui-component version: {version!r}",
            command="snc ui-component --version",
        ) from None


async def create_xml(config: Config) -> None:
    snc = SncClient(config.toolchain.snc_binary, cwd=config.project_root)
    minimum = config.toolchain.min_update_set_cli_major
    if cli_major_version(await snc.cli_version()) < minimum:
        raise ExternalToolFailure(
            f"You must have Now CLI v{minimum} or greater installed to run this command",
            command="snc ui-component --version",
        )

    print_header("Creating Update Set")
    result = await snc.generate_update_set()
    if not result.success:
        raise ExternalToolFailure(
            f"Error while creating update set: {result.failure}",
            command="snc ui-component generate-update-set",
            output=result.output,
        )
    print_success("\n🎉 Update Set XML successfully created for this project 🎉\n")
