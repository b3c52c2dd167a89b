"""``deploy``: push the project to the instance and optionally save a zipped copy.

With the legacy node toolchain the registry is shimmed for the duration of
the ``snc`` deploy (see ``yala.registry.shim``) and restored afterwards,
whether the deploy succeeds or not.
"""

from __future__ import annotations

from pathlib import Path

from yala.commands.checks import choose_profile, require_node, required
from yala.config import Config
from yala.errors import ExternalToolFailure, NotFoundError
from yala.instance.archive import check_archive_name, create_project_archive
from yala.instance.client import InstanceClient
from yala.prompts import Prompter
from yala.registry.shim import DeployShim
from yala.registry.store import load_registry
from yala.toolchain.snc import SncClient
from yala.utils import console, print_header, print_info, print_success, print_warning


async def deploy(config: Config, prompter: Prompter, force: bool = False) -> None:
    node_version = await require_node(config)
    paths = config.paths

    shim = DeployShim(paths.registry_path, paths.backup_path)
    if shim.recover():
        print_warning(f"Restored now-ui.json from {paths.backup_path.name} left by an earlier deploy")
    load_registry(paths.registry_path)

    snc = SncClient(config.toolchain.snc_binary, cwd=paths.root)
    print_header("Select Deploy Profile")
    profile = await choose_profile(snc, prompter)

    legacy = node_version == config.toolchain.legacy_node_version
    print_header("Deploying to ServiceNow")
    with shim.applied(enabled=legacy):
        result = await snc.deploy(profile, force=legacy or force)
    if not result.success:
        raise ExternalToolFailure(
            f"SN Deploy failed: {result.failure}",
            command="snc ui-component deploy",
            output=result.output,
        )

    await store_code(config, prompter, snc, profile)
    print_success("\n🎉 Deploy successful! 🎉\n")


async def store_code(config: Config, prompter: Prompter, snc: SncClient, profile: str) -> None:
    """Offer to zip the project and attach the zip to the app record."""
    print_header("Save Project")
    if not prompter.confirm(
        "Would you like to save a zip of this project locally and on the instance?",
        default=True,
    ):
        return

    root = config.project_root.resolve()
    name = prompter.text(
        "What would you like to call your zipped project?",
        validate=check_archive_name,
        default=root.name,
    )
    with console.status(f"[blue]Creating '{name}.zip', this may take a few moments[/blue]"):
        archive = create_project_archive(root, name)
    print_success(f"{archive.name} created")

    await save_to_instance(config, prompter, snc, profile, archive)


async def save_to_instance(
    config: Config, prompter: Prompter, snc: SncClient, profile: str, archive: Path
) -> None:
    scope = load_registry(config.paths.registry_path).scope_name
    profiles = await snc.list_profiles()
    if profile not in profiles:
        raise NotFoundError(f"Profile {profile} not found in snc configuration")
    host = profiles[profile].get("host", "")
    username = profiles[profile].get("username", "")

    print_info(
        f"\nEnter the password for your '{profile}' profile to save a copy of your "
        "project to the instance"
    )
    password = prompter.text("Password:", validate=required, password=True)

    client = InstanceClient(
        host,
        username,
        password,
        timeout=config.instance.request_timeout,
        upload_timeout=config.instance.upload_timeout,
        app_table=config.instance.app_table,
    )
    with console.status(f"[blue]Saving '{archive.name}' to '{host}'[/blue]"):
        result = await client.save_project_archive(scope, archive)
    if not result.success:
        raise ExternalToolFailure(
            f"Error while saving to instance: {result.error}", command=f"upload to {host}"
        )
    print_success(f"{archive.name} saved to {host}")
