"""Environment checks and prompts shared by several commands."""

from __future__ import annotations

from yala.config import Config
from yala.errors import ExternalToolFailure, ValidationError
from yala.prompts import Prompter
from yala.toolchain.node import check_node_version
from yala.toolchain.snc import SncClient
from yala.utils import console, print_error, print_success, print_warning

CREATE_PROFILE = "Create a new profile"
NOW_CLI_URL = (
    "https://store.servicenow.com/sn_appstore_store.do#!/store/application/"
    "9085854adbb52810122156a8dc961910"
)


def required(value: str) -> str:
    """Prompt validator for answers that may not be blank."""
    if not value:
        raise ValidationError("A value is required")
    return value


async def require_node(config: Config) -> str:
    """Return the node version, or raise if it is not a supported one."""
    supported = config.toolchain.supported_node_versions
    with console.status("[blue]Checking node version[/blue]"):
        version = await check_node_version(supported, config.toolchain.node_binary)

    if version is None:
        print_error("Running incompatible version of node")
        wanted = " or ".join(f"v{v}" for v in supported)
        print_warning(
            f"In order to use the Now CLI you must be running node {wanted}.\n"
            "Check the node versions you have installed by running 'nvm list', then switch "
            "with 'nvm use <version>' or install one with 'nvm install <version>'."
        )
        raise ExternalToolFailure("Running an incompatible node.js version", command="node --version")

    print_success("Running compatible version of Node.js")
    return version


async def ensure_snc(snc: SncClient) -> None:
    """Check that ``snc`` and its ui-component extension are installed.

    The extension is added automatically when only it is missing.
    """
    with console.status("[blue]Checking to see if the Now CLI is installed[/blue]"):
        installed = await snc.is_installed()

    if not installed:
        print_error("Now CLI not installed")
        print_warning(
            "In order to use the Yansa Labs Component CLI you must have the Now CLI and its "
            f"ui-component extension installed.\nInstall the Now CLI here: {NOW_CLI_URL}"
        )
        raise ExternalToolFailure("Now CLI not installed", command=snc.binary)

    if not await snc.has_ui_extension():
        print_warning("Now CLI installed, but the ui-component extension isn't")
        with console.status("[blue]Adding ui-component extension, this may take a few moments[/blue]"):
            added = await snc.add_ui_extension()
        if not added:
            raise ExternalToolFailure(
                "Unable to automatically add ui-component extension, add the extension "
                "manually by running 'snc extension add --name ui-component'",
                command=f"{snc.binary} extension add --name ui-component",
            )
        print_success("ui-component extension added")

    print_success("Now CLI and ui-component extension installed")


async def choose_profile(snc: SncClient, prompter: Prompter) -> str:
    """Let the user pick an existing ``snc`` profile or create a new one."""
    profiles = await snc.list_profiles()
    profile = prompter.select(
        "Select the profile you would like to use:", [*profiles, CREATE_PROFILE]
    )
    if profile == CREATE_PROFILE:
        name = prompter.text("New profile name:", validate=required)
        profile = await snc.create_profile(name)
    return profile
