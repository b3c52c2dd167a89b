"""CLI entry point for ``yala``.

Usage::

    yala setup
    yala create-component
    yala deploy --force
    yala --debug add-action

Every command runs inside one boundary: any exception aborts that command,
prints ``yala <command> failed`` (plus the raw error when ``--debug`` is
set) and turns into exit status 1. Error kinds are not told apart by exit
status.
"""

from __future__ import annotations

import argparse
import asyncio
import traceback
from collections.abc import Awaitable, Callable
from pathlib import Path

from yala import __version__
from yala.commands import (
    add_action,
    add_property,
    create_component,
    create_xml,
    delete_component,
    deploy,
    develop,
    setup,
)
from yala.config import Config
from yala.errors import YalaError
from yala.prompts import Prompter, RichPrompter
from yala.utils import (
    console,
    print_banner,
    print_debug,
    print_error,
    print_failure_banner,
    print_info,
)

Handler = Callable[[Config, Prompter, argparse.Namespace], Awaitable[None]]

COMMANDS: dict[str, tuple[str, Handler]] = {
    "setup": (
        "Setup a new custom component project",
        lambda config, prompter, args: setup(config, prompter),
    ),
    "create-component": (
        "Create a new component in your current project",
        lambda config, prompter, args: create_component(config, prompter),
    ),
    "delete-component": (
        "Delete a component from your project",
        lambda config, prompter, args: delete_component(config, prompter),
    ),
    "add-property": (
        "Add a property to a component in the now-ui.json file",
        lambda config, prompter, args: add_property(config, prompter),
    ),
    "add-action": (
        "Add an action to a component in the now-ui.json file",
        lambda config, prompter, args: add_action(config, prompter),
    ),
    "develop": (
        "Starts a development server that renders the content of 'example/element.js'",
        lambda config, prompter, args: develop(config),
    ),
    "deploy": (
        "Deploy your component to a ServiceNow instance. Add '--force' flag to force the deploy",
        lambda config, prompter, args: deploy(config, prompter, force=args.force),
    ),
    "create-xml": (
        "Export your component project to an xml update set",
        lambda config, prompter, args: create_xml(config),
    ),
}


def _build_parser() -> argparse.ArgumentParser:
    command_help = "\n".join(f"  {name:<18} {desc}" for name, (desc, _) in COMMANDS.items())
    parser = argparse.ArgumentParser(
        prog="yala",
        description="Yansa Labs' improved CLI solution for ServiceNow custom component development",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Commands:\n  {'help':<18} Print help info\n{command_help}\n",
    )
    parser.add_argument("command", nargs="*", help="Command to run (see below)")
    parser.add_argument(
        "--clear", "-c",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Clear the console (default: enabled)",
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Print debug info")
    parser.add_argument("--version", "-v", action="store_true", help="Print CLI version")
    parser.add_argument("--force", action="store_true", help="Force the deploy")
    parser.add_argument(
        "--project-dir",
        default=None,
        help="Component project root (default: current directory)",
    )
    return parser


def run_command(name: str, config: Config, prompter: Prompter, args: argparse.Namespace) -> int:
    """Run one command inside the catch-all boundary and return the exit status."""
    _, handler = COMMANDS[name]
    try:
        asyncio.run(handler(config, prompter, args))
    except (Exception, KeyboardInterrupt) as exc:
        if isinstance(exc, YalaError):
            print_error(str(exc))
        if config.debug:
            print_debug(f"{exc!r}\n\n{''.join(traceback.format_exception(exc))}")
        print_failure_banner(name)
        return 1
    return 0


def main(argv: list[str] | None = None, prompter: Prompter | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        console.print(__version__, highlight=False)
        return 0

    config = Config.from_env()
    config.clear = args.clear
    config.debug = config.debug or args.debug
    if args.project_dir:
        config.project_root = Path(args.project_dir)

    print_banner(__version__, clear=config.clear)
    if config.debug:
        print_debug(vars(args))

    if not args.command or "help" in args.command:
        parser.print_help()
        return 0

    name = args.command[0]
    if name not in COMMANDS:
        print_error(f"Unknown command: {' '.join(args.command)}\n")
        print_info("Displaying help info")
        parser.print_help()
        return 0

    return run_command(name, config, prompter or RichPrompter(), args)


if __name__ == "__main__":
    raise SystemExit(main())
