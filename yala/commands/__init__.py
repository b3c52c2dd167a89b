"""One coroutine per CLI command. Each raises on failure; ``yala.cli`` reports it."""

from yala.commands.components import add_action, add_property, create_component, delete_component
from yala.commands.deploy import deploy
from yala.commands.project import create_xml, develop, setup

__all__ = [
    "add_action",
    "add_property",
    "create_component",
    "create_xml",
    "delete_component",
    "deploy",
    "develop",
    "setup",
]
