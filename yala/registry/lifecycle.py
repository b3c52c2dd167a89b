"""Create, delete and edit components.

The module has two layers:

* pure functions that mutate a ``RegistryDocument`` in memory
  (``register_component``, ``add_action`` ...) plus the name checks the
  prompts use as validators;
* ``ComponentManager``, which loads the registry, applies one of those
  functions, saves it, and keeps the barrel/harness files and component
  folders in step.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from yala.config import Config, ProjectPaths
from yala.errors import DuplicateError, IOFailure, NotFoundError, ValidationError
from yala.registry.models import (
    DEFAULT_ASSOCIATED_TYPES,
    DEFAULT_CATEGORY,
    DEFAULT_ICON,
    ActionEntry,
    ComponentEntry,
    ComponentKind,
    PropertyEntry,
    RegistryDocument,
    UIBuilderDescriptor,
)
from yala.registry.store import load_registry, save_registry
from yala.registry.sync import ArtifactSync
from yala.scaffolder.generator import ComponentGenerator

_ACTION_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")


# ---------------------------------------------------------------------------
# Name rules
# ---------------------------------------------------------------------------


def check_component_name(value: str) -> str:
    """Raise ``ValidationError`` unless *value* is a usable component name."""
    if any(ch.isspace() for ch in value):
        raise ValidationError("The component name cannot contain spaces")
    if "-" not in value:
        raise ValidationError("Component names must include a ' - ' character")
    return value


def check_component_available(name: str, paths: ProjectPaths) -> str:
    """Raise ``ValidationError`` if a folder for *name* already exists."""
    for inner in (False, True):
        if paths.component_dir(name, inner=inner).exists():
            raise ValidationError("A component with that name already exists")
    return name


def check_action_name(value: str, existing: Iterable[str] = ()) -> str:
    """Raise ``ValidationError`` unless *value* is a new UPPER_SNAKE_CASE name."""
    if not _ACTION_NAME.match(value):
        raise ValidationError("Actions must be UPPER_SNAKE_CASED")
    if value in existing:
        raise ValidationError(f"Action {value} already exists for this component")
    return value


def check_property_name(value: str, existing: Iterable[str] = ()) -> str:
    """Raise ``ValidationError`` unless *value* is a new, non-empty name."""
    if not value:
        raise ValidationError("Name required")
    if value in existing:
        raise ValidationError(f"Property {value} already exists for this component")
    return value


def instance_id(doc: RegistryDocument) -> str:
    """The instance identifier: second ``_`` segment of ``scopeName``."""
    parts = doc.scope_name.split("_")
    if len(parts) < 2 or not parts[1]:
        raise ValidationError(
            f"Cannot derive an instance id from scopeName {doc.scope_name!r}"
        )
    return parts[1]


def qualified_component_name(instance: str, short_name: str) -> str:
    """Prefix a short name the way the platform expects (``x-<instance>-<name>``)."""
    return f"x-{instance}-{short_name}"


# ---------------------------------------------------------------------------
# Document operations
# ---------------------------------------------------------------------------


def register_component(
    doc: RegistryDocument,
    name: str,
    kind: ComponentKind,
    label: str = "",
    description: str = "",
) -> bool:
    """Add a registry entry for a deployed component.

    Inner components are never registered and an existing entry is left
    alone, so calling this twice has the same effect as calling it once.

    Returns:
        ``True`` if an entry was added.
    """
    if kind is not ComponentKind.DEPLOYED or name in doc.components:
        return False

    doc.components[name] = ComponentEntry(
        inner_components=[],
        ui_builder=UIBuilderDescriptor(
            associated_types=list(DEFAULT_ASSOCIATED_TYPES),
            label=label,
            icon=DEFAULT_ICON,
            description=description,
            category=DEFAULT_CATEGORY,
        ),
        properties=[],
        actions=[],
    )
    return True


def remove_component(doc: RegistryDocument, name: str) -> ComponentEntry:
    """Remove and return the entry for *name*."""
    if name not in doc.components:
        raise NotFoundError(f"Component {name} is not in now-ui.json")
    return doc.components.pop(name)


def _component(doc: RegistryDocument, name: str) -> ComponentEntry:
    try:
        return doc.components[name]
    except KeyError:
        raise NotFoundError(f"Component {name} is not in now-ui.json") from None


def add_property(doc: RegistryDocument, component: str, prop: PropertyEntry) -> RegistryDocument:
    """Append *prop* to *component*'s properties.

    Raises:
        NotFoundError: The component is not registered.
        DuplicateError: A property with the same name exists; nothing changes.
    """
    entry = _component(doc, component)
    if prop.name in entry.property_names():
        raise DuplicateError(
            f"Property {prop.name} already exists for {component}, add property aborted"
        )
    # Reassign so the field is marked as set even if the file lacked it.
    entry.properties = [*entry.properties, prop]
    return doc


def add_action(doc: RegistryDocument, component: str, action: ActionEntry) -> RegistryDocument:
    """Append *action* to *component*'s actions.

    Raises:
        NotFoundError: The component is not registered.
        DuplicateError: An action with the same name exists; nothing changes.
    """
    entry = _component(doc, component)
    if action.name in entry.action_names():
        raise DuplicateError(
            f"Action {action.name} already exists for {component}, add action aborted"
        )
    entry.actions = [*entry.actions, action]
    return doc


# ---------------------------------------------------------------------------
# ComponentManager
# ---------------------------------------------------------------------------


class DeleteIncompleteError(IOFailure):
    """A delete stopped part way; earlier steps were not rolled back."""

    def __init__(self, message: str, completed: list[str]) -> None:
        self.completed = completed
        super().__init__(message)


class ComponentManager:
    """Applies component operations to a project on disk.

    Each public method reads ``now-ui.json``, changes it, and writes it back
    whole, coordinating the barrel/harness edits and component folders.
    """

    def __init__(
        self,
        paths: ProjectPaths,
        sync: ArtifactSync | None = None,
        generator: ComponentGenerator | None = None,
    ) -> None:
        self.paths = paths
        self.sync = sync or ArtifactSync(paths.barrel_path, paths.harness_path)
        self.generator = generator or ComponentGenerator(paths)

    @classmethod
    def for_config(cls, config: Config) -> "ComponentManager":
        paths = config.paths
        return cls(
            paths,
            sync=ArtifactSync(paths.barrel_path, paths.harness_path, config.match_mode),
        )

    def load(self) -> RegistryDocument:
        return load_registry(self.paths.registry_path)

    def save(self, doc: RegistryDocument) -> Path:
        return save_registry(self.paths.registry_path, doc)

    def component_names(self) -> list[str]:
        """Registered component names, in file order."""
        names = list(self.load().components)
        if not names:
            raise NotFoundError("There aren't any components in now-ui.json")
        return names

    def create(
        self,
        name: str,
        kind: ComponentKind,
        label: str = "",
        description: str = "",
    ) -> list[Path]:
        """Create a component: registry entry, barrel/harness lines, source folder.

        Returns:
            The source files that were written.
        """
        check_component_name(name)
        check_component_available(name, self.paths)

        if kind is ComponentKind.DEPLOYED:
            doc = self.load()
            if register_component(doc, name, kind, label, description):
                self.sync.add(name)
                self.save(doc)

        return self.generator.create_component_files(name, kind)

    def delete(self, name: str) -> list[str]:
        """Delete a component's folder, registry entry and barrel/harness lines.

        The steps run in order and are independent: if one fails, the ones
        before it stay applied and ``DeleteIncompleteError`` lists them.

        Returns:
            Descriptions of the steps that were applied.
        """
        doc = self.load()
        if name not in doc.components:
            raise NotFoundError(f"Component {name} is not in now-ui.json")

        completed: list[str] = []
        try:
            folder = self.generator.remove_component_files(name)
            completed.append(f"removed folder {folder}" if folder else "no folder to remove")

            remove_component(doc, name)
            self.save(doc)
            completed.append("removed now-ui.json entry")

            removed = self.sync.remove(name)
            completed.append(
                f"removed {removed['barrel']} line(s) from src/index.js and "
                f"{removed['harness']} line(s) from example/element.js"
            )
        except (IOFailure, NotFoundError) as exc:
            done = "; ".join(completed) or "nothing"
            raise DeleteIncompleteError(
                f"Deleting {name} stopped part way ({exc}). Already applied: {done}. "
                "Check src/, now-ui.json, src/index.js and example/element.js by hand.",
                completed,
            ) from exc
        return completed

    def remove_default_component(self) -> None:
        """Strip a freshly scaffolded project back to zero components."""
        self.generator.reset_sources()
        doc = self.load()
        doc.components = {}
        self.save(doc)

    def add_property(self, component: str, prop: PropertyEntry) -> RegistryDocument:
        doc = add_property(self.load(), component, prop)
        self.save(doc)
        return doc

    def add_action(self, component: str, action: ActionEntry) -> RegistryDocument:
        doc = add_action(self.load(), component, action)
        self.save(doc)
        return doc
