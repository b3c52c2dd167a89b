"""Component registry: the ``now-ui.json`` document and the files kept in sync with it.

Usage::

    from yala.registry import load_registry, save_registry, ArtifactSync
    from yala.registry.lifecycle import ComponentManager

``lifecycle`` is imported from its module directly because it depends on
the scaffolder, which itself depends on ``yala.registry.models``.
"""

from yala.registry.models import (
    ActionEntry,
    ComponentEntry,
    ComponentKind,
    FieldType,
    PropertyEntry,
    RegistryDocument,
    UIBuilderDescriptor,
)
from yala.registry.shim import DeployShim, ShimState
from yala.registry.store import load_registry, save_registry
from yala.registry.sync import ArtifactSync

__all__ = [
    "ActionEntry",
    "ArtifactSync",
    "ComponentEntry",
    "ComponentKind",
    "DeployShim",
    "FieldType",
    "PropertyEntry",
    "RegistryDocument",
    "ShimState",
    "UIBuilderDescriptor",
    "load_registry",
    "save_registry",
]
