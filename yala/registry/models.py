"""Pydantic v2 models for the ``now-ui.json`` component registry.

Field names are snake_case in Python and camelCase on disk (via aliases).
Every model allows extra keys so hand-edited registries survive a
load/save cycle, and documents are dumped with ``exclude_unset`` so keys
that were never in the file are not invented on save.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ComponentKind(str, Enum):
    """Where a component lives. Only deployed components are registered."""
    DEPLOYED = "Deployed component"
    INNER = "Inner component"


class FieldType(str, Enum):
    """Property field types UI Builder understands."""
    CHOICE = "choice"
    CONDITION_STRING = "condition_string"
    FIELD = "field"
    FIELD_LIST = "field_list"
    HTML = "html"
    ICON = "icon"
    LIST = "list"
    STRING = "string"
    TABLE_NAME = "table_name"
    REFERENCE = "reference"
    JSON = "json"
    NUMBER = "number"
    CSS = "css"
    URL = "url"


DEFAULT_ICON = "document-outline"
DEFAULT_CATEGORY = "primitives"
DEFAULT_ASSOCIATED_TYPES = ["global.core", "global.landing-page"]


class _RegistryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ---------------------------------------------------------------------------
# Component parts
# ---------------------------------------------------------------------------

class UIBuilderDescriptor(_RegistryModel):
    """How the component shows up in UI Builder's toolbox."""
    associated_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ASSOCIATED_TYPES), alias="associatedTypes"
    )
    label: str = Field(default="")
    icon: str = Field(default=DEFAULT_ICON)
    description: str = Field(default="")
    category: str = Field(default=DEFAULT_CATEGORY)


class PropertyEntry(_RegistryModel):
    """A configurable component property.

    ``defaultValue`` is usually a string but hand-edited registries may hold
    numbers, booleans or JSON values; they are kept as written.
    """
    name: str = Field(..., min_length=1)
    label: str = Field(default="")
    required: bool = Field(default=False)
    read_only: bool = Field(default=False, alias="readOnly")
    description: str = Field(default="")
    field_type: FieldType = Field(default=FieldType.STRING, alias="fieldType")
    default_value: Any = Field(default=None, alias="defaultValue")

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_default(cls, data: Any) -> Any:
        # An empty default is stored as no key at all. 0 and false are values.
        if isinstance(data, dict):
            for key in ("defaultValue", "default_value"):
                if key in data and (data[key] is None or data[key] == ""):
                    data = {k: v for k, v in data.items() if k != key}
        return data


class ActionEntry(_RegistryModel):
    """An action the component dispatches.

    New actions get a one-element list holding a string-to-string mapping
    (or an empty mapping for an advanced payload). An advanced payload is
    then written by hand and may be any JSON value, so it is not narrowed.
    """
    name: str = Field(..., min_length=1)
    label: str = Field(default="")
    description: str = Field(default="")
    payload: Any = Field(default_factory=lambda: [{}])


class ComponentEntry(_RegistryModel):
    """A registered (deployed) component."""
    inner_components: list[str] = Field(default_factory=list, alias="innerComponents")
    ui_builder: UIBuilderDescriptor = Field(
        default_factory=UIBuilderDescriptor, alias="uiBuilder"
    )
    properties: list[PropertyEntry] = Field(default_factory=list)
    actions: list[ActionEntry] = Field(default_factory=list)

    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]

    def action_names(self) -> list[str]:
        return [a.name for a in self.actions]


# ---------------------------------------------------------------------------
# Root document
# ---------------------------------------------------------------------------

class RegistryDocument(_RegistryModel):
    """The whole ``now-ui.json`` file."""
    scope_name: str = Field(default="", alias="scopeName")
    components: dict[str, ComponentEntry] = Field(default_factory=dict)

    def to_json_dict(self) -> dict[str, Any]:
        """Return the on-disk representation (camelCase, no invented keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
