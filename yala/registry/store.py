"""Load and save the ``now-ui.json`` registry document.

The store always works on the complete document: it is read whole at the
start of an operation and rewritten whole at the end.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from yala.errors import IOFailure, NotFoundError, RegistryFormatError
from yala.registry.models import RegistryDocument
from yala.utils import dump_json, load_json, write_text_atomic


def load_registry(path: str | Path) -> RegistryDocument:
    """Read and validate the registry at *path*.

    Raises:
        NotFoundError: The file does not exist or cannot be read.
        RegistryFormatError: The file is not valid JSON or not a registry.
    """
    registry_path = Path(path)
    try:
        data = load_json(registry_path)
    except OSError as exc:
        raise NotFoundError(f"Unable to locate {registry_path.name}. {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RegistryFormatError(f"{registry_path.name} is not valid JSON. {exc}") from exc

    if not isinstance(data, dict):
        raise RegistryFormatError(
            f"{registry_path.name} must contain a JSON object, got {type(data).__name__}"
        )

    try:
        return RegistryDocument.model_validate(data)
    except PydanticValidationError as exc:
        raise RegistryFormatError(f"{registry_path.name} is not a valid registry. {exc}") from exc


def save_registry(path: str | Path, doc: RegistryDocument) -> Path:
    """Overwrite the registry at *path* with *doc* (2-space indented JSON)."""
    registry_path = Path(path)
    try:
        write_text_atomic(registry_path, dump_json(doc.to_json_dict()))
    except OSError as exc:
        raise IOFailure(f"Unable to write {registry_path}: {exc}") from exc
    return registry_path
