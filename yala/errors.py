"""Exception hierarchy shared by every yala command.

Each command catches ``Exception`` at its outer boundary (see ``yala.cli``),
so these types exist to carry a clear message and, for external tools, the
command line and captured output that explain the failure.
"""

from __future__ import annotations


class YalaError(Exception):
    """Base class for all errors raised by yala."""


class ValidationError(YalaError):
    """User input broke a naming or format rule.

    Prompt validators raise this; ``RichPrompter`` shows the message and asks
    again instead of letting it escape.
    """


class NotFoundError(YalaError):
    """A required file or selectable entity does not exist."""


class DuplicateError(YalaError):
    """An entry with the same name already exists."""


class RegistryFormatError(YalaError):
    """``now-ui.json`` exists but is not a valid registry document."""


class IOFailure(YalaError):
    """A filesystem operation failed."""


class ExternalToolFailure(YalaError):
    """An external tool (``snc``, ``node``, ``npm``, the instance API) failed."""

    def __init__(self, message: str, command: str = "", output: str = "") -> None:
        self.command = command
        self.output = output
        super().__init__(message)
