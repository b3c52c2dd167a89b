"""Unit tests for the exception hierarchy (yala.errors)."""

from __future__ import annotations

import pytest

from yala.errors import (
    DuplicateError,
    ExternalToolFailure,
    IOFailure,
    NotFoundError,
    RegistryFormatError,
    ValidationError,
    YalaError,
)
from yala.registry.lifecycle import DeleteIncompleteError


@pytest.mark.unit
@pytest.mark.parametrize(
    "exc_type",
    [ValidationError, NotFoundError, DuplicateError, RegistryFormatError, IOFailure],
)
def test_all_errors_share_base(exc_type):
    assert issubclass(exc_type, YalaError)
    assert str(exc_type("message")) == "message"


@pytest.mark.unit
def test_external_tool_failure_carries_context():
    exc = ExternalToolFailure("deploy failed", command="snc ui-component deploy", output="log")
    assert isinstance(exc, YalaError)
    assert str(exc) == "deploy failed"
    assert exc.command == "snc ui-component deploy"
    assert exc.output == "log"


@pytest.mark.unit
def test_delete_incomplete_is_io_failure():
    exc = DeleteIncompleteError("stopped", ["removed folder"])
    assert isinstance(exc, IOFailure)
    assert exc.completed == ["removed folder"]
