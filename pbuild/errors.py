"""Exceptions raised by pbuild."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BuildResult


class PbuildError(RuntimeError):
    """Known failure; the CLI prints the message and exits 1."""


class ConfigurationMissing(PbuildError):
    def __init__(self, keys: list[str], message: str) -> None:
        self.keys = keys
        super().__init__(message)


class RepositoryStateInvalid(PbuildError):
    """Detached HEAD or a remote branch that cannot be resolved."""


class Declined(PbuildError):
    """The user answered "no" to a confirmation prompt."""

    def __init__(self) -> None:
        super().__init__("Aborted.")


class RemoteTriggerFailure(PbuildError):
    def __init__(self, message: str, result: BuildResult | None = None) -> None:
        self.result = result
        super().__init__(message)


class CredentialsInvalid(RemoteTriggerFailure):
    """The build service rejected the configured API key."""
