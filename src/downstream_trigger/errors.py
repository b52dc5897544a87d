"""Error taxonomy for the downstream build trigger."""

from __future__ import annotations


class TriggerError(Exception):
    """Base class for every error raised by this package."""


class CommitResolutionError(TriggerError):
    """Raised when a git query for the current commit fails."""

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr}"
        return base


class TriggerRequestError(TriggerError):
    """Raised when the CI provider refuses, or never receives, a build request."""

    def __init__(self, message: str, *, slug: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.slug = slug
        self.status_code = status_code


class MissingCredentialError(TriggerError, ValueError):
    """Raised when the CI provider API token is empty."""


class TargetConfigError(TriggerError, ValueError):
    """Raised when the trigger target table cannot be loaded."""
