"""Shared error types for the launcher."""

from __future__ import annotations


class LauncherError(Exception):
    """Base error for all launcher failures.

    Every subclass is fatal to the current invocation.
    """


class ConfigError(LauncherError):
    """A launcher configuration file could not be read or validated."""


class ResolutionError(LauncherError):
    """A path could not be resolved to a symlink-free real path."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        msg = f"failed to resolve symlinks of {path!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class IdentityError(LauncherError):
    """The invoking (non-privileged) identity could not be determined."""


class BundleWriteError(LauncherError):
    """The bundle directory or its config.json could not be created."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        msg = f"error writing bundle at {path!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ResourceLimitError(LauncherError):
    """The open-file limit could not be raised to the required value."""

    def __init__(
        self,
        *,
        soft: int | None = None,
        hard: int | None = None,
        required: int | None = None,
        reason: str = "",
    ) -> None:
        self.soft = soft
        self.hard = hard
        self.required = required
        self.reason = reason
        if reason:
            msg = f"file limit error: {reason}"
        else:
            msg = f"file limit too low: soft={soft} hard={hard} (need {required})"
        super().__init__(msg)


class InvocationError(LauncherError):
    """The external sandbox runtime could not be started."""

    def __init__(self, runtime: str, reason: str = "") -> None:
        self.runtime = runtime
        self.reason = reason
        msg = f"failed to start runtime {runtime!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
