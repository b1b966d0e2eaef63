"""Pydantic models for launcher configuration.

Configuration is an explicit value handed to the launcher; no component reads
process-wide settings on its own.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gvrun.bundle.mounts import DEFAULT_LAYOUTS, LibraryLayout
from gvrun.runtime.limits import FILE_LIMIT

DEFAULT_HOSTNAME = "runsc-gvrun"
DEFAULT_CONTAINER_PREFIX = "gvrun"


class Profile(str, Enum):
    """Named launch profile."""

    USER = "user"
    DEBUG_ROOT = "debug-root"


class ProfileSettings(BaseModel):
    """What a profile changes about the launch."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    impersonate_user: bool = Field(
        default=True,
        description="Run the guest as the sudo caller rather than root.",
    )
    debug_flags: list[str] = Field(
        default_factory=list,
        description="Extra global flags passed to the runtime.",
    )


PROFILES: dict[Profile, ProfileSettings] = {
    Profile.USER: ProfileSettings(
        description="Run as the invoking sudo user.",
        impersonate_user=True,
    ),
    Profile.DEBUG_ROOT: ProfileSettings(
        description="Run as root with runtime strace and debug logs in /tmp/.",
        impersonate_user=False,
        debug_flags=["--strace", "--debug", "--debug-log=/tmp/"],
    ),
}


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class LauncherConfig(BaseModel):
    """Everything the launcher needs besides the guest command line."""

    model_config = ConfigDict(extra="forbid")

    runtime: str | None = Field(default=None, description="Path to the runsc binary.")
    profile: Profile = Profile.USER
    extra_env: list[str] = Field(
        default_factory=list,
        description="KEY=VALUE pairs appended to the guest environment.",
    )
    extra_dirs: list[str] = Field(
        default_factory=list,
        description="Extra files or directories exposed read-only.",
    )
    hostname: str = DEFAULT_HOSTNAME
    container_prefix: str = DEFAULT_CONTAINER_PREFIX
    file_limit: int = Field(default=FILE_LIMIT, gt=0)
    tmp_root: str | None = Field(default=None, description="Parent directory for bundles.")
    library_layouts: list[LibraryLayout] = Field(default_factory=lambda: list(DEFAULT_LAYOUTS))
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    @field_validator("extra_env")
    @classmethod
    def _validate_extra_env(cls, value: list[str]) -> list[str]:
        for item in value:
            key, sep, _ = item.partition("=")
            if not sep or not key:
                msg = f"extra_env entry {item!r} must have the form KEY=VALUE"
                raise ValueError(msg)
        return value

    @field_validator("extra_dirs")
    @classmethod
    def _validate_extra_dirs(cls, value: list[str]) -> list[str]:
        if any(not item for item in value):
            msg = "extra_dirs entries must not be empty"
            raise ValueError(msg)
        return value

    @property
    def profile_settings(self) -> ProfileSettings:
        return PROFILES[self.profile]
