"""Data models for the OCI bundle written for the sandbox runtime.

Field names follow the OCI runtime-spec ``config.json`` schema exactly; the
runtime reads the document once at container start.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OCI_VERSION = "1.0.0"
MAX_ID = 2**32 - 1


class MountEntry(BaseModel):
    """A read-only bind mount exposing one host path inside the sandbox."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    destination: str = Field(..., description="Path as seen by the guest (the original path).")
    source: str = Field(..., description="Symlink-free real path bound underneath it.")
    type: Literal["bind"] = "bind"
    options: list[Literal["ro"]] = Field(default_factory=lambda: ["ro"])


class Identity(BaseModel):
    """The user the guest process runs as."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    uid: int = Field(..., ge=0, le=MAX_ID)
    gid: int = Field(..., ge=0, le=MAX_ID)
    username: str = Field(..., min_length=1)


class ProcessSpec(BaseModel):
    """The ``process`` section of the runtime spec."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    args: list[str] = Field(..., min_length=1)
    env: list[str] = Field(default_factory=list, description="KEY=VALUE pairs; last wins.")
    cwd: str
    user: Identity
    # The guest never receives any capability. The only accepted value is None.
    capabilities: None = None


class RootSpec(BaseModel):
    """The ``root`` section: an empty host directory."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str


class SandboxSpec(BaseModel):
    """Complete runtime description serialized to ``config.json``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    oci_version: str = Field(default=OCI_VERSION, alias="ociVersion")
    process: ProcessSpec
    hostname: str
    root: RootSpec
    mounts: list[MountEntry] = Field(default_factory=list)

    def to_document(self) -> dict[str, object]:
        """Return the JSON-ready mapping using the runtime's field names."""
        return self.model_dump(mode="json", by_alias=True)
