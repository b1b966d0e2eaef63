"""Tests for the OCI bundle data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gvrun.bundle.models import (
    OCI_VERSION,
    Identity,
    MountEntry,
    ProcessSpec,
    RootSpec,
    SandboxSpec,
)


def _process(**overrides: object) -> ProcessSpec:
    data: dict[str, object] = {
        "args": ["/bin/echo", "hi"],
        "cwd": "/home/alice",
        "user": Identity(uid=1000, gid=1000, username="alice"),
    }
    data.update(overrides)
    return ProcessSpec(**data)  # type: ignore[arg-type]


class TestMountEntry:
    def test_defaults(self) -> None:
        entry = MountEntry(destination="/etc/ssl", source="/etc/ssl")
        assert entry.type == "bind"
        assert entry.options == ["ro"]

    def test_only_bind_allowed(self) -> None:
        with pytest.raises(ValidationError):
            MountEntry(destination="/x", source="/x", type="tmpfs")  # type: ignore[arg-type]

    def test_only_read_only_allowed(self) -> None:
        with pytest.raises(ValidationError):
            MountEntry(destination="/x", source="/x", options=["rw"])  # type: ignore[list-item]

    def test_immutable(self) -> None:
        entry = MountEntry(destination="/x", source="/y")
        with pytest.raises(ValidationError):
            entry.source = "/z"  # type: ignore[misc]


class TestIdentity:
    def test_range(self) -> None:
        with pytest.raises(ValidationError):
            Identity(uid=-1, gid=0, username="x")
        with pytest.raises(ValidationError):
            Identity(uid=0, gid=2**32, username="x")

    def test_username_required(self) -> None:
        with pytest.raises(ValidationError):
            Identity(uid=1, gid=1, username="")


class TestProcessSpec:
    def test_capabilities_none(self) -> None:
        assert _process().capabilities is None

    def test_capabilities_cannot_be_granted(self) -> None:
        with pytest.raises(ValidationError):
            _process(capabilities={"bounding": ["CAP_SYS_ADMIN"]})

    def test_capabilities_cannot_be_assigned(self) -> None:
        proc = _process()
        with pytest.raises(ValidationError):
            proc.capabilities = ["CAP_NET_RAW"]  # type: ignore[assignment]

    def test_args_required(self) -> None:
        with pytest.raises(ValidationError):
            _process(args=[])


class TestSandboxSpec:
    def test_document_shape(self) -> None:
        spec = SandboxSpec(
            process=_process(env=["HOME=/tmp"]),
            hostname="runsc-gvrun",
            root=RootSpec(path="/tmp/gvrun1/rootfs"),
            mounts=[MountEntry(destination="/bin/echo", source="/usr/bin/echo")],
        )

        doc = spec.to_document()

        assert doc["ociVersion"] == OCI_VERSION
        assert doc["hostname"] == "runsc-gvrun"
        assert doc["root"] == {"path": "/tmp/gvrun1/rootfs"}
        assert doc["process"] == {
            "args": ["/bin/echo", "hi"],
            "env": ["HOME=/tmp"],
            "cwd": "/home/alice",
            "user": {"uid": 1000, "gid": 1000, "username": "alice"},
            "capabilities": None,
        }
        assert doc["mounts"] == [
            {"destination": "/bin/echo", "source": "/usr/bin/echo", "type": "bind", "options": ["ro"]},
        ]

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SandboxSpec(
                process=_process(),
                hostname="h",
                root=RootSpec(path="/r"),
                linux={"namespaces": []},  # type: ignore[call-arg]
            )
