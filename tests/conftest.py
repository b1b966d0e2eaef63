"""Shared fixtures: a fake host library layout and a sudo environment."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from gvrun.bundle.mounts import LibraryLayout
from gvrun.config.models import LauncherConfig

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def fake_layout(tmp_path: Path) -> LibraryLayout:
    """A present library layout whose loader is reached through a symlink."""
    libdir = tmp_path / "host" / "lib"
    libdir.mkdir(parents=True)
    real_loader = libdir / "ld-real.so"
    real_loader.write_text("loader")
    (libdir / "libc.so.6").write_text("libc")
    (libdir / "libpthread.so.0").write_text("pthread")
    os.symlink(real_loader, libdir / "ld.so")
    return LibraryLayout(
        name="fake",
        loader=str(libdir / "ld.so"),
        libc=str(libdir / "libc.so.6"),
        libraries=[str(libdir / "libpthread.so.0")],
    )


@pytest.fixture
def guest_binary(tmp_path: Path) -> Path:
    binary = tmp_path / "bin" / "guest"
    binary.parent.mkdir()
    binary.write_text("#!/bin/sh\necho guest\n")
    binary.chmod(0o755)
    return binary


@pytest.fixture
def sudo_env() -> dict[str, str]:
    return {"SUDO_UID": "1000", "SUDO_GID": "1000", "SUDO_USER": "alice"}


@pytest.fixture
def bundle_root(tmp_path: Path) -> Path:
    root = tmp_path / "bundles"
    root.mkdir()
    return root


@pytest.fixture
def launcher_config(fake_layout: LibraryLayout, bundle_root: Path) -> LauncherConfig:
    return LauncherConfig(
        runtime="/usr/local/bin/runsc",
        library_layouts=[fake_layout],
        tmp_root=str(bundle_root),
    )
