"""Shared fixtures for end-to-end runs against a real runsc.

These tests need root privileges obtained through sudo (for ``SUDO_UID`` and
friends) and the path of a runsc binary in ``GVRUN_E2E_RUNTIME``.
"""

from __future__ import annotations

import os
import subprocess
import sys
from typing import TYPE_CHECKING

import pytest
import yaml

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path


def _skip_reason() -> str | None:
    if not os.environ.get("GVRUN_E2E_RUNTIME"):
        return "GVRUN_E2E_RUNTIME not set"
    if os.geteuid() != 0:
        return "end-to-end runs need root"
    if "SUDO_UID" not in os.environ:
        return "end-to-end runs need to be started through sudo"
    return None


@pytest.fixture
def e2e_runtime() -> str:
    reason = _skip_reason()
    if reason:
        pytest.skip(reason)
    return os.environ["GVRUN_E2E_RUNTIME"]


@pytest.fixture
def e2e_bundles(tmp_path: Path) -> Path:
    bundles = tmp_path / "bundles"
    bundles.mkdir()
    return bundles


@pytest.fixture
def run_gvrun(
    e2e_runtime: str, e2e_bundles: Path, tmp_path: Path
) -> Callable[..., subprocess.CompletedProcess[str]]:
    """Return a helper running ``gvrun run`` with bundles kept in e2e_bundles."""
    config = tmp_path / "gvrun.yaml"
    # The guest runs as the sudo caller and must be able to enter its cwd.
    workdir = tmp_path / "work"
    workdir.mkdir()
    workdir.chmod(0o755)
    config.write_text(yaml.safe_dump({"runtime": e2e_runtime, "tmp_root": str(e2e_bundles)}))

    def _run(argv: Sequence[str], *options: str, timeout: float = 120) -> subprocess.CompletedProcess[str]:
        cmd = [sys.executable, "-m", "gvrun.cli", "-q", "run", "--config", str(config), *options, *argv]
        return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False, cwd=workdir)

    return _run
