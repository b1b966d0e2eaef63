"""End-to-end runs of real guests through runsc."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    import subprocess
    from collections.abc import Callable
    from pathlib import Path

    RunGvrun = Callable[..., subprocess.CompletedProcess[str]]

pytestmark = pytest.mark.e2e


def _first_file(root: str) -> str | None:
    for dirpath, _, filenames in os.walk(root):
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if os.path.isfile(path) and not os.path.islink(path):
                return path
    return None


def test_echo(run_gvrun: RunGvrun, e2e_bundles: Path) -> None:
    result = run_gvrun(["/bin/echo", "hello"])

    assert result.returncode == 0, result.stderr
    assert result.stdout == "hello\n"
    assert list(e2e_bundles.iterdir()) == []


def test_guest_exit_code_relayed(run_gvrun: RunGvrun, e2e_bundles: Path) -> None:
    result = run_gvrun(["/bin/sh", "-c", "exit 7"])

    assert result.returncode == 7
    assert list(e2e_bundles.iterdir()) == []


def test_extra_dirs(run_gvrun: RunGvrun) -> None:
    allowed = _first_file("/etc/ssl")
    denied = _first_file("/var/log")
    if allowed is None or denied is None:
        pytest.skip("need a regular file under both /etc/ssl and /var/log")

    readable = run_gvrun(["/bin/cat", allowed], "--extra-dirs", "/etc/ssl")
    assert readable.returncode == 0, readable.stderr

    hidden = run_gvrun(["/bin/cat", denied], "--extra-dirs", "/etc/ssl")
    assert hidden.returncode != 0


def test_network_unavailable(run_gvrun: RunGvrun) -> None:
    prefix_dirs = {sys.base_prefix, os.path.dirname(sys.executable)}
    lib_dirs = [d for d in ("/lib", "/lib64", "/usr/lib", "/usr/lib64") if os.path.isdir(d)]
    extra = ",".join(sorted(prefix_dirs) + lib_dirs)
    connect = "import socket; socket.create_connection(('1.1.1.1', 53), timeout=10)"

    result = run_gvrun([sys.executable, "-c", connect], "--extra-dirs", extra, timeout=60)

    assert result.returncode != 0
    assert "Error" in result.stderr
