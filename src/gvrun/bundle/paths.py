"""Symlink resolution for paths entering the mount allowlist.

The sandbox runtime bind-mounts the literal source path. A file reachable only
through a symlink chain would be invisible inside the sandbox even though the
symlink itself appears mounted, so every source is fully resolved first.
"""

from __future__ import annotations

import errno
import os

from gvrun.errors import ResolutionError


def resolve_path(path: str | os.PathLike[str]) -> str:
    """Return the canonical absolute form of *path* with every symlink resolved.

    The final component is resolved too. Relative paths are taken relative to
    the current working directory.

    Raises:
        ResolutionError: If any component does not exist or a symlink loop
            is detected.
    """
    raw = os.fspath(path)
    if not raw:
        raise ResolutionError(raw, "empty path")

    try:
        return os.path.realpath(raw, strict=True)
    except OSError as exc:
        if exc.errno == errno.ELOOP:
            reason = "symlink loop"
        else:
            reason = exc.strerror or str(exc)
        raise ResolutionError(raw, reason) from exc
