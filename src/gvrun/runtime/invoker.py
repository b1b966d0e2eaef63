"""Runtime invocation — build the runsc command line and run it.

The runtime inherits the launcher's stdin, stdout and stderr. Its exit code is
relayed unchanged; the guest's output is never inspected.
"""

from __future__ import annotations

import logging
import subprocess
import uuid
from typing import TYPE_CHECKING

from gvrun.errors import InvocationError
from gvrun.runtime.signals import relay_signals

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Writes go to an in-memory overlay, never to host storage.
OVERLAY_FLAG = "--overlay"
NETWORK_FLAG = "--network=none"


def container_name(prefix: str = "gvrun") -> str:
    """Return a container name unique to this invocation."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def build_runtime_command(
    runtime: str,
    bundle_dir: str,
    name: str,
    debug_flags: Sequence[str] = (),
) -> list[str]:
    """Build the runtime argument vector.

    Global flags precede the ``run`` action; the bundle and container name
    follow it.
    """
    cmd: list[str] = [runtime, OVERLAY_FLAG, NETWORK_FLAG]
    cmd.extend(debug_flags)
    cmd.append("run")
    cmd.extend(["--bundle", bundle_dir])
    cmd.append(name)
    return cmd


def exit_status(returncode: int) -> int:
    """Map a :mod:`subprocess` return code to a shell-style exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def invoke(command: Sequence[str]) -> int:
    """Run *command* with inherited standard streams and wait for it.

    Blocks until the runtime exits; there is no timeout. While waiting, Ctrl-C
    is left to the runtime and SIGTERM or SIGHUP is forwarded to it, so its
    own exit status is always the one returned.

    Raises:
        InvocationError: If the runtime cannot be started at all.
    """
    logger.debug("Executing %s", " ".join(command))
    try:
        proc = subprocess.Popen(list(command))
    except OSError as exc:
        raise InvocationError(command[0], str(exc)) from exc

    with relay_signals(proc):
        returncode = proc.wait()

    status = exit_status(returncode)
    logger.debug("Runtime exited with status %d", status)
    return status
