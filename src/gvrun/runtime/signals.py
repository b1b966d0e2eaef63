"""Signal handling while a launch is in progress.

Terminal-generated signals (Ctrl-C, Ctrl-\\) reach the whole foreground
process group, so the runtime already receives them; the launcher only has to
survive them and keep waiting, as :func:`os.system` does. Signals addressed to
the launcher alone are handed on to the runtime instead.

Handlers can only be installed from the main thread. Elsewhere both helpers
leave signal dispositions untouched.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import subprocess
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

IGNORED_SIGNALS = (signal.SIGINT, signal.SIGQUIT)
FORWARDED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _in_main_thread() -> bool:
    return threading.current_thread() is threading.main_thread()


@contextlib.contextmanager
def _installed(handlers: dict[signal.Signals, Any]) -> Iterator[None]:
    previous: dict[signal.Signals, Any] = {}
    try:
        for signum, handler in handlers.items():
            previous[signum] = signal.signal(signum, handler)
        yield
    finally:
        for signum, handler in previous.items():
            # None means the old handler was not installed from Python.
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)


@contextlib.contextmanager
def relay_signals(proc: subprocess.Popen[Any]) -> Iterator[None]:
    """Ignore terminal signals and forward termination requests to *proc*.

    Enter only after *proc* has started, so the child keeps the default
    dispositions.
    """
    if not _in_main_thread():
        yield
        return

    def forward(signum: int, _frame: object) -> None:
        logger.debug("Forwarding signal %d to runtime pid %d", signum, proc.pid)
        proc.send_signal(signum)

    handlers: dict[signal.Signals, Any] = {sig: signal.SIG_IGN for sig in IGNORED_SIGNALS}
    handlers.update({sig: forward for sig in FORWARDED_SIGNALS})
    with _installed(handlers):
        yield


@contextlib.contextmanager
def exit_on_signals() -> Iterator[None]:
    """Turn termination requests into :class:`SystemExit` so cleanup runs.

    The exit status follows the shell convention of ``128 + signum``.
    """
    if not _in_main_thread():
        yield
        return

    def terminate(signum: int, _frame: object) -> None:
        logger.debug("Received signal %d; unwinding", signum)
        raise SystemExit(128 + signum)

    with _installed(dict.fromkeys(FORWARDED_SIGNALS, terminate)):
        yield
