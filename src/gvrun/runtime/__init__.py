"""Host-side runtime steps — file limits, signals and runtime invocation."""

from gvrun.runtime.invoker import build_runtime_command, container_name, invoke
from gvrun.runtime.limits import (
    FILE_LIMIT,
    ResourceLimitState,
    check_file_limit,
    raise_file_limit,
    read_file_limit,
)
from gvrun.runtime.signals import exit_on_signals, relay_signals

__all__ = [
    "FILE_LIMIT",
    "ResourceLimitState",
    "build_runtime_command",
    "check_file_limit",
    "container_name",
    "exit_on_signals",
    "invoke",
    "raise_file_limit",
    "read_file_limit",
    "relay_signals",
]
