"""Open-file limit adjustment for the launcher process.

sudo lowers ``RLIMIT_NOFILE`` to 1024 by default. The runtime and the guest
inherit the launcher's limit, and runsc needs far more descriptors than that.
"""

from __future__ import annotations

import logging
import resource
from typing import NamedTuple

from gvrun.errors import ResourceLimitError

logger = logging.getLogger(__name__)

FILE_LIMIT = 32768


class ResourceLimitState(NamedTuple):
    """Soft and hard ``RLIMIT_NOFILE`` values."""

    soft: int
    hard: int


def _at_least(value: int, minimum: int) -> bool:
    return value == resource.RLIM_INFINITY or value >= minimum


def read_file_limit() -> ResourceLimitState:
    """Return the current open-file limits.

    Raises:
        ResourceLimitError: If the limits cannot be read.
    """
    try:
        soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    except (OSError, ValueError) as exc:
        raise ResourceLimitError(reason=f"error getting rlimit: {exc}") from exc
    return ResourceLimitState(soft=soft, hard=hard)


def check_file_limit(minimum: int = FILE_LIMIT) -> ResourceLimitState:
    """Verify the hard limit allows a soft limit of *minimum*.

    Raises:
        ResourceLimitError: If the hard limit is below *minimum*.
    """
    state = read_file_limit()
    if not _at_least(state.hard, minimum):
        raise ResourceLimitError(soft=state.soft, hard=state.hard, required=minimum)
    return state


def raise_file_limit(minimum: int = FILE_LIMIT) -> ResourceLimitState:
    """Raise the soft open-file limit to *minimum* and return the new state.

    A soft limit already at or above *minimum* is left alone.

    Raises:
        ResourceLimitError: If the hard limit is too low or the limit cannot
            be set.
    """
    state = check_file_limit(minimum)
    if _at_least(state.soft, minimum):
        logger.debug("File limit already sufficient: %s", state)
        return state

    try:
        resource.setrlimit(resource.RLIMIT_NOFILE, (minimum, state.hard))
    except (OSError, ValueError) as exc:
        raise ResourceLimitError(reason=f"error setting rlimit: {exc}") from exc

    logger.debug("Raised file limit soft %d -> %d (hard %d)", state.soft, minimum, state.hard)
    return ResourceLimitState(soft=minimum, hard=state.hard)
