"""Resolve the non-privileged user that asked for the sandboxed run.

The launcher runs under sudo, so the process identity is root. sudo records
the original caller in ``SUDO_UID``, ``SUDO_GID`` and ``SUDO_USER``; the guest
runs as that user.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from gvrun.bundle.models import MAX_ID, Identity
from gvrun.errors import IdentityError

if TYPE_CHECKING:
    from collections.abc import Mapping

UID_VAR = "SUDO_UID"
GID_VAR = "SUDO_GID"
USER_VAR = "SUDO_USER"


def _lookup(environ: Mapping[str, str], name: str, what: str) -> str:
    value = environ.get(name)
    if value is None:
        raise IdentityError(f"unable to determine original {what}; did you run under sudo?")
    return value


def _parse_id(value: str, name: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise IdentityError(f"error converting {name}={value!r} to uint32")
    parsed = int(value, 10)
    if parsed > MAX_ID:
        raise IdentityError(f"error converting {name}={value!r} to uint32: out of range")
    return parsed


def resolve_identity(environ: Mapping[str, str] | None = None) -> Identity:
    """Return the uid, gid and username of the user that invoked sudo.

    Raises:
        IdentityError: If any of the three values is missing or malformed.
    """
    env = os.environ if environ is None else environ

    uid = _parse_id(_lookup(env, UID_VAR, "uid"), UID_VAR)
    gid = _parse_id(_lookup(env, GID_VAR, "gid"), GID_VAR)
    username = _lookup(env, USER_VAR, "username")
    if not username:
        raise IdentityError(f"{USER_VAR} is empty; did you run under sudo?")

    return Identity(uid=uid, gid=gid, username=username)


def root_identity() -> Identity:
    """Identity used by profiles that run the guest as root."""
    return Identity(uid=0, gid=0, username="root")
