"""Mount allowlist construction.

The sandbox filesystem is an empty root with every accessible path bound over
it explicitly. Nothing is visible unless it appears in the list built here.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from gvrun.bundle.models import MountEntry
from gvrun.bundle.paths import resolve_path
from gvrun.errors import ResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


class LibraryLayout(BaseModel):
    """Where one installation layout keeps the minimum runtime libraries.

    A layout counts as present on the host when its ``libc`` exists. Once
    present, every path it lists must resolve.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    loader: str = Field(..., description="Dynamic linker.")
    libc: str = Field(..., description="C runtime library; doubles as the presence probe.")
    libraries: list[str] = Field(default_factory=list, description="Other required libraries.")

    def is_present(self) -> bool:
        return os.path.exists(self.libc)

    def paths(self) -> list[str]:
        return [self.loader, self.libc, *self.libraries]


DEFAULT_LAYOUTS: tuple[LibraryLayout, ...] = (
    LibraryLayout(
        name="debian-x86_64",
        loader="/lib64/ld-linux-x86-64.so.2",
        libc="/lib/x86_64-linux-gnu/libc.so.6",
        libraries=["/lib/x86_64-linux-gnu/libpthread.so.0"],
    ),
    LibraryLayout(
        name="fedora-x86_64",
        loader="/lib64/ld-linux-x86-64.so.2",
        libc="/lib64/libc.so.6",
        libraries=["/lib64/libpthread.so.0"],
    ),
    LibraryLayout(
        name="debian-aarch64",
        loader="/lib/ld-linux-aarch64.so.1",
        libc="/lib/aarch64-linux-gnu/libc.so.6",
        libraries=["/lib/aarch64-linux-gnu/libpthread.so.0"],
    ),
    LibraryLayout(
        name="grte-v4",
        loader="/usr/grte/v4/lib64/ld-linux-x86-64.so.2",
        libc="/usr/grte/v4/lib64/libc.so.6",
        libraries=["/usr/grte/v4/lib64/libpthread.so.0"],
    ),
)


def mount_for(path: str, cwd: str | None = None) -> MountEntry:
    """Return a read-only bind mount of *path* backed by its resolved location.

    Binding the resolved target avoids having to also mount every symlink
    along the way. A relative *path* is taken relative to *cwd*, which
    defaults to the process working directory.
    """
    if os.path.isabs(path):
        destination = path
    else:
        destination = os.path.normpath(os.path.join(cwd or os.getcwd(), path))
    return MountEntry(destination=destination, source=resolve_path(destination))


def library_paths(layouts: Iterable[LibraryLayout]) -> list[str]:
    """Return the library paths of every layout present on this host.

    Raises:
        ResolutionError: If no layout is present.
    """
    layouts = list(layouts)
    paths: list[str] = []
    for layout in layouts:
        if not layout.is_present():
            logger.debug("Library layout %s not present", layout.name)
            continue
        logger.debug("Using library layout %s", layout.name)
        paths.extend(layout.paths())

    if not paths:
        tried = ", ".join(layout.libc for layout in layouts) or "(none configured)"
        raise ResolutionError("libc", f"no known library layout found; tried {tried}")
    return paths


def build_allowlist(
    binary: str,
    cwd: str,
    extra_paths: Sequence[str] = (),
    layouts: Iterable[LibraryLayout] = DEFAULT_LAYOUTS,
) -> list[MountEntry]:
    """Build the ordered mount list: binary, cwd, libraries, then extras.

    Relative paths are taken relative to *cwd*. Each destination appears
    exactly once after normalization; a repeated path keeps its first
    position.

    Raises:
        ResolutionError: If any requested path does not resolve.
    """
    mounts: list[MountEntry] = []
    seen: set[str] = set()

    def add(path: str, *, announce: bool) -> None:
        entry = mount_for(path, cwd)
        key = os.path.normpath(entry.destination)
        if key in seen:
            return
        seen.add(key)
        if announce:
            logger.info("Granting read access to %r", entry.destination)
        else:
            logger.debug("Mounting %r -> %r", entry.destination, entry.source)
        mounts.append(entry)

    add(binary, announce=True)
    add(cwd, announce=True)
    for lib in library_paths(layouts):
        add(lib, announce=False)
    for extra in extra_paths:
        add(extra, announce=True)

    return mounts
