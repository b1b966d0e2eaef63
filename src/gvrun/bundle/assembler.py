"""Bundle assembly — build the runtime spec and lay it out on disk.

OCI runtimes take the *directory* containing ``config.json`` rather than a
path to the document, and they require a real host path as root. The bundle is
therefore a fresh temporary directory holding ``config.json`` and an empty
``rootfs/`` over which the allowlist is bind-mounted.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from typing import TYPE_CHECKING

from gvrun.bundle.models import ProcessSpec, RootSpec, SandboxSpec
from gvrun.errors import BundleWriteError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from gvrun.bundle.models import Identity, MountEntry

logger = logging.getLogger(__name__)

CONFIG_NAME = "config.json"
ROOTFS_NAME = "rootfs"
BUNDLE_PREFIX = "gvrun"

GUEST_HOME = "/tmp"
GUEST_PATH = "/usr/local/bin:/usr/bin:/bin"


def base_env(identity: Identity) -> list[str]:
    """Minimum environment every guest receives."""
    return [
        f"HOME={GUEST_HOME}",
        f"PATH={GUEST_PATH}",
        f"USER={identity.username}",
    ]


def build_spec(
    *,
    args: Sequence[str],
    cwd: str,
    identity: Identity,
    mounts: Sequence[MountEntry],
    rootfs: str,
    hostname: str,
    extra_env: Sequence[str] = (),
) -> SandboxSpec:
    """Combine process, identity and mounts into one :class:`SandboxSpec`.

    *extra_env* entries are appended verbatim after the base environment.
    The process is never granted capabilities.
    """
    process = ProcessSpec(
        args=list(args),
        env=[*base_env(identity), *extra_env],
        cwd=cwd,
        user=identity,
    )
    return SandboxSpec(
        process=process,
        hostname=hostname,
        root=RootSpec(path=rootfs),
        mounts=list(mounts),
    )


def render_spec(spec: SandboxSpec) -> str:
    """Serialize *spec* to the JSON document the runtime reads."""
    return json.dumps(spec.to_document(), indent=2) + "\n"


class Bundle:
    """A transient bundle directory owned by a single invocation.

    Use as a context manager; the directory is removed on exit whatever the
    outcome::

        with Bundle.create() as bundle:
            bundle.write_spec(spec)
            ...
    """

    def __init__(self, path: str) -> None:
        self.path = path

    @classmethod
    def create(cls, tmp_root: str | None = None) -> Bundle:
        """Create a uniquely named bundle directory with an empty ``rootfs/``.

        Raises:
            BundleWriteError: If either directory cannot be created.
        """
        try:
            path = tempfile.mkdtemp(prefix=BUNDLE_PREFIX, dir=tmp_root)
        except OSError as exc:
            where = tmp_root or tempfile.gettempdir()
            raise BundleWriteError(where, f"error creating temp directory: {exc}") from exc

        bundle = cls(path)
        try:
            os.mkdir(bundle.rootfs, 0o755)
        except OSError as exc:
            bundle.cleanup()
            raise BundleWriteError(bundle.rootfs, f"error creating root directory: {exc}") from exc

        logger.debug("Created bundle directory %s", path)
        return bundle

    @property
    def rootfs(self) -> str:
        return os.path.join(self.path, ROOTFS_NAME)

    @property
    def config_path(self) -> str:
        return os.path.join(self.path, CONFIG_NAME)

    def write_spec(self, spec: SandboxSpec) -> None:
        """Write *spec* to ``config.json``.

        Raises:
            BundleWriteError: If the document cannot be written. The bundle
                directory is removed before the error propagates.
        """
        try:
            with open(self.config_path, "x", encoding="utf-8") as fh:
                fh.write(render_spec(spec))
        except OSError as exc:
            self.cleanup()
            raise BundleWriteError(self.config_path, f"error writing {CONFIG_NAME}: {exc}") from exc

    def cleanup(self) -> None:
        """Remove the bundle directory and everything in it."""
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Failed to remove bundle directory %s: %s", self.path, exc)
            return
        logger.debug("Removed bundle directory %s", self.path)

    def __enter__(self) -> Bundle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
