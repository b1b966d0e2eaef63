"""Launcher — drives one sandboxed run from argv to exit status.

States advance strictly forward::

    INITIALIZING -> BUILDING_BUNDLE -> LIMITING_RESOURCES -> INVOKING -> SUCCEEDED

Any :class:`~gvrun.errors.LauncherError` moves the launcher to ``FAILED`` and
propagates to the caller. The bundle directory is removed on every path.
"""

from __future__ import annotations

import logging
import os
import shutil
from enum import Enum
from typing import TYPE_CHECKING

from gvrun.bundle.assembler import Bundle, build_spec
from gvrun.bundle.identity import resolve_identity, root_identity
from gvrun.bundle.mounts import build_allowlist
from gvrun.errors import ConfigError, LauncherError
from gvrun.runtime.invoker import build_runtime_command, container_name, invoke
from gvrun.runtime.limits import check_file_limit, raise_file_limit
from gvrun.utils.telemetry import (
    ATTR_BINARY,
    ATTR_BUNDLE_DIR,
    ATTR_CONTAINER,
    ATTR_EXIT_CODE,
    ATTR_FILE_LIMIT_HARD,
    ATTR_FILE_LIMIT_SOFT,
    ATTR_MOUNT_COUNT,
    ATTR_PROFILE,
    ATTR_RUNTIME,
    ATTR_STATE,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from gvrun.bundle.models import Identity, SandboxSpec
    from gvrun.config.models import LauncherConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

# Root path shown by dry runs, where no bundle directory exists.
DRY_RUN_ROOTFS = "<bundle>/rootfs"


class LaunchState(str, Enum):
    INITIALIZING = "initializing"
    BUILDING_BUNDLE = "building bundle"
    LIMITING_RESOURCES = "limiting resources"
    INVOKING = "invoking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: dict[LaunchState, frozenset[LaunchState]] = {
    LaunchState.INITIALIZING: frozenset({LaunchState.BUILDING_BUNDLE, LaunchState.FAILED}),
    LaunchState.BUILDING_BUNDLE: frozenset({LaunchState.LIMITING_RESOURCES, LaunchState.FAILED}),
    LaunchState.LIMITING_RESOURCES: frozenset({LaunchState.INVOKING, LaunchState.FAILED}),
    LaunchState.INVOKING: frozenset({LaunchState.SUCCEEDED, LaunchState.FAILED}),
    LaunchState.SUCCEEDED: frozenset(),
    LaunchState.FAILED: frozenset(),
}


def locate_binary(name: str, cwd: str | None = None) -> tuple[str, bool]:
    """Return the absolute path of the guest binary.

    A bare command name is looked up on ``PATH``; anything containing a
    separator is taken relative to *cwd*, the guest working directory, which
    defaults to the process working directory. The flag reports whether a
    ``PATH`` lookup found it.
    """
    base = cwd or os.getcwd()
    if os.sep not in name:
        found = shutil.which(name)
        if found is not None:
            return os.path.normpath(os.path.join(base, found)), True
    return os.path.normpath(os.path.join(base, name)), False


class Launcher:
    """Single-use driver for one sandboxed invocation.

    Parameters
    ----------
    config:
        Launcher settings; the only configuration source consulted.
    environ:
        Environment used to resolve the invoking identity. Defaults to
        :data:`os.environ`.
    cwd:
        Working directory to expose and start the guest in. Defaults to the
        launcher's own working directory.
    """

    def __init__(
        self,
        config: LauncherConfig,
        *,
        environ: Mapping[str, str] | None = None,
        cwd: str | None = None,
    ) -> None:
        self.config = config
        self._environ = environ
        self._cwd = cwd
        self._state = LaunchState.INITIALIZING
        self.failed_in: LaunchState | None = None

    @property
    def state(self) -> LaunchState:
        return self._state

    def _transition(self, new: LaunchState) -> None:
        if new not in _TRANSITIONS[self._state]:
            msg = f"invalid launcher transition {self._state.value} -> {new.value}"
            raise RuntimeError(msg)
        logger.debug("Launcher state %s -> %s", self._state.value, new.value)
        self._state = new

    def _fail(self) -> None:
        self.failed_in = self._state
        self._transition(LaunchState.FAILED)

    def identity(self) -> Identity:
        if self.config.profile_settings.impersonate_user:
            return resolve_identity(self._environ)
        return root_identity()

    def prepare(self, argv: Sequence[str], *, rootfs: str = DRY_RUN_ROOTFS) -> SandboxSpec:
        """Resolve every input and return the :class:`SandboxSpec` for *argv*.

        Touches nothing on disk and does not change resource limits; the
        launcher state is left as is.

        Raises:
            ResolutionError: If the binary, cwd, a library or an extra path
                does not resolve.
            IdentityError: If the invoking identity cannot be determined.
        """
        if not argv:
            msg = "guest command line must not be empty"
            raise ValueError(msg)

        cwd = self._cwd or os.getcwd()
        binary, from_path = locate_binary(argv[0], cwd)
        args = [binary, *argv[1:]] if from_path else list(argv)

        mounts = build_allowlist(
            binary,
            cwd,
            self.config.extra_dirs,
            self.config.library_layouts,
        )
        identity = self.identity()
        logger.debug("Guest identity: %s", identity)

        return build_spec(
            args=args,
            cwd=cwd,
            identity=identity,
            mounts=mounts,
            rootfs=rootfs,
            hostname=self.config.hostname,
            extra_env=self.config.extra_env,
        )

    def launch(self, argv: Sequence[str]) -> int:
        """Run *argv* inside the sandbox and return the exit status to use.

        The guest's own exit status is returned as is; only failures of the
        launcher itself raise.

        Raises:
            LauncherError: If any step before or during runtime start fails.
        """
        if self._state is not LaunchState.INITIALIZING:
            msg = "Launcher instances are single-use"
            raise RuntimeError(msg)

        cfg = self.config
        with _tracer.start_as_current_span("gvrun.launch") as span:
            span.set_attribute(ATTR_PROFILE, cfg.profile.value)
            try:
                code = self._launch(argv)
            except LauncherError:
                self._fail()
                span.set_attribute(ATTR_STATE, self.failed_in.value if self.failed_in else "")
                raise
            self._transition(LaunchState.SUCCEEDED)
            span.set_attribute(ATTR_STATE, self._state.value)
            span.set_attribute(ATTR_EXIT_CODE, code)
            return code

    def _launch(self, argv: Sequence[str]) -> int:
        cfg = self.config
        if not cfg.runtime:
            raise ConfigError("no sandbox runtime configured")

        # Refuse early, before any bundle directory exists.
        limits = check_file_limit(cfg.file_limit)
        logger.debug("File limit precheck passed: %s", limits)

        self._transition(LaunchState.BUILDING_BUNDLE)
        with _tracer.start_as_current_span("gvrun.build_bundle") as span, Bundle.create(cfg.tmp_root) as bundle:
            span.set_attribute(ATTR_BUNDLE_DIR, bundle.path)
            spec = self.prepare(argv, rootfs=bundle.rootfs)
            bundle.write_spec(spec)
            span.set_attribute(ATTR_BINARY, spec.mounts[0].destination)
            span.set_attribute(ATTR_MOUNT_COUNT, len(spec.mounts))

            self._transition(LaunchState.LIMITING_RESOURCES)
            with _tracer.start_as_current_span("gvrun.limit_resources") as limit_span:
                state = raise_file_limit(cfg.file_limit)
                limit_span.set_attribute(ATTR_FILE_LIMIT_SOFT, state.soft)
                limit_span.set_attribute(ATTR_FILE_LIMIT_HARD, state.hard)

            self._transition(LaunchState.INVOKING)
            name = container_name(cfg.container_prefix)
            command = build_runtime_command(
                cfg.runtime,
                bundle.path,
                name,
                cfg.profile_settings.debug_flags,
            )
            with _tracer.start_as_current_span("gvrun.invoke") as invoke_span:
                invoke_span.set_attribute(ATTR_RUNTIME, cfg.runtime)
                invoke_span.set_attribute(ATTR_CONTAINER, name)
                code = invoke(command)
                invoke_span.set_attribute(ATTR_EXIT_CODE, code)

        return code
