"""Bundle synthesis — resolved mounts, identity, and the on-disk OCI bundle."""

from gvrun.bundle.assembler import Bundle, build_spec, render_spec
from gvrun.bundle.identity import resolve_identity, root_identity
from gvrun.bundle.models import Identity, MountEntry, SandboxSpec
from gvrun.bundle.mounts import DEFAULT_LAYOUTS, LibraryLayout, build_allowlist, mount_for
from gvrun.bundle.paths import resolve_path

__all__ = [
    "DEFAULT_LAYOUTS",
    "Bundle",
    "Identity",
    "LibraryLayout",
    "MountEntry",
    "SandboxSpec",
    "build_allowlist",
    "build_spec",
    "mount_for",
    "render_spec",
    "resolve_identity",
    "resolve_path",
    "root_identity",
]
