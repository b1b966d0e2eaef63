"""gvrun — run one untrusted local program inside a gVisor sandbox."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from gvrun.config.models import LauncherConfig as LauncherConfig
    from gvrun.runtime.launcher import Launcher as Launcher

_LAZY_EXPORTS = {
    "Launcher": "gvrun.runtime.launcher",
    "LauncherConfig": "gvrun.config.models",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'gvrun' has no attribute {name!r}")
