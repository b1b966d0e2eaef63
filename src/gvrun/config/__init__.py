"""Launcher configuration and profiles."""

from gvrun.config.loader import ConfigLoader
from gvrun.config.models import (
    PROFILES,
    LauncherConfig,
    Profile,
    ProfileSettings,
    TelemetrySettings,
)

__all__ = [
    "PROFILES",
    "ConfigLoader",
    "LauncherConfig",
    "Profile",
    "ProfileSettings",
    "TelemetrySettings",
]
