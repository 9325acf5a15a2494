"""
configninja - Environment-aware JSON configuration loader

Loads a directory of environment-named JSON files, merges them in a fixed
order (production, then the environment, then local overrides, then mapped
environment variables) and caches the result per config id for reuse across
a process.

Package Structure:
- core/: builder, registry, views and their helpers
- cli/: command-line interface for inspecting a config directory
- utils/: logging helpers

Usage:
    import configninja

    config = configninja.init("app", "./config")
    # elsewhere
    config = configninja.use("app")
"""

import logging

from configninja.core.builder import ConfigBuilder, ConfigFile, ConfigMeta
from configninja.core.errors import ConfigError
from configninja.core.options import ConfigOptions, EnvironmentVariables
from configninja.core.registry import (
    CacheEntry,
    Registry,
    SharingMode,
    init,
    registry,
    use,
    wipe,
)
from configninja.core.view import ConfigView

__version__ = "0.1.0"

logging.getLogger("configninja").addHandler(logging.NullHandler())

__all__ = [
    "CacheEntry",
    "ConfigBuilder",
    "ConfigError",
    "ConfigFile",
    "ConfigMeta",
    "ConfigOptions",
    "ConfigView",
    "EnvironmentVariables",
    "Registry",
    "SharingMode",
    "init",
    "registry",
    "use",
    "wipe",
]
