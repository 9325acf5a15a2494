"""
Process-wide registry of built configs.

The registry maps config ids to cache entries. ``init`` builds and stores a
config once, ``use`` hands out views of it without touching the disk, and
``wipe`` forgets it. Rebuilds triggered through a view (reload, switching
environment, adding local files) go through the same store step: entries in
shared mode are updated in place so every holder of a shared view sees the
new values, entries in cloned mode are replaced.

The registry does no locking. Hosts that call it from several threads must
serialise access themselves.
"""

from __future__ import annotations

import copy
import traceback
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from configninja.utils.logger import log_info

from .builder import ConfigBuilder, ConfigMeta
from .errors import ConfigError
from .options import ConfigOptions
from .view import ConfigView


class SharingMode(str, Enum):
    """How consumer views relate to the cached values."""

    SHARED = "shared"
    CLONED = "cloned"

    @classmethod
    def for_options(cls, options: ConfigOptions) -> "SharingMode":
        return cls.CLONED if options.immutable else cls.SHARED


@dataclass
class CacheEntry:
    """Live state for one config id."""

    config_id: str
    values: Dict[str, Any]
    options: ConfigOptions
    meta: ConfigMeta
    raw_files: Dict[str, Any]
    construction_trace: List[str] = field(default_factory=list)
    view: Optional[ConfigView] = None

    @property
    def sharing(self) -> SharingMode:
        return SharingMode.for_options(self.options)


def _capture_trace() -> List[str]:
    frames = traceback.extract_stack()[:-2]
    return [f"{frame.filename}:{frame.lineno} in {frame.name}" for frame in reversed(frames)]


class Registry:
    """Mapping of config id to CacheEntry with the init/use/wipe lifecycle."""

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def has(self, config_id: str) -> bool:
        return config_id in self._entries

    def ids(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def _get_entry(self, config_id: str) -> CacheEntry:
        entry = self._entries.get(config_id)
        if entry is None:
            raise ConfigError(
                f'The config "{config_id}" has not been initialised yet!',
                context={"config_id": config_id},
            )
        return entry

    def init(
        self,
        config_id: str,
        directory: Optional[str | Path] = None,
        environment: Optional[str] = None,
        options: ConfigOptions | Mapping[str, Any] | None = None,
    ) -> ConfigView | Dict[str, Any]:
        """
        Build and cache the config for ``config_id``.

        Raises:
            ConfigError: If the id is already initialised, or the build fails.
        """
        if config_id in self._entries:
            raise ConfigError(
                f'A config with the ID "{config_id}" already exists! Use .use() to get it or .wipe() it first.',
                context={"config_id": config_id},
            )
        result = self._store(config_id, directory, environment, options)
        log_info("registry", f'Initialised config "{config_id}"')
        return result

    def use(
        self,
        config_id: str,
        immutable: Optional[bool] = None,
        plain: Optional[bool] = None,
    ) -> ConfigView | Dict[str, Any]:
        """
        Return a view of an initialised config without rebuilding it.

        Args:
            config_id: Config to fetch.
            immutable: Override the entry's ``immutable`` option for this call.
            plain: Override the entry's ``plain`` option for this call.
        """
        entry = self._get_entry(config_id)
        use_immutable = entry.options.immutable if immutable is None else immutable
        use_plain = entry.options.plain if plain is None else plain

        if use_immutable:
            values = copy.deepcopy(entry.values)
            if use_plain:
                return values
            return ConfigView(values, self, config_id)

        if use_plain:
            return entry.values
        if entry.view is None:
            entry.view = ConfigView(entry.values, self, config_id)
        return entry.view

    def wipe(self, config_id: str) -> None:
        """Remove an initialised config. Views already handed out keep their data."""
        self._get_entry(config_id)
        del self._entries[config_id]
        log_info("registry", f'Wiped config "{config_id}"')

    def rebuild(
        self,
        config_id: str,
        environment: Optional[str] = None,
        local_config_files: Optional[List[str]] = None,
        return_only: bool = False,
    ) -> ConfigView | Dict[str, Any]:
        """Rebuild an initialised config, optionally changing its environment or local files."""
        entry = self._get_entry(config_id)
        options = copy.deepcopy(entry.options)
        if environment:
            options = replace(options, environment=environment)
        if local_config_files:
            options = replace(
                options, local_config_files=options.local_config_files + list(local_config_files)
            )
        result = self._store(config_id, None, None, options, return_only=return_only)
        if not return_only:
            log_info("registry", f'Rebuilt config "{config_id}"', f"environment={options.environment}")
        return result

    def inspect(self, config_id: str) -> Dict[str, Any]:
        entry = self._get_entry(config_id)
        return copy.deepcopy({"options": entry.options.to_dict(), "meta": entry.meta.to_dict()})

    def raw_files(self, config_id: str, filename: Optional[str] = None) -> Any:
        entry = self._get_entry(config_id)
        if filename is None:
            return copy.deepcopy(entry.raw_files)
        if filename not in entry.raw_files:
            raise ConfigError(
                f'There is no raw config named "{filename}".',
                context={"config_id": config_id, "filename": filename},
            )
        return copy.deepcopy(entry.raw_files[filename])

    def construction_trace(self, config_id: str) -> List[str]:
        return list(self._get_entry(config_id).construction_trace)

    def _store(
        self,
        config_id: str,
        directory: Optional[str | Path],
        environment: Optional[str],
        options: ConfigOptions | Mapping[str, Any] | None,
        return_only: bool = False,
    ) -> ConfigView | Dict[str, Any]:
        builder = ConfigBuilder(config_id, directory, environment, options)

        if return_only:
            return builder.get_values()

        existing = self._entries.get(config_id)
        if existing is not None and existing.sharing is SharingMode.SHARED:
            existing.values.clear()
            existing.values.update(builder.get_values())
            existing.options = builder.get_options()
            existing.meta = builder.get_meta()
            existing.raw_files = builder.get_raw()
        else:
            self._entries[config_id] = CacheEntry(
                config_id=config_id,
                values=builder.get_values(),
                options=builder.get_options(),
                meta=builder.get_meta(),
                raw_files=builder.get_raw(),
                construction_trace=_capture_trace(),
            )

        return self.use(config_id)


# Default registry backing the module-level init/use/wipe helpers.
registry = Registry()


def init(
    config_id: str,
    directory: Optional[str | Path] = None,
    environment: Optional[str] = None,
    options: ConfigOptions | Mapping[str, Any] | None = None,
) -> ConfigView | Dict[str, Any]:
    """Initialise ``config_id`` in the default registry."""
    return registry.init(config_id, directory, environment, options)


def use(
    config_id: str, immutable: Optional[bool] = None, plain: Optional[bool] = None
) -> ConfigView | Dict[str, Any]:
    """Fetch ``config_id`` from the default registry."""
    return registry.use(config_id, immutable, plain)


def wipe(config_id: str) -> None:
    """Remove ``config_id`` from the default registry."""
    registry.wipe(config_id)
