"""
Consumer views of a cached config.

A ConfigView behaves like a dict of the merged config values and carries the
remote-control operations for its config id. It holds the registry and the
config id, not a copy of the entry, so every operation acts on whatever entry
is live for that id when it is called.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from .errors import ConfigError

if TYPE_CHECKING:
    from .registry import Registry


class ConfigView(MutableMapping):
    """Merged config values plus bound utility operations."""

    __slots__ = ("_data", "_registry", "_config_id")

    def __init__(self, data: Dict[str, Any], registry: "Registry", config_id: str):
        self._data = data
        self._registry = registry
        self._config_id = config_id

    # Mapping protocol -----------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigView):
            return self._data == other._data
        return self._data == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigView({self._config_id!r}, {self._data!r})"

    @property
    def config_id(self) -> str:
        return self._config_id

    # Utility operations ---------------------------------------------------

    def inspect(self) -> Dict[str, Any]:
        """Snapshot of the entry's options and meta."""
        return self._registry.inspect(self._config_id)

    def reload(self) -> "ConfigView | Dict[str, Any]":
        """Re-read the files from disk with the current options."""
        return self._registry.rebuild(self._config_id)

    def switch_environment(self, environment: str) -> "ConfigView | Dict[str, Any]":
        """Rebuild the config for another environment."""
        if not environment:
            raise ConfigError("You must specify an environment to switch to.")
        return self._registry.rebuild(self._config_id, environment=environment)

    def add_local_files(self, filenames: str | List[str]) -> "ConfigView | Dict[str, Any]":
        """Append one or more local files and rebuild."""
        if isinstance(filenames, str):
            filenames = [filenames]
        elif not isinstance(filenames, list) or not all(isinstance(name, str) for name in filenames):
            raise ConfigError("You must specify a filename or a list of filenames to add.")
        return self._registry.rebuild(self._config_id, local_config_files=filenames)

    def get_for_environment(self, environment: str) -> Dict[str, Any]:
        """Merged config for another environment, without touching the cache."""
        if not environment:
            raise ConfigError("You must specify an environment to get the config for.")
        return self._registry.rebuild(self._config_id, environment=environment, return_only=True)

    def raw_files(self, filename: Optional[str] = None) -> Any:
        """Copy of every raw file, or of the named one."""
        return self._registry.raw_files(self._config_id, filename)

    def plain_copy(self) -> Dict[str, Any]:
        """This config's values without the utility operations."""
        return self._registry.use(self._config_id, plain=True)

    def construction_trace(self) -> List[str]:
        return self._registry.construction_trace(self._config_id)
