"""
Config builder for configninja.

A ConfigBuilder loads one snapshot of configuration for a config id: it
resolves the options, plans which files to read, reads and parses them,
merges them in order, overlays mapped environment variables and stamps the
environment. The whole build happens in the constructor; a failure at any
step raises ConfigError and leaves nothing behind.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from configninja.utils.logger import log_debug, log_warning

from .coercion import parse_environment_value
from .errors import ConfigError
from .merge import merge_all, set_path
from .options import ENVIRONMENT_SELECTOR, PRODUCTION, ConfigOptions, resolve_options
from .persistence import get_config_file_path, parse_config_json, read_config_file

ENV_LEVEL_NOT_SET = "-not set-"


@dataclass(frozen=True)
class ConfigFile:
    """One entry of the file plan."""

    type: str
    filename: str


@dataclass
class ConfigMeta:
    """Diagnostic record of what contributed to the last build."""

    loaded_at: Optional[datetime] = None
    loaded_files: List[ConfigFile] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loaded_at": self.loaded_at,
            "loaded_files": [
                {"type": item.type, "filename": item.filename} for item in self.loaded_files
            ],
        }


class ConfigBuilder:
    """
    Loads, parses and merges the config files for a single config id.

    Args:
        config_id: Key identifying the config; must be non-empty.
        directory: Config directory, relative paths resolve against the cwd.
        environment: Environment name; falls back to ``$APP_ENV`` then
            ``"development"``.
        options: ConfigOptions or a mapping of option names.
    """

    def __init__(
        self,
        config_id: str,
        directory: Optional[str | Path] = None,
        environment: Optional[str] = None,
        options: ConfigOptions | Mapping[str, Any] | None = None,
    ):
        if not config_id:
            raise ConfigError("You must provide a valid config id!")

        self.config_id = config_id
        self.options = resolve_options(directory, environment, options)
        self.meta = ConfigMeta()
        self.raw_files: Dict[str, Any] = {}
        self.config_values: Dict[str, Any] = {}

        self._build()

    def _build(self) -> None:
        files = self.plan_files()
        loaded = self.load_files(files)
        raw_files = dict(loaded)
        values = merge_all(parsed for _, parsed in loaded)
        self.map_variables_from_environment(values)
        self.stamp_environment(values)

        self.raw_files = raw_files
        self.config_values = values
        self.meta = ConfigMeta(loaded_at=datetime.now(timezone.utc), loaded_files=files)

    def plan_files(self) -> List[ConfigFile]:
        """Return the ordered list of files this build reads."""
        if self.options.single:
            return [ConfigFile("single", self.options.single)]

        files = [ConfigFile(PRODUCTION, PRODUCTION)]
        if self.options.environment != PRODUCTION:
            files.append(ConfigFile(self.options.environment, self.options.environment))
        files.extend(ConfigFile("local", name) for name in self.options.local_config_files)
        return files

    def _may_skip(self, config_file: ConfigFile) -> bool:
        if config_file.type == "local":
            return not self.options.require_local_config
        if config_file.type not in (PRODUCTION, "single"):
            return not self.options.require_environment_config
        return False

    def load_files(self, files: List[ConfigFile]) -> List[Tuple[str, Dict[str, Any]]]:
        """
        Read and parse each planned file, in plan order.

        Returns ``(filename, parsed)`` pairs; skippable missing files are left
        out. A file listed twice appears twice, so it merges at each position.
        """
        loaded: List[Tuple[str, Dict[str, Any]]] = []
        for config_file in files:
            path = get_config_file_path(
                self.options.directory, config_file.filename, self.options.short_filenames
            )
            payload = read_config_file(
                config_file.type,
                config_file.filename,
                path,
                ignore_missing=self._may_skip(config_file),
            )
            if payload is None:
                log_debug("builder", f"Skipped missing {config_file.type} config", str(path))
                continue
            parsed = parse_config_json(config_file.type, config_file.filename, payload)
            if not isinstance(parsed, dict):
                raise ConfigError(
                    f'The {config_file.type} config "{config_file.filename}" must contain '
                    f"a JSON object, not {type(parsed).__name__}.",
                    context={
                        "type": config_file.type,
                        "filename": config_file.filename,
                        "path": str(path),
                    },
                )
            loaded.append((config_file.filename, parsed))
            log_debug("builder", f"Loaded {config_file.type} config", str(path))
        return loaded

    def _load_dotenv(self) -> None:
        dotenv_path = self.options.environment_variables.dotenv_path
        if dotenv_path is None:
            dotenv_path = find_dotenv(usecwd=True)
            if not dotenv_path:
                raise ConfigError("Unable to find a .env file to load.")
        if not Path(dotenv_path).is_file():
            raise ConfigError(
                f'Unable to load .env file from path "{dotenv_path}".',
                context={"path": str(dotenv_path)},
            )
        try:
            load_dotenv(dotenv_path=dotenv_path, override=False)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(
                f'Unable to load .env file from path "{dotenv_path}" ({exc}).',
                context={"path": str(dotenv_path)},
            ) from exc

    def map_variables_from_environment(self, values: Dict[str, Any]) -> None:
        """Overlay mapped process environment variables onto ``values``."""
        env_vars = self.options.environment_variables
        if not env_vars or not env_vars.mapping:
            return

        if env_vars.enable_dotenv:
            self._load_dotenv()

        for variable, config_path in env_vars.mapping.items():
            if variable == ENVIRONMENT_SELECTOR:
                continue
            raw = os.environ.get(variable)
            if raw is None:
                log_warning("builder", f"Environment variable {variable} is not set", config_path)
            set_path(values, config_path, parse_environment_value(raw))
        log_debug("builder", f"Mapped {len(env_vars.mapping)} environment variable(s)", self.config_id)

    def stamp_environment(self, values: Dict[str, Any]) -> None:
        """Add ``env = {id, level}`` unless something already set ``env``."""
        levels = self.options.environment_levels
        if "env" in values or not levels:
            return
        environment = self.options.environment
        values["env"] = {
            "id": environment,
            "level": levels.get(environment, ENV_LEVEL_NOT_SET),
        }

    def get_values(self) -> Dict[str, Any]:
        """Returns a copy of the merged config."""
        return copy.deepcopy(self.config_values)

    def get_options(self) -> ConfigOptions:
        """Returns a copy of the options used to build this config."""
        return copy.deepcopy(self.options)

    def get_meta(self) -> ConfigMeta:
        return copy.deepcopy(self.meta)

    def get_raw(self) -> Dict[str, Any]:
        """Returns a copy of all the raw config files as they were when loaded."""
        return copy.deepcopy(self.raw_files)
