"""
Options controlling how a config is discovered, merged and consumed.

Callers may pass a ConfigOptions instance or a plain mapping of field names.
A mapping is merged over the defaults recursively, so a partial
``environment_variables`` mapping keeps the remaining defaults.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigError
from .merge import deep_merge

# Process environment variable that selects the environment when none is given.
ENVIRONMENT_SELECTOR = "APP_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_DIRECTORY = "./config"
PRODUCTION = "production"

DEFAULT_ENVIRONMENT_LEVELS = {"production": 1, "staging": 2, "development": 3}


@dataclass
class EnvironmentVariables:
    """Mapping of process environment variables onto config paths."""

    enable_dotenv: bool = False
    dotenv_path: Optional[str] = None  # None lets python-dotenv search for .env
    mapping: Dict[str, str] = field(default_factory=dict)


@dataclass
class ConfigOptions:
    """Resolved options for one config id."""

    directory: str = DEFAULT_DIRECTORY
    environment: Optional[str] = None
    short_filenames: bool = False
    environment_levels: Optional[Dict[str, Any]] = field(
        default_factory=lambda: dict(DEFAULT_ENVIRONMENT_LEVELS)
    )
    local_config_files: List[str] = field(default_factory=lambda: ["local"])
    require_local_config: bool = False
    require_environment_config: bool = True
    environment_variables: EnvironmentVariables = field(
        default_factory=EnvironmentVariables
    )
    single: Optional[str] = None
    immutable: bool = False
    plain: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown config option(s): {', '.join(unknown)}.",
                context={"unknown": unknown},
            )
        values = dict(data)
        env_vars = values.get("environment_variables")
        if isinstance(env_vars, Mapping):
            env_known = {f.name for f in fields(EnvironmentVariables)}
            env_unknown = sorted(set(env_vars) - env_known)
            if env_unknown:
                raise ConfigError(
                    f"Unknown environment variable option(s): {', '.join(env_unknown)}.",
                    context={"unknown": env_unknown},
                )
            values["environment_variables"] = EnvironmentVariables(**env_vars)
        return cls(**values)


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _resolve_directory(directory: str | Path) -> str:
    path = Path(directory)
    if not path.is_absolute():
        path = Path.cwd() / path
    return str(path)


def resolve_options(
    directory: Optional[str | Path] = None,
    environment: Optional[str] = None,
    options: ConfigOptions | Mapping[str, Any] | None = None,
) -> ConfigOptions:
    """
    Merge caller options over the defaults and resolve directory/environment.

    Explicit ``directory`` and ``environment`` arguments win over the same
    fields in ``options``. The environment falls back to ``$APP_ENV`` and then
    to ``"development"``.
    """
    merged = ConfigOptions().to_dict()
    if isinstance(options, ConfigOptions):
        merged = options.to_dict()
    elif options is not None:
        merged = deep_merge(merged, dict(options))

    resolved = ConfigOptions.from_dict(copy.deepcopy(merged))
    resolved.directory = _resolve_directory(directory or resolved.directory or DEFAULT_DIRECTORY)
    resolved.environment = (
        environment
        or resolved.environment
        or os.environ.get(ENVIRONMENT_SELECTOR)
        or DEFAULT_ENVIRONMENT
    )
    if isinstance(resolved.local_config_files, str):
        resolved.local_config_files = [resolved.local_config_files]
    resolved.local_config_files = _dedupe(list(resolved.local_config_files or []))
    return resolved
