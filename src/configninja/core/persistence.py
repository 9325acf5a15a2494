"""Config file naming, reading and parsing."""

from __future__ import annotations

import errno
import json
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError

CONFIG_INFIX = ".config"
CONFIG_SUFFIX = ".json"


def get_config_file_path(directory: str | Path, filename: str, short_filenames: bool = False) -> Path:
    """Return ``{directory}/{filename}[.config].json``."""
    infix = "" if short_filenames else CONFIG_INFIX
    return Path(directory) / f"{filename}{infix}{CONFIG_SUFFIX}"


def _error_code(exc: OSError) -> str:
    if exc.errno is not None:
        return errno.errorcode.get(exc.errno, str(exc.errno))
    return type(exc).__name__


def read_config_file(
    file_type: str, filename: str, path: Path, ignore_missing: bool = False
) -> Optional[bytes]:
    """
    Read the raw bytes of a config file.

    Returns None when the file cannot be read and ``ignore_missing`` is set;
    otherwise a read failure raises ConfigError.
    """
    try:
        return path.read_bytes()
    except OSError as exc:
        if ignore_missing:
            return None
        code = _error_code(exc)
        raise ConfigError(
            f'Unable to read {file_type} config "{filename}" from path "{path}" ({code}).',
            context={"type": file_type, "filename": filename, "path": str(path), "code": code},
        ) from exc


def _describe_parse_error(exc: ValueError) -> str:
    if isinstance(exc, json.JSONDecodeError):
        return f"{type(exc).__name__}: {exc.msg} at line {exc.lineno} column {exc.colno}"
    if isinstance(exc, UnicodeDecodeError):
        return f"{type(exc).__name__}: {exc.reason}"
    return f"{type(exc).__name__}: {exc}"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_config_json(file_type: str, filename: str, payload: bytes) -> Any:
    """Decode and parse a config file's content. Invalid JSON is always fatal."""
    try:
        return json.loads(payload.decode("utf-8"), parse_constant=_reject_constant)
    except ValueError as exc:
        detail = _describe_parse_error(exc)
        raise ConfigError(
            f'The {file_type} config "{filename}" is not valid JSON ({detail}).',
            context={"type": file_type, "filename": filename, "detail": detail},
        ) from exc
