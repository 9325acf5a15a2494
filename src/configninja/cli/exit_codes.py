"""
Standardized exit codes for configninja CLI commands.
"""

from typing import Optional

import typer
from rich.console import Console

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

_err_console = Console(stderr=True)


class CliExit(typer.Exit):
    """
    CLI exit exception that extends typer.Exit with consistent codes.

    Usage:
        raise CliExit.success()
        raise CliExit.config_error(err)
    """

    def __init__(self, code: int, message: Optional[object] = None):
        self.message = message
        super().__init__(code)
        if message is not None:
            _err_console.print(message)

    @classmethod
    def success(cls, message: Optional[object] = None) -> "CliExit":
        return cls(EXIT_SUCCESS, message)

    @classmethod
    def error(cls, message: Optional[object] = None) -> "CliExit":
        return cls(EXIT_ERROR, message)

    @classmethod
    def config_error(cls, message: Optional[object] = None) -> "CliExit":
        """Create a configuration error exit. ConfigError renders in red."""
        return cls(EXIT_CONFIG_ERROR, message)
