"""
Error type for configninja.

Every failure raised by the builder, the registry or a bound view operation
is a ConfigError. There are no recovery categories: the error is fatal to the
call that raised it.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from rich.text import Text

ERROR_PREFIX = "Config-Ninja:"


class ConfigError(Exception):
    """Custom exception for configuration errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """
        Initialize the config error.

        Args:
            message: Human readable error message
            context: Additional context (path, code, filename, config_id)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now()

    def __rich__(self) -> Text:
        text = Text(ERROR_PREFIX, style="bold underline bright_red")
        text.append(" ")
        text.append(self.message, style="bright_red")
        return text
