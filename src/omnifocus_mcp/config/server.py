"""ServerConfig dataclass and global configuration state.

This module defines the ``ServerConfig`` class (field declarations and
logging setup) and the global ``get_config`` / ``set_config`` helpers.
Loading logic lives in the ``_ServerConfigLoader`` mixin (``loader.py``).
"""

import logging
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version
from typing import List, Optional

from omnifocus_mcp.config.loader import _ServerConfigLoader
from omnifocus_mcp.core.context import get_correlation_id
from omnifocus_mcp.core.omnifocus.executor import (
    DEFAULT_TIMEOUT,
    MAX_OUTPUT_BYTES,
    PERSPECTIVE_TIMEOUT,
)


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("omnifocus-mcp")
    except PackageNotFoundError:
        return "0.3.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()

_STRUCTURED_FORMAT = (
    '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
    '"request_id":"%(correlation_id)s","message":"%(message)s"}'
)
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"


class _CorrelationIdFilter(logging.Filter):
    """Stamp each record with the active correlation id (``-`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


@dataclass
class ServerConfig(_ServerConfigLoader):
    """Server configuration with support for env vars and TOML overrides."""

    # Automation bridge
    interpreter: str = "osascript"
    application: str = "OmniFocus"
    script_timeout: float = DEFAULT_TIMEOUT
    perspective_timeout: float = PERSPECTIVE_TIMEOUT
    max_output_bytes: int = MAX_OUTPUT_BYTES

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = True

    # Output
    compact_output: bool = False

    # Server configuration
    server_name: str = "omnifocus-mcp"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    # Tool registration control
    disabled_tools: List[str] = field(default_factory=list)

    def is_tool_enabled(self, name: str) -> bool:
        return name not in self.disabled_tools

    def setup_logging(self) -> None:
        """Send ``omnifocus_mcp`` logs to stderr at ``log_level``.

        stdout is reserved for MCP stdio traffic and CLI JSON output. Calling
        this again replaces the previous handler.
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_STRUCTURED_FORMAT if self.structured_logging else _PLAIN_FORMAT))
        handler.addFilter(_CorrelationIdFilter())

        package_logger = logging.getLogger("omnifocus_mcp")
        package_logger.setLevel(getattr(logging, self.log_level, logging.INFO))
        for existing in list(package_logger.handlers):
            package_logger.removeHandler(existing)
        package_logger.addHandler(handler)


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
