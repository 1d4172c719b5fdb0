"""ServerConfig loading logic.

Provides ``_ServerConfigLoader``, a mixin whose methods are inherited by
``ServerConfig`` (defined in ``server.py``), keeping ``server.py`` focused
on field definitions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, cast

if TYPE_CHECKING:
    from omnifocus_mcp.config.server import ServerConfig

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from omnifocus_mcp.config.parsing import (
    _parse_bool,
    _parse_name_list,
    _parse_positive_float,
    _parse_positive_int,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "OMNIFOCUS_MCP_CONFIG_FILE"


class _ServerConfigLoader:
    """Mixin providing config-loading methods for ``ServerConfig``."""

    if TYPE_CHECKING:
        interpreter: str
        application: str
        script_timeout: float
        perspective_timeout: float
        max_output_bytes: int
        log_level: str
        structured_logging: bool
        compact_output: bool
        server_name: str
        server_version: str
        disabled_tools: List[str]

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. Explicit config file, or project TOML config (./omnifocus-mcp.toml)
        3. User TOML config (~/.omnifocus-mcp.toml)
        4. XDG config (~/.config/omnifocus-mcp/config.toml)
        5. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
            xdg_config = Path(xdg_config_home) / "omnifocus-mcp" / "config.toml"
            if xdg_config.exists():
                config._load_toml(xdg_config)
                logger.debug(f"Loaded XDG config from {xdg_config}")

            home_config = Path.home() / ".omnifocus-mcp.toml"
            if home_config.exists():
                config._load_toml(home_config)
                logger.debug(f"Loaded user config from {home_config}")

            project_config = Path("omnifocus-mcp.toml")
            if project_config.exists():
                config._load_toml(project_config)
                logger.debug(f"Loaded project config from {project_config}")

        config._load_env()
        return cast("ServerConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config file {path}: {e}")
            return

        # Bridge settings
        if "bridge" in data:
            bridge = data["bridge"]
            if "interpreter" in bridge:
                self.interpreter = str(bridge["interpreter"])
            if "application" in bridge:
                self.application = str(bridge["application"])
            if "timeout" in bridge:
                self._set_timeout("script_timeout", bridge["timeout"], "bridge.timeout")
            if "perspective_timeout" in bridge:
                self._set_timeout(
                    "perspective_timeout", bridge["perspective_timeout"], "bridge.perspective_timeout"
                )
            if "max_output_bytes" in bridge:
                parsed = _parse_positive_int(bridge["max_output_bytes"], setting="bridge.max_output_bytes")
                if parsed is not None:
                    self.max_output_bytes = parsed

        # Logging settings
        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

        # Output settings
        if "output" in data:
            output = data["output"]
            if "compact" in output:
                self.compact_output = _parse_bool(output["compact"])

        # Server settings
        if "server" in data:
            srv = data["server"]
            if "name" in srv:
                self.server_name = srv["name"]
            if "version" in srv:
                self.server_version = srv["version"]

        # Tools configuration
        if "tools" in data:
            tools_cfg = data["tools"]
            if "disabled_tools" in tools_cfg:
                self.disabled_tools = _parse_name_list(tools_cfg["disabled_tools"])

    def _set_timeout(self, attribute: str, value: Any, setting: str) -> None:
        parsed = _parse_positive_float(value, setting=setting)
        if parsed is not None:
            setattr(self, attribute, parsed)

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if interpreter := os.environ.get("OMNIFOCUS_MCP_INTERPRETER"):
            self.interpreter = interpreter

        if application := os.environ.get("OMNIFOCUS_MCP_APPLICATION"):
            self.application = application

        if timeout := os.environ.get("OMNIFOCUS_MCP_TIMEOUT"):
            self._set_timeout("script_timeout", timeout, "OMNIFOCUS_MCP_TIMEOUT")

        if perspective_timeout := os.environ.get("OMNIFOCUS_MCP_PERSPECTIVE_TIMEOUT"):
            self._set_timeout("perspective_timeout", perspective_timeout, "OMNIFOCUS_MCP_PERSPECTIVE_TIMEOUT")

        if level := os.environ.get("OMNIFOCUS_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("OMNIFOCUS_MCP_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        if compact := os.environ.get("OMNIFOCUS_MCP_COMPACT"):
            self.compact_output = _parse_bool(compact)

        if disabled := os.environ.get("OMNIFOCUS_MCP_DISABLED_TOOLS"):
            self.disabled_tools = _parse_name_list(disabled)
