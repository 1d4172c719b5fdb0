"""Configuration package for omnifocus-mcp.

Sub-modules:
    parsing – value parsing helpers shared by TOML and env loading
    server  – ServerConfig dataclass, get_config/set_config globals
    loader  – ServerConfig loading mixin (_ServerConfigLoader)
"""

from omnifocus_mcp.config.loader import CONFIG_FILE_ENV_VAR  # noqa: F401
from omnifocus_mcp.config.server import (  # noqa: F401
    _PACKAGE_VERSION,
    ServerConfig,
    get_config,
    set_config,
)
