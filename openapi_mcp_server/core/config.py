# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Proxy configuration - single source of truth.

Values come from a YAML file, environment variables override them, and
dataclass defaults fill the rest. Per-connection credentials never live here:
they arrive with each stream-open request.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


DEFAULT_CONFIG_PATH = "/app/configs/server.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class ServerConfig:
    """
    Immutable server configuration.
    """

    # -- Listener --
    host: str = "0.0.0.0"
    port: int = 3000

    # -- API document --
    openapi_spec_path: str = "scripts/notion-openapi.json"
    server_name: str = "openapi-mcp-server"
    server_version: str = "1.0.0"
    resource_name: str = "API"

    # -- Connection defaults (overridable per stream) --
    default_base_url: str = "https://api.notion.com"
    default_api_version: str = "2022-06-28"
    version_header: str = "Notion-Version"

    # -- Transport --
    message_path: str = "/messages"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # -- Timeouts (seconds); None disables --
    upstream_timeout: Optional[float] = None
    session_idle_timeout: Optional[float] = None
    reaper_interval: float = 60.0

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> ServerConfig:
    """
    Load configuration from YAML, then apply environment overrides.
    Returns defaults (plus overrides) if the file doesn't exist.
    """
    y: dict = {}
    if Path(path).exists():
        with open(path) as f:
            y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    defaults = ServerConfig()

    upstream_timeout = _optional_float(os.getenv("UPSTREAM_TIMEOUT"))
    if upstream_timeout is None:
        upstream_timeout = get(y, "timeouts", "upstream")
    idle_timeout = _optional_float(os.getenv("SESSION_IDLE_TIMEOUT"))
    if idle_timeout is None:
        idle_timeout = get(y, "timeouts", "session_idle")

    return ServerConfig(
        host=os.getenv("HOST") or get(y, "server", "host") or defaults.host,
        port=int(os.getenv("PORT") or get(y, "server", "port") or defaults.port),
        openapi_spec_path=(
            os.getenv("OPENAPI_SPEC_PATH")
            or get(y, "openapi", "spec_path")
            or defaults.openapi_spec_path
        ),
        server_name=get(y, "server", "name") or defaults.server_name,
        server_version=get(y, "server", "version") or defaults.server_version,
        resource_name=get(y, "openapi", "resource_name", default=defaults.resource_name),
        default_base_url=get(y, "connection", "base_url") or defaults.default_base_url,
        default_api_version=get(y, "connection", "api_version") or defaults.default_api_version,
        version_header=get(y, "connection", "version_header") or defaults.version_header,
        message_path=get(y, "transport", "message_path") or defaults.message_path,
        cors_origins=get(y, "transport", "cors_origins") or defaults.cors_origins,
        upstream_timeout=upstream_timeout,
        session_idle_timeout=idle_timeout,
        reaper_interval=float(get(y, "timeouts", "reaper_interval") or defaults.reaper_interval),
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or defaults.log_level,
        log_format=get(y, "logging", "format") or defaults.log_format,
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("MCP_PROXY_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> ServerConfig:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
