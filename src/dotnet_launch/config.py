"""Environment-driven configuration for the launch pipeline."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR_NAME = "dotnet-launch"
DEFAULT_ADAPTER_NAME = "netcoredbg"

DEBUGGER_PATH_ENV_VARS = ("DOTNET_LAUNCH_DEBUGGER_PATH", "NETCOREDBG_PATH")
ADAPTERS_DIR_ENV_VAR = "DOTNET_LAUNCH_ADAPTERS_DIR"
CACHE_FAILURES_ENV_VAR = "DOTNET_LAUNCH_CACHE_FAILURES"
DOTNET_ENV_VAR = "DOTNET_LAUNCH_DOTNET"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def default_adapters_dir() -> Path:
    """Platform data directory holding one cache directory per debug adapter."""
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
    else:
        base = os.environ.get("XDG_DATA_HOME")
        root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_DIR_NAME / "debug_adapters"


@dataclass
class LaunchConfig:
    """Settings for debugger discovery and builds."""

    debugger_path: str | None = None
    """Explicit debugger executable; bypasses discovery when set."""

    adapters_dir: Path = field(default_factory=default_adapters_dir)
    adapter_name: str = DEFAULT_ADAPTER_NAME

    cache_failures: bool = False
    """Cache failed debugger lookups for the resolver's lifetime."""

    dotnet: str = "dotnet"

    @classmethod
    def from_env(cls) -> LaunchConfig:
        """Build configuration from environment variables."""
        config = cls()

        for env_var in DEBUGGER_PATH_ENV_VARS:
            value = os.environ.get(env_var)
            if value:
                config.debugger_path = value
                break

        adapters_dir = os.environ.get(ADAPTERS_DIR_ENV_VAR)
        if adapters_dir:
            config.adapters_dir = Path(adapters_dir)

        cache_failures = os.environ.get(CACHE_FAILURES_ENV_VAR)
        if cache_failures:
            config.cache_failures = cache_failures.strip().lower() in _TRUTHY

        dotnet = os.environ.get(DOTNET_ENV_VAR)
        if dotnet:
            config.dotnet = dotnet

        logger.debug(
            f"Launch config: debugger_path={config.debugger_path}, "
            f"adapters_dir={config.adapters_dir}, cache_failures={config.cache_failures}"
        )
        return config
