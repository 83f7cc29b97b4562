"""Debug adapter launch payload assembly for .NET programs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from ..config import LaunchConfig
from ..dap.protocol import (
    DebugAdapterBinary,
    DebugRequest,
    RequestKind,
    StartDebuggingRequestArguments,
)
from ..errors import ConfigError
from .binary import DebuggerBinaryResolver

logger = logging.getLogger(__name__)

DEFAULT_CONSOLE: Final[str] = "integratedTerminal"
CONSOLE_MODES: Final[frozenset[str]] = frozenset(
    {"integratedTerminal", "externalTerminal", "internalConsole"}
)


def request_kind(config: Mapping[str, Any]) -> RequestKind:
    """"attach" if the configuration asks for it, otherwise "launch"."""
    if config.get("request") == RequestKind.ATTACH.value:
        return RequestKind.ATTACH
    return RequestKind.LAUNCH


def request_args(config: Mapping[str, Any]) -> StartDebuggingRequestArguments:
    """Build start-debugging arguments from a user configuration.

    Args:
        config: Debug configuration (type, request, program, cwd, ...)

    Returns:
        Configuration with defaults applied, plus the request kind

    Raises:
        ConfigError: If a launch configuration has no "program"
    """
    request = request_kind(config)
    configuration = dict(config)

    if configuration.get("console") is None:
        configuration["console"] = DEFAULT_CONSOLE
    elif configuration["console"] not in CONSOLE_MODES:
        logger.warning(f"Unknown console mode: {configuration['console']}")
    configuration.setdefault("stopAtEntry", False)

    if request == RequestKind.LAUNCH and configuration.get("program") is None:
        raise ConfigError("'program' is required for launch requests")

    return StartDebuggingRequestArguments(configuration=configuration, request=request)


def apply_debug_request(config: Mapping[str, Any], debug_request: DebugRequest) -> dict[str, Any]:
    """Merge a locator's launch request into a user configuration.

    The located program always wins; cwd, args and env are filled in only
    when the configuration does not set them.
    """
    merged = dict(config)
    launch = debug_request.launch
    if launch is None:
        if debug_request.process_id is not None:
            merged["request"] = RequestKind.ATTACH.value
            merged["processId"] = debug_request.process_id
        return merged

    merged["request"] = RequestKind.LAUNCH.value
    merged["program"] = launch.program
    if launch.cwd is not None:
        merged.setdefault("cwd", launch.cwd)
    if launch.args:
        merged.setdefault("args", list(launch.args))
    if launch.env:
        merged.setdefault("env", dict(launch.env))
    return merged


class DotNetDebugAdapter:
    """netcoredbg-backed debug adapter for .NET Core and .NET 5+ programs."""

    def __init__(
        self,
        resolver: DebuggerBinaryResolver | None = None,
        config: LaunchConfig | None = None,
    ):
        self._config = config or LaunchConfig()
        self._resolver = resolver or DebuggerBinaryResolver(
            adapter_name=self._config.adapter_name,
            adapters_dir=self._config.adapters_dir,
            cache_failures=self._config.cache_failures,
        )

    @property
    def name(self) -> str:
        return self._config.adapter_name

    @property
    def resolver(self) -> DebuggerBinaryResolver:
        return self._resolver

    async def get_binary(
        self,
        config: Mapping[str, Any],
        user_installed_path: str | Path | None = None,
        user_args: list[str] | None = None,
        user_env: Mapping[str, str] | None = None,
    ) -> DebugAdapterBinary:
        """Assemble the adapter process and start request for a session.

        Args:
            config: Debug configuration
            user_installed_path: Debugger path that bypasses discovery
            user_args: Extra adapter arguments
            user_env: Extra adapter environment

        Raises:
            ConfigError: If the configuration is incomplete
            DebuggerNotFoundError: If no debugger can be found
        """
        args = request_args(config)
        binary_path = await self._resolver.get_binary_path(
            user_installed_path or self._config.debugger_path
        )

        cwd = config.get("cwd")
        return DebugAdapterBinary(
            command=str(binary_path),
            arguments=list(user_args or []),
            envs=dict(user_env or {}),
            cwd=str(cwd) if cwd else None,
            connection=None,
            request_args=args,
        )

    async def create_request(self, config: Mapping[str, Any]) -> DebugRequest:
        """Debug request for a configuration.

        Raises:
            ConfigError: If the configuration is incomplete
        """
        args = request_args(config)
        if args.request == RequestKind.ATTACH:
            raw_pid = args.configuration.get("processId")
            process_id = None
            if raw_pid is not None:
                try:
                    process_id = int(raw_pid)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"Invalid processId: {raw_pid!r}") from e
            return DebugRequest.for_attach(process_id, configuration=args.configuration)
        return DebugRequest(kind=RequestKind.LAUNCH, configuration=args.configuration)
