"""DAP (Debug Adapter Protocol) launch payload types."""

from .protocol import (
    DAPRequest,
    DebugAdapterBinary,
    DebugRequest,
    LaunchRequest,
    RequestKind,
    StartDebuggingRequestArguments,
    TcpConnection,
)

__all__ = [
    "DAPRequest",
    "DebugAdapterBinary",
    "DebugRequest",
    "LaunchRequest",
    "RequestKind",
    "StartDebuggingRequestArguments",
    "TcpConnection",
]
