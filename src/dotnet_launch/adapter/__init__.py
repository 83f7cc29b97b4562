"""Debug adapter discovery and launch payload assembly."""

from .binary import BinaryCacheEntry, DebuggerBinaryResolver
from .launch import DotNetDebugAdapter, apply_debug_request, request_args

__all__ = [
    "BinaryCacheEntry",
    "DebuggerBinaryResolver",
    "DotNetDebugAdapter",
    "apply_debug_request",
    "request_args",
]
