"""DAP launch payload types and request serialization."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RequestKind(str, Enum):
    """Debug session start request kinds."""

    LAUNCH = "launch"
    ATTACH = "attach"


@dataclass
class DAPRequest:
    """DAP request message."""
    seq: int
    command: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "seq": self.seq,
            "type": "request",
            "command": self.command,
        }
        if self.arguments:
            d["arguments"] = self.arguments
        return d

    def to_bytes(self) -> bytes:
        content = json.dumps(self.to_dict(), separators=(",", ":"))
        body = content.encode("utf-8")
        header = f"Content-Length: {len(body)}\r\n\r\n"
        return header.encode("ascii") + body


@dataclass
class TcpConnection:
    """Network transport for adapters that listen on a socket."""
    host: str = "127.0.0.1"
    port: int | None = None
    timeout_ms: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"host": self.host}
        if self.port is not None:
            d["port"] = self.port
        if self.timeout_ms is not None:
            d["timeout"] = self.timeout_ms
        return d


@dataclass
class LaunchRequest:
    """Resolved program launch, produced after a successful build."""
    program: str
    cwd: str | None = None
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"program": self.program, "args": list(self.args)}
        if self.cwd is not None:
            d["cwd"] = self.cwd
        if self.env:
            d["env"] = dict(self.env)
        return d


@dataclass
class DebugRequest:
    """Launch a new process, or attach to a running one."""
    kind: RequestKind
    launch: LaunchRequest | None = None
    process_id: int | None = None
    configuration: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_launch(cls, launch: LaunchRequest) -> DebugRequest:
        return cls(kind=RequestKind.LAUNCH, launch=launch)

    @classmethod
    def for_attach(
        cls, process_id: int | None, configuration: dict[str, Any] | None = None
    ) -> DebugRequest:
        return cls(
            kind=RequestKind.ATTACH,
            process_id=process_id,
            configuration=dict(configuration or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"request": self.kind.value}
        if self.launch is not None:
            d.update(self.launch.to_dict())
        if self.process_id is not None:
            d["processId"] = self.process_id
        if self.configuration:
            d["configuration"] = dict(self.configuration)
        return d


@dataclass
class StartDebuggingRequestArguments:
    """Adapter configuration plus the request kind."""
    configuration: dict[str, Any]
    request: RequestKind

    def to_dict(self) -> dict[str, Any]:
        return {"configuration": dict(self.configuration), "request": self.request.value}


@dataclass
class DebugAdapterBinary:
    """Everything needed to spawn a debug adapter and start a session."""
    command: str
    request_args: StartDebuggingRequestArguments
    arguments: list[str] = field(default_factory=list)
    envs: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None
    connection: TcpConnection | None = None  # None: adapter speaks over stdio

    def to_dap_request(self, seq: int = 1) -> DAPRequest:
        """Build the DAP launch/attach request for this session."""
        return DAPRequest(
            seq=seq,
            command=self.request_args.request.value,
            arguments=dict(self.request_args.configuration),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "command": self.command,
            "arguments": list(self.arguments),
            "envs": dict(self.envs),
            "requestArgs": self.request_args.to_dict(),
        }
        if self.cwd is not None:
            d["cwd"] = self.cwd
        if self.connection is not None:
            d["connection"] = self.connection.to_dict()
        return d

