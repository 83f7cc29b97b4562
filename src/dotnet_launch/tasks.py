"""Build task templates and debug scenarios."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .dap.protocol import TcpConnection


@dataclass
class TaskTemplate:
    """A generic, unresolved build tool invocation."""

    label: str
    command: str
    args: list[str] = field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    shell: str | None = None
    """Shell to wrap the command in; None runs the program directly."""

    def copy(self) -> TaskTemplate:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "label": self.label,
            "command": self.command,
            "args": list(self.args),
        }
        if self.cwd is not None:
            result["cwd"] = self.cwd
        if self.env:
            result["env"] = dict(self.env)
        if self.shell is not None:
            result["shell"] = self.shell
        return result


@dataclass
class ResolvedTask:
    """A task template after variable substitution, ready to spawn."""

    label: str
    command: str
    args: list[str] = field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    shell: str | None = None

    @classmethod
    def from_template(
        cls, template: TaskTemplate, cwd: str | None = None
    ) -> ResolvedTask:
        """Resolve a template, optionally overriding its working directory."""
        return cls(
            label=template.label,
            command=template.command,
            args=list(template.args),
            cwd=cwd if cwd is not None else template.cwd,
            env=dict(template.env),
            shell=template.shell,
        )


@dataclass
class BuildTaskDefinition:
    """Build step of a debug scenario, handed back to a locator after it runs."""

    task_template: TaskTemplate
    locator_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"taskTemplate": self.task_template.to_dict()}
        if self.locator_name is not None:
            result["locatorName"] = self.locator_name
        return result


@dataclass
class DebugScenario:
    """An optional build step followed by a launch/attach configuration."""

    adapter: str
    label: str
    build: BuildTaskDefinition | None = None
    config: dict[str, Any] = field(default_factory=dict)
    tcp_connection: TcpConnection | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "adapter": self.adapter,
            "label": self.label,
            "config": dict(self.config),
        }
        if self.build is not None:
            result["build"] = self.build.to_dict()
        if self.tcp_connection is not None:
            result["tcpConnection"] = self.tcp_connection.to_dict()
        return result


def default_task_templates(dotnet: str = "dotnet") -> list[TaskTemplate]:
    """Stock task templates for common dotnet operations."""
    return [
        TaskTemplate(label="dotnet: build", command=dotnet, args=["build"]),
        TaskTemplate(label="dotnet: clean", command=dotnet, args=["clean"]),
        TaskTemplate(label="dotnet: test", command=dotnet, args=["test"]),
        TaskTemplate(label="dotnet: run", command=dotnet, args=["run"]),
    ]
