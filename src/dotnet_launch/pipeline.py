"""Launch pipeline - composes locator, resolver and adapter into one flow."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from .adapter import DotNetDebugAdapter, apply_debug_request
from .config import LaunchConfig
from .dap.protocol import DebugAdapterBinary, DebugRequest
from .errors import ConfigError
from .locator import DotNetLocator
from .solution import (
    NuGetPackage,
    SolutionFile,
    find_solution_file,
    find_startup_project_path,
    load_solution,
    read_project_packages,
)
from .tasks import DebugScenario, ResolvedTask, TaskTemplate

logger = logging.getLogger(__name__)


class LaunchPipeline:
    """Turns dotnet tasks and solutions into debug adapter launches.

    Usage:
        pipeline = LaunchPipeline(LaunchConfig.from_env(), "/path/to/workspace")
        binary = await pipeline.prepare_launch(TaskTemplate("run", "dotnet", ["run"]),
                                               cwd="/path/to/workspace/src/App")
    """

    def __init__(self, config: LaunchConfig | None = None, project_path: str | None = None):
        self._config = config or LaunchConfig()
        self._adapter = DotNetDebugAdapter(config=self._config)
        self._locator = DotNetLocator(dotnet=self._config.dotnet)
        self._project_path = os.path.abspath(project_path) if project_path else None

    @property
    def config(self) -> LaunchConfig:
        return self._config

    @property
    def adapter(self) -> DotNetDebugAdapter:
        return self._adapter

    @property
    def locator(self) -> DotNetLocator:
        return self._locator

    @property
    def project_path(self) -> str | None:
        return self._project_path

    def set_project_path(self, path: str) -> None:
        self._project_path = os.path.abspath(path)

    def _resolve(self, path: str) -> str:
        """Absolute path, relative ones taken from the project root."""
        if os.path.isabs(path) or not self._project_path:
            return os.path.abspath(path)
        return os.path.join(self._project_path, path)

    async def load_solution(self, solution_path: str | None = None) -> SolutionFile:
        """Load a solution, searching the project root when no path is given.

        Raises:
            FileNotFoundError: If no solution file can be found
        """
        if solution_path:
            path = Path(self._resolve(solution_path))
        else:
            if not self._project_path:
                raise FileNotFoundError("No project root configured to search for a solution")
            found = await asyncio.to_thread(find_solution_file, self._project_path)
            if found is None:
                raise FileNotFoundError(f"No .sln or .slnx file found near {self._project_path}")
            path = found

        return await asyncio.to_thread(load_solution, path)

    async def load_packages(self, project_file: str) -> list[NuGetPackage]:
        """Package references of one project file.

        Raises:
            OSError: If the project file cannot be read
            ParseError: If the project markup is malformed
        """
        return await asyncio.to_thread(read_project_packages, self._resolve(project_file))

    def create_scenario(
        self, template: TaskTemplate, label: str | None = None
    ) -> DebugScenario | None:
        return self._locator.create_scenario(template, label or template.label, self._adapter.name)

    async def build_and_locate(self, task: ResolvedTask) -> DebugRequest:
        """Run a resolved build task and return the launch for its assembly."""
        if task.cwd:
            task = replace(task, cwd=self._resolve(task.cwd))
        return await self._locator.run(task)

    async def prepare_launch(
        self,
        template: TaskTemplate,
        config: Mapping[str, Any] | None = None,
        cwd: str | None = None,
        user_args: list[str] | None = None,
        user_env: Mapping[str, str] | None = None,
    ) -> DebugAdapterBinary:
        """Build a dotnet task and assemble the debug adapter launch for it.

        Args:
            template: dotnet task (run, build, or test --no-build)
            config: User debug configuration merged over the scenario's
            cwd: Build working directory (defaults to the template's)
            user_args: Extra debug adapter arguments
            user_env: Extra debug adapter environment

        Raises:
            ConfigError: If the task is not debuggable or config is incomplete
            BuildError: If the build fails
            ArtifactNotFoundError: If the built assembly cannot be found
            DebuggerNotFoundError: If no debugger is available
        """
        scenario = self.create_scenario(template)
        if scenario is None or scenario.build is None:
            raise ConfigError(
                f"Task '{template.label}' is not debuggable: expected dotnet run, "
                "build, or test --no-build"
            )

        task = ResolvedTask.from_template(scenario.build.task_template, cwd=cwd)
        debug_request = await self.build_and_locate(task)

        merged = apply_debug_request({**scenario.config, **(config or {})}, debug_request)
        return await self._adapter.get_binary(merged, user_args=user_args, user_env=user_env)

    async def prepare_solution_launch(
        self,
        solution_path: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> DebugAdapterBinary:
        """Build and launch the startup project of a solution.

        Raises:
            FileNotFoundError: If no solution is found
            ConfigError: If the solution has no executable project
        """
        solution = await self.load_solution(solution_path)
        project_dir = find_startup_project_path(solution)
        if project_dir is None:
            raise ConfigError(f"No executable project in {solution.path}")

        logger.info(f"Launching startup project in {project_dir}")
        template = TaskTemplate(label="dotnet: run", command=self._config.dotnet, args=["run"])
        return await self.prepare_launch(template, config=config, cwd=str(project_dir))
