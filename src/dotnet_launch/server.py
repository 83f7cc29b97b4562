"""MCP Server exposing the .NET debug launch pipeline."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import Context, FastMCP
from pydantic import AnyUrl

from .config import LaunchConfig
from .dap.protocol import DebugAdapterBinary
from .errors import ArtifactNotFoundError, BuildError
from .pipeline import LaunchPipeline
from .tasks import ResolvedTask, TaskTemplate, default_task_templates
from .utils.project import get_project_root

logger = logging.getLogger(__name__)

SOLUTION_RESOURCE_URI = "solution://current"

# Global pipeline (single client mode)
_pipeline: LaunchPipeline | None = None
_initial_project_path: str | None = None


def get_pipeline() -> LaunchPipeline:
    """Get or create the launch pipeline."""
    global _pipeline
    if _pipeline is None:
        _pipeline = LaunchPipeline(LaunchConfig.from_env(), _initial_project_path)
    return _pipeline


async def resolve_project_root(ctx: Context, pipeline: LaunchPipeline) -> Path | None:
    """Resolve the current project root, updating the pipeline if it moved."""
    project_root = await get_project_root(ctx)
    if project_root:
        new_path = str(project_root)
        if pipeline.project_path != new_path:
            logger.info(f"Updating project root: {pipeline.project_path} -> {new_path}")
            pipeline.set_project_path(new_path)
    return project_root


def _error_result(e: Exception) -> dict[str, Any]:
    """Tool error payload, keeping captured build output."""
    result: dict[str, Any] = {"success": False, "error": str(e)}
    if isinstance(e, BuildError):
        result["build"] = e.to_dict()
    elif isinstance(e, ArtifactNotFoundError):
        result["stdout"] = e.stdout
    return result


def launch_payload(binary: DebugAdapterBinary) -> dict[str, Any]:
    """Adapter launch data plus the start request, as a message and as a wire frame."""
    request = binary.to_dap_request()
    data = binary.to_dict()
    data["dapRequest"] = request.to_dict()
    data["dapFrame"] = request.to_bytes().decode("utf-8")
    return data


def create_server(project_path: str | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        project_path: Initial project root. Can be updated from MCP client roots.
    """
    global _initial_project_path
    _initial_project_path = project_path
    mcp = FastMCP("dotnet-launch")
    pipeline = get_pipeline()

    async def notify_solution_changed(ctx: Context) -> None:
        """Notify client that the solution resource has changed."""
        try:
            if ctx.session:
                await ctx.session.send_resource_updated(AnyUrl(SOLUTION_RESOURCE_URI))
        except Exception:
            pass  # Notification failure shouldn't break the tool

    # ============== Solution Tools ==============

    @mcp.tool()
    async def parse_solution(ctx: Context, solution_path: str | None = None) -> dict:
        """
        Parse a .sln or .slnx solution with each project's NuGet packages.

        Without solution_path, the nearest solution in or above the project
        root is used.

        Args:
            solution_path: Path to a .sln/.slnx file (optional)
        """
        try:
            await resolve_project_root(ctx, pipeline)
            solution = await pipeline.load_solution(solution_path)
            await notify_solution_changed(ctx)
            return {"success": True, "data": solution.to_dict()}
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def list_executable_projects(ctx: Context, solution_path: str | None = None) -> dict:
        """
        List solution projects that are likely runnable (name heuristic:
        projects containing "Test" are excluded).

        Args:
            solution_path: Path to a .sln/.slnx file (optional)
        """
        try:
            await resolve_project_root(ctx, pipeline)
            solution = await pipeline.load_solution(solution_path)
            startup = solution.get_startup_project()
            return {
                "success": True,
                "data": {
                    "projects": [p.to_dict() for p in solution.get_executable_projects()],
                    "startupProject": startup.name if startup else None,
                },
            }
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def list_packages(
        ctx: Context,
        project_path: str | None = None,
        solution_path: str | None = None,
    ) -> dict:
        """
        List NuGet PackageReference entries.

        With project_path, reads that .csproj directly. Otherwise lists the
        packages of every project in the solution.

        Args:
            project_path: Path to a project file (optional)
            solution_path: Path to a .sln/.slnx file (optional)
        """
        try:
            await resolve_project_root(ctx, pipeline)
            if project_path:
                packages = await pipeline.load_packages(project_path)
                return {"success": True, "data": [p.to_dict() for p in packages]}

            solution = await pipeline.load_solution(solution_path)
            return {
                "success": True,
                "data": {
                    p.name: [pkg.to_dict() for pkg in p.packages] for p in solution.projects
                },
            }
        except Exception as e:
            return _error_result(e)

    # ============== Task Tools ==============

    @mcp.tool()
    async def list_dotnet_tasks() -> dict:
        """List the stock dotnet task templates (build, clean, test, run)."""
        templates = default_task_templates(pipeline.config.dotnet)
        return {"success": True, "data": [t.to_dict() for t in templates]}

    @mcp.tool()
    async def create_debug_scenario(
        args: list[str],
        label: str = "dotnet",
        command: str = "dotnet",
        cwd: str | None = None,
    ) -> dict:
        """
        Convert a dotnet task into a build-then-debug scenario.

        "dotnet run" becomes "dotnet build"; "dotnet build" is kept;
        "dotnet test" needs --no-build. Other commands are not debuggable
        and return data=null.

        Args:
            args: dotnet arguments, e.g. ["run", "--project", "src/App"]
            label: Scenario label
            command: Program of the task (must be dotnet)
            cwd: Task working directory
        """
        try:
            template = TaskTemplate(label=label, command=command, args=args, cwd=cwd)
            scenario = pipeline.create_scenario(template, label)
            return {"success": True, "data": scenario.to_dict() if scenario else None}
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def build_and_locate(
        ctx: Context,
        cwd: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
        shell: str | None = None,
    ) -> dict:
        """
        Run dotnet build and find the compiled assembly to debug.

        Arguments after "--" are dropped. The build runs with --no-restore,
        so restore packages beforehand if needed.

        Args:
            cwd: Project directory to build in
            args: dotnet arguments (default ["build"])
            env: Extra environment variables for the build
            shell: Shell to run the build through (optional)
        """
        try:
            await resolve_project_root(ctx, pipeline)
            task = ResolvedTask(
                label="dotnet: build",
                command=pipeline.config.dotnet,
                args=args or ["build"],
                cwd=cwd,
                env=env or {},
                shell=shell,
            )
            request = await pipeline.build_and_locate(task)
            return {"success": True, "data": request.to_dict()}
        except Exception as e:
            return _error_result(e)

    # ============== Debugger Tools ==============

    @mcp.tool()
    async def resolve_debugger() -> dict:
        """Find the debugger executable (PATH, then the adapter cache directory)."""
        try:
            path = await pipeline.adapter.resolver.get_binary_path(pipeline.config.debugger_path)
            return {"success": True, "data": {"path": str(path)}}
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def refresh_debugger() -> dict:
        """Forget the cached debugger location and look it up again."""
        try:
            pipeline.adapter.resolver.invalidate()
            path = await pipeline.adapter.resolver.get_binary_path(pipeline.config.debugger_path)
            return {"success": True, "data": {"path": str(path)}}
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def assemble_launch(
        config: dict[str, Any],
        debugger_path: str | None = None,
        adapter_args: list[str] | None = None,
        adapter_env: dict[str, str] | None = None,
    ) -> dict:
        """
        Assemble the debug adapter process and launch/attach request.

        config keys: type, request (launch|attach), name, program (required
        for launch), args, cwd, stopAtEntry, console, processId (attach).

        Args:
            config: Debug configuration
            debugger_path: Explicit debugger executable (skips discovery)
            adapter_args: Extra debug adapter arguments
            adapter_env: Extra debug adapter environment
        """
        try:
            binary = await pipeline.adapter.get_binary(
                config,
                user_installed_path=debugger_path,
                user_args=adapter_args,
                user_env=adapter_env,
            )
            data = launch_payload(binary)
            return {"success": True, "data": data}
        except Exception as e:
            return _error_result(e)

    @mcp.tool()
    async def prepare_launch(
        ctx: Context,
        cwd: str | None = None,
        args: list[str] | None = None,
        solution_path: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> dict:
        """
        Build a .NET project and assemble its debug launch in one step.

        With cwd, runs the given dotnet task there (default ["run"]).
        Without cwd, builds the startup project of the solution.

        Args:
            cwd: Project directory (optional)
            args: dotnet arguments (default ["run"])
            solution_path: Solution to take the startup project from (optional)
            config: Extra debug configuration (stopAtEntry, console, ...)
        """
        try:
            await resolve_project_root(ctx, pipeline)
            if cwd:
                template = TaskTemplate(
                    label="dotnet: run", command=pipeline.config.dotnet, args=args or ["run"]
                )
                binary = await pipeline.prepare_launch(template, config=config, cwd=cwd)
            else:
                binary = await pipeline.prepare_solution_launch(solution_path, config=config)
            data = launch_payload(binary)
            return {"success": True, "data": data}
        except Exception as e:
            return _error_result(e)

    # ============== Resources ==============

    @mcp.resource(SOLUTION_RESOURCE_URI, mime_type="application/json")
    async def solution_resource() -> str:
        """Solution found under the project root (JSON).

        Contains: projects with packages, configurations, startup project.
        """
        try:
            solution = await pipeline.load_solution()
        except Exception as e:
            return json.dumps({"error": str(e)}, indent=2)
        return json.dumps(solution.to_dict(), indent=2)

    logger.info("dotnet-launch MCP Server initialized")
    return mcp
