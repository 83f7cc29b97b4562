"""Debug locator for .NET projects.

Turns "dotnet run" style tasks into a build-then-debug scenario, runs the
build, and recovers the compiled assembly from the build output.
"""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from typing import Final

from ..build.diagnostics import errors_only, parse_msbuild_output
from ..build.runner import run_process
from ..dap.protocol import DebugRequest, LaunchRequest, RequestKind
from ..errors import BuildError, ConfigError
from ..tasks import BuildTaskDefinition, DebugScenario, ResolvedTask, TaskTemplate
from .output import find_output_assembly

logger = logging.getLogger(__name__)

LOCATOR_NAME: Final[str] = "dotnet-locator"
DOTNET_PROGRAM: Final[str] = "dotnet"

RUN_ACTIONS: Final[frozenset[str]] = frozenset({"run", "r"})
BUILD_ACTION: Final[str] = "build"
TEST_ACTION: Final[str] = "test"
NO_BUILD_FLAG: Final[str] = "--no-build"

# Everything after this goes to the program, not the build
PROGRAM_ARGS_SEPARATOR: Final[str] = "--"

INJECTED_BUILD_FLAGS: Final[tuple[str, ...]] = (
    "--no-restore",
    "/p:GenerateFullPaths=true",
    "-v:q",
)

# Errors listed in a BuildError message
MAX_REPORTED_ERRORS: Final[int] = 5


def is_dotnet_command(command: str) -> bool:
    """Whether command invokes the dotnet CLI (bare name or a path to it)."""
    name = re.split(r"[\\/]", command)[-1]
    return name in (DOTNET_PROGRAM, f"{DOTNET_PROGRAM}.exe")


def wrap_in_shell(shell: str | None, program: str, args: list[str]) -> tuple[str, list[str]]:
    """Wrap a command line for non-interactive execution by shell.

    Args:
        shell: Shell program, or None to run program directly
        program: Program to run
        args: Program arguments

    Returns:
        (program, args) to spawn
    """
    if not shell:
        return program, list(args)

    shell_name = re.split(r"[\\/]", shell)[-1].lower()
    if shell_name.endswith(".exe"):
        shell_name = shell_name[:-4]

    if shell_name == "cmd":
        return shell, ["/C", subprocess.list2cmdline([program, *args])]

    if shell_name in ("powershell", "pwsh"):
        quoted = " ".join("'" + part.replace("'", "''") + "'" for part in [program, *args])
        return shell, ["-NoProfile", "-NonInteractive", "-Command", f"& {quoted}"]

    return shell, ["-c", shlex.join([program, *args])]


class DotNetLocator:
    """Locator converting dotnet tasks into debuggable launches.

    Usage:
        locator = DotNetLocator()
        scenario = locator.create_scenario(template, "Debug MyApp", "netcoredbg")
        # ... scenario.build runs, then:
        request = await locator.run(resolved_task)
    """

    def __init__(self, dotnet: str = DOTNET_PROGRAM):
        """Initialize locator.

        Args:
            dotnet: dotnet CLI program used to run builds
        """
        self._dotnet = dotnet

    @property
    def name(self) -> str:
        return LOCATOR_NAME

    def create_scenario(
        self,
        template: TaskTemplate,
        label: str,
        adapter: str,
    ) -> DebugScenario | None:
        """Build a debug scenario from a dotnet task template.

        "run" (or "r") is rewritten to "build"; "build" is kept; "test" is
        accepted only with --no-build. Anything else is not debuggable.

        Args:
            template: Task template to convert; not modified
            label: Resolved scenario label
            adapter: Debug adapter name

        Returns:
            Debug scenario, or None if the task is not a debuggable dotnet task
        """
        if not is_dotnet_command(template.command):
            return None

        task_template = template.copy()
        if not task_template.args:
            return None

        action = task_template.args[0]
        if action in RUN_ACTIONS:
            # run() finds the executable once the build is done
            task_template.args[0] = BUILD_ACTION
        elif action == TEST_ACTION:
            if NO_BUILD_FLAG not in task_template.args:
                return None
        elif action != BUILD_ACTION:
            return None

        return DebugScenario(
            adapter=adapter,
            label=label,
            build=BuildTaskDefinition(task_template=task_template, locator_name=self.name),
            config={"type": "coreclr", "request": RequestKind.LAUNCH.value},
            tcp_connection=None,
        )

    def build_command(self, task: ResolvedTask) -> tuple[str, list[str]]:
        """Build the dotnet invocation for a resolved task.

        Task args are cut at the first "--"; the injected flags skip
        restore, force full paths in output and quiet the logger.
        """
        build_args: list[str] = []
        for arg in task.args:
            if arg == PROGRAM_ARGS_SEPARATOR:
                break
            build_args.append(arg)
        build_args.extend(INJECTED_BUILD_FLAGS)

        return wrap_in_shell(task.shell, self._dotnet, build_args)

    async def run(self, task: ResolvedTask) -> DebugRequest:
        """Run the build for a resolved task and locate the built assembly.

        Args:
            task: Resolved build task; must have a working directory

        Returns:
            Launch request for the compiled assembly

        Raises:
            ConfigError: If the task has no working directory
            BuildError: If the build cannot start or exits non-zero
            ArtifactNotFoundError: If no built assembly can be found
        """
        if not task.cwd:
            raise ConfigError("Working directory required for dotnet build")
        cwd = task.cwd

        program, args = self.build_command(task)
        logger.info(f"Running dotnet build: {program} {' '.join(args)}")

        try:
            result = await run_process(program, args, cwd=cwd, env=task.env)
        except OSError as e:
            raise BuildError(f"Failed to spawn dotnet build: {e}", stderr=str(e)) from e

        if not result.success:
            diagnostics = parse_msbuild_output(result.stdout + "\n" + result.stderr)
            message = (
                f"dotnet build failed with exit code {result.exit_code}\n"
                f"stderr: {result.stderr}"
            )
            errors = errors_only(diagnostics)
            if errors:
                lines = [d.to_summary() for d in errors[:MAX_REPORTED_ERRORS]]
                if len(errors) > MAX_REPORTED_ERRORS:
                    lines.append(f"... and {len(errors) - MAX_REPORTED_ERRORS} more errors")
                message += "\nerrors:\n  " + "\n  ".join(lines)
            raise BuildError(
                message,
                stderr=result.stderr,
                exit_code=result.exit_code,
                diagnostics=diagnostics,
            )

        program_path = await find_output_assembly(result.stdout, cwd)
        logger.info(f"Found output assembly: {program_path}")

        return DebugRequest.for_launch(
            LaunchRequest(program=program_path, cwd=cwd, args=[], env={})
        )
