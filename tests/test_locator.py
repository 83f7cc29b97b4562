"""Tests for the dotnet debug locator."""

from unittest.mock import AsyncMock, patch

import pytest

from dotnet_launch.dap.protocol import RequestKind
from dotnet_launch.errors import ArtifactNotFoundError, BuildError, ConfigError
from dotnet_launch.locator.dotnet import (
    INJECTED_BUILD_FLAGS,
    LOCATOR_NAME,
    DotNetLocator,
    is_dotnet_command,
    wrap_in_shell,
)
from dotnet_launch.tasks import ResolvedTask, TaskTemplate


def _template(*args: str, command: str = "dotnet") -> TaskTemplate:
    return TaskTemplate(label="task", command=command, args=list(args))


def _mock_process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> AsyncMock:
    process = AsyncMock()
    process.pid = 1234
    process.returncode = returncode
    process.stdout = AsyncMock()
    process.stdout.read = AsyncMock(side_effect=[stdout, b""] if stdout else [b""])
    process.stderr = AsyncMock()
    process.stderr.read = AsyncMock(side_effect=[stderr, b""] if stderr else [b""])
    process.wait = AsyncMock(return_value=returncode)
    return process


class TestIsDotnetCommand:
    """Tests for build tool recognition."""

    def test_bare_name(self):
        """Test the bare program name matches."""
        assert is_dotnet_command("dotnet")

    def test_paths(self):
        """Test paths to the dotnet executable match."""
        assert is_dotnet_command("/usr/share/dotnet/dotnet")
        assert is_dotnet_command("C:\\Program Files\\dotnet\\dotnet.exe")

    def test_other_programs(self):
        """Test other programs do not match."""
        assert not is_dotnet_command("cargo")
        assert not is_dotnet_command("dotnet-script")


class TestCreateScenario:
    """Tests for DotNetLocator.create_scenario."""

    def test_non_dotnet_program(self):
        """Test a non-dotnet program is rejected."""
        assert DotNetLocator().create_scenario(_template("run", command="npm"), "l", "a") is None

    def test_no_arguments(self):
        """Test a bare dotnet invocation is rejected."""
        assert DotNetLocator().create_scenario(_template(), "l", "a") is None

    @pytest.mark.parametrize("action", ["run", "r"])
    def test_run_rewritten_to_build(self, action):
        """Test run and its alias become build, leaving other args untouched."""
        template = _template(action, "--project", "src/App", "-c", "Debug", "--", "arg")

        scenario = DotNetLocator().create_scenario(template, "Debug App", "netcoredbg")

        assert scenario is not None
        assert scenario.build.task_template.args == [
            "build", "--project", "src/App", "-c", "Debug", "--", "arg",
        ]

    def test_input_template_not_mutated(self):
        """Test the caller's template keeps its original action."""
        template = _template("run", "--project", "src/App")
        DotNetLocator().create_scenario(template, "l", "a")
        assert template.args == ["run", "--project", "src/App"]

    def test_build_accepted_unchanged(self):
        """Test build is accepted as is."""
        scenario = DotNetLocator().create_scenario(_template("build", "-c", "Release"), "l", "a")
        assert scenario.build.task_template.args == ["build", "-c", "Release"]

    def test_test_with_no_build(self):
        """Test test is accepted only with --no-build."""
        locator = DotNetLocator()
        assert locator.create_scenario(_template("test"), "l", "a") is None
        scenario = locator.create_scenario(_template("test", "--no-build"), "l", "a")
        assert scenario.build.task_template.args == ["test", "--no-build"]

    @pytest.mark.parametrize("action", ["clean", "restore", "publish", "pack", "--info"])
    def test_other_actions_rejected(self, action):
        """Test non-debuggable actions are rejected."""
        assert DotNetLocator().create_scenario(_template(action), "l", "a") is None

    def test_scenario_fields(self):
        """Test adapter, label, locator identity and config stub."""
        scenario = DotNetLocator().create_scenario(_template("run"), "Debug App", "netcoredbg")

        assert scenario.adapter == "netcoredbg"
        assert scenario.label == "Debug App"
        assert scenario.build.locator_name == LOCATOR_NAME
        assert scenario.config == {"type": "coreclr", "request": "launch"}
        assert scenario.tcp_connection is None


class TestBuildCommand:
    """Tests for building the dotnet invocation."""

    def test_truncates_at_separator(self):
        """Test arguments after "--" are dropped and flags appended."""
        task = ResolvedTask(label="t", command="dotnet", args=["build", "-c", "Debug", "--", "x", "y"])

        program, args = DotNetLocator().build_command(task)

        assert program == "dotnet"
        assert args == ["build", "-c", "Debug", *INJECTED_BUILD_FLAGS]

    def test_injected_flags(self):
        """Test the three injected flags."""
        assert INJECTED_BUILD_FLAGS == ("--no-restore", "/p:GenerateFullPaths=true", "-v:q")

    def test_configured_dotnet_program(self):
        """Test the configured dotnet program is used."""
        task = ResolvedTask(label="t", command="dotnet", args=["build"])
        program, _ = DotNetLocator(dotnet="/opt/dotnet/dotnet").build_command(task)
        assert program == "/opt/dotnet/dotnet"

    def test_posix_shell(self):
        """Test POSIX shells get a quoted -c command line."""
        program, args = wrap_in_shell("/bin/bash", "dotnet", ["build", "My App"])
        assert program == "/bin/bash"
        assert args == ["-c", "dotnet build 'My App'"]

    def test_cmd_shell(self):
        """Test cmd.exe gets /C."""
        program, args = wrap_in_shell("cmd.exe", "dotnet", ["build"])
        assert program == "cmd.exe"
        assert args == ["/C", "dotnet build"]

    def test_powershell(self):
        """Test PowerShell gets a non-interactive -Command."""
        _, args = wrap_in_shell("pwsh", "dotnet", ["build"])
        assert args[:3] == ["-NoProfile", "-NonInteractive", "-Command"]
        assert args[3] == "& 'dotnet' 'build'"

    def test_no_shell(self):
        """Test no shell runs the program directly."""
        assert wrap_in_shell(None, "dotnet", ["build"]) == ("dotnet", ["build"])


class TestRun:
    """Tests for DotNetLocator.run."""

    @pytest.mark.asyncio
    async def test_requires_cwd(self):
        """Test a task without working directory fails."""
        with pytest.raises(ConfigError, match="Working directory"):
            await DotNetLocator().run(ResolvedTask(label="t", command="dotnet", args=["build"]))

    @pytest.mark.asyncio
    async def test_assembly_from_arrow_line(self, tmp_path):
        """Test the assembly named on an arrow line is launched."""
        dll = tmp_path / "bin" / "Debug" / "net8.0" / "MyApp.dll"
        dll.parent.mkdir(parents=True)
        dll.touch()
        stdout = f"  MyApp -> {dll}\n".encode()
        task = ResolvedTask(label="t", command="dotnet", args=["build"], cwd=str(tmp_path))

        with patch("asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(stdout=stdout)
            request = await DotNetLocator().run(task)

        assert request.kind == RequestKind.LAUNCH
        assert request.launch.program == str(dll)
        assert request.launch.cwd == str(tmp_path)
        assert request.launch.args == []
        assert request.launch.env == {}

    @pytest.mark.asyncio
    async def test_spawn_arguments_and_env(self, tmp_path):
        """Test the spawned command line, cwd and merged environment."""
        dll = tmp_path / "bin" / "Debug" / "App.dll"
        dll.parent.mkdir(parents=True)
        dll.touch()
        task = ResolvedTask(
            label="t",
            command="dotnet",
            args=["build", "--", "ignored"],
            cwd=str(tmp_path),
            env={"DOTNET_CLI_TELEMETRY_OPTOUT": "1"},
        )

        with patch("asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process()
            await DotNetLocator().run(task)

        call = mock_exec.call_args
        assert call.args == ("dotnet", "build", *INJECTED_BUILD_FLAGS)
        assert call.kwargs["cwd"] == str(tmp_path)
        assert call.kwargs["env"]["DOTNET_CLI_TELEMETRY_OPTOUT"] == "1"

    @pytest.mark.asyncio
    async def test_fallback_scan(self, tmp_path):
        """Test a conventional output directory is scanned when stdout names nothing."""
        dll = tmp_path / "bin" / "Debug" / "Foo.dll"
        dll.parent.mkdir(parents=True)
        dll.touch()
        task = ResolvedTask(label="t", command="dotnet", args=["build"], cwd=str(tmp_path))

        with patch("asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(stdout=b"Build succeeded.\n")
            request = await DotNetLocator().run(task)

        assert request.launch.program == str(dll)

    @pytest.mark.asyncio
    async def test_build_failure_carries_stderr(self, tmp_path):
        """Test a non-zero exit raises BuildError with the captured stderr."""
        task = ResolvedTask(label="t", command="dotnet", args=["build"], cwd=str(tmp_path))
        stdout = b"Program.cs(3,5): error CS0103: The name 'x' does not exist [/p/App.csproj]\n"

        with patch("asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(
                stdout=stdout, stderr=b"MSBUILD : error MSB1009: Project file does not exist.", returncode=1
            )
            with pytest.raises(BuildError) as exc_info:
                await DotNetLocator().run(task)

        error = exc_info.value
        assert "MSB1009: Project file does not exist." in str(error)
        assert error.stderr == "MSBUILD : error MSB1009: Project file does not exist."
        assert error.exit_code == 1
        assert any(d.code == "CS0103" for d in error.diagnostics)
        assert "CS0103" in str(error)

    @pytest.mark.asyncio
    async def test_spawn_failure(self, tmp_path):
        """Test a missing dotnet executable surfaces as BuildError."""
        task = ResolvedTask(label="t", command="dotnet", args=["build"], cwd=str(tmp_path))

        with patch("asyncio.create_subprocess_exec", side_effect=FileNotFoundError("dotnet")):
            with pytest.raises(BuildError, match="Failed to spawn"):
                await DotNetLocator().run(task)

    @pytest.mark.asyncio
    async def test_no_artifact(self, tmp_path):
        """Test ArtifactNotFoundError carries the full stdout."""
        task = ResolvedTask(label="t", command="dotnet", args=["build"], cwd=str(tmp_path))

        with patch("asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(stdout=b"Build succeeded.\n    0 Warning(s)\n")
            with pytest.raises(ArtifactNotFoundError) as exc_info:
                await DotNetLocator().run(task)

        assert exc_info.value.stdout == "Build succeeded.\n    0 Warning(s)\n"
        assert "0 Warning(s)" in str(exc_info.value)
