"""Launch pipeline exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .build.diagnostics import BuildDiagnostic


class LaunchPipelineError(Exception):
    """Base exception for debug launch resolution errors."""

    pass


class ParseError(LaunchPipelineError):
    """Raised when a solution or project descriptor has an unterminated tag."""

    pass


class DebuggerNotFoundError(LaunchPipelineError, LookupError):
    """Raised when the debugger executable cannot be located."""

    pass


class ConfigError(LaunchPipelineError):
    """Raised when a required configuration field is missing."""

    pass


class BuildError(LaunchPipelineError):
    """Build process exited with a non-zero status.

    Carries the captured stderr verbatim so the toolchain failure can be
    diagnosed, plus any MSBuild diagnostics parsed from the output.
    """

    def __init__(
        self,
        message: str,
        stderr: str = "",
        exit_code: int | None = None,
        diagnostics: list[BuildDiagnostic] | None = None,
    ):
        super().__init__(message)
        self.stderr = stderr
        self.exit_code = exit_code
        self.diagnostics = diagnostics or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "stderr": self.stderr,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
        if self.exit_code is not None:
            result["exitCode"] = self.exit_code
        return result


class ArtifactNotFoundError(LaunchPipelineError):
    """Build succeeded but no compiled assembly could be located."""

    def __init__(self, message: str, stdout: str = ""):
        super().__init__(message)
        self.stdout = stdout
