"""Build process execution and diagnostics.

Provides:
- Process spawning with concurrent stdout/stderr draining
- MSBuild diagnostic parsing for failure reports
"""

from .diagnostics import BuildDiagnostic, BuildErrorSeverity, parse_msbuild_output
from .runner import ProcessOutput, run_process

__all__ = [
    "BuildDiagnostic",
    "BuildErrorSeverity",
    "ProcessOutput",
    "parse_msbuild_output",
    "run_process",
]
