"""Solution discovery and loading from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ParseError
from .models import NuGetPackage, SolutionFile, SolutionProject
from .packages import parse_package_references
from .parser import parse_solution

logger = logging.getLogger(__name__)

SOLUTION_SUFFIXES = (".slnx", ".sln")
PROJECT_SUFFIXES = (".csproj", ".vbproj", ".fsproj")

# How far above the root to look for a solution file
MAX_PARENT_LEVELS = 3


def _file_in(directory: Path, suffixes: tuple[str, ...]) -> Path | None:
    """First file directly inside directory with one of suffixes, by sorted name."""
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return None
    for entry in entries:
        if entry.suffix in suffixes and entry.is_file():
            return entry
    return None


def _find_upward(
    root: str | Path, suffixes: tuple[str, ...], max_parent_levels: int | None
) -> Path | None:
    current = Path(root).absolute()
    parents = list(current.parents)
    if max_parent_levels is not None:
        parents = parents[:max_parent_levels]

    for directory in (current, *parents):
        found = _file_in(directory, suffixes)
        if found:
            return found
    return None


def find_solution_file(
    root: str | Path, max_parent_levels: int | None = MAX_PARENT_LEVELS
) -> Path | None:
    """Find a .slnx or .sln file in root or up to max_parent_levels above it.

    Args:
        root: Directory to start from
        max_parent_levels: Number of parent directories to check, or None
            to search up to the filesystem root

    Returns:
        Path to the solution file, or None if not found
    """
    return _find_upward(root, SOLUTION_SUFFIXES, max_parent_levels)


def find_project_file(root: str | Path, max_parent_levels: int | None = None) -> Path | None:
    """Find a .csproj, .vbproj or .fsproj file in root or above it."""
    return _find_upward(root, PROJECT_SUFFIXES, max_parent_levels)


def read_project_packages(project_file: str | Path) -> list[NuGetPackage]:
    """Read the package references of a single project file.

    Raises:
        OSError: If the project file cannot be read
        ParseError: If a PackageReference element is never terminated
    """
    content = Path(project_file).read_text(encoding="utf-8-sig")
    return parse_package_references(content)


def load_project_packages(project: SolutionProject, solution_dir: Path) -> None:
    """Fill a project's package list from its project file.

    Failures leave the project with an empty package list.
    """
    project_file = solution_dir / project.path
    try:
        project.packages = read_project_packages(project_file)
    except (OSError, UnicodeDecodeError, ParseError) as e:
        logger.debug(f"No packages loaded for {project.name} ({project_file}): {e}")
        project.packages = []


def load_solution(solution_path: str | Path) -> SolutionFile:
    """Read and parse a solution file, then load each project's packages.

    The returned model's path is the actual solution file path.

    Raises:
        OSError: If the solution file cannot be read
        ParseError: If the solution markup is malformed
    """
    solution_path = Path(solution_path)
    content = solution_path.read_text(encoding="utf-8-sig")
    solution_dir = solution_path.parent

    solution = parse_solution(content, solution_dir)
    solution.path = solution_path

    for project in solution.projects:
        load_project_packages(project, solution_dir)

    logger.info(
        f"Loaded solution {solution_path.name}: {len(solution.projects)} projects"
    )
    return solution


def find_startup_project_path(solution: SolutionFile) -> Path | None:
    """Directory of the project to build and launch for a solution.

    Prefers the startup project when it is executable, otherwise the first
    executable (non-test) project.
    """
    executable = solution.get_executable_projects()
    startup = solution.get_startup_project()

    chosen = startup if startup is not None and startup in executable else None
    if chosen is None and executable:
        chosen = executable[0]
    if chosen is None:
        return None

    return (solution.path.parent / chosen.path).parent
