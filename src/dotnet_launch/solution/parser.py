"""Solution file parsing for the .sln (text) and .slnx (XML) dialects.

Legacy .sln format:
    Project("{type-guid}") = "name", "path", "{guid}"
    ...
        Debug|Any CPU = Debug|Any CPU

.slnx format:
    <Solution>
      <Project Path="src/App/App.csproj" />
    </Solution>
"""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path, PureWindowsPath

from .markup import iter_start_tags
from .models import SolutionFile, SolutionProject

logger = logging.getLogger(__name__)

PROJECT_LINE_PREFIX = 'Project("'
CONFIGURATION_PREFIXES = ("Debug|", "Release|")
STARTUP_PROJECT_MARKER = "StartupProject"
DEFAULT_CONFIGURATIONS = ["Debug", "Release"]

# C# project type GUID, assigned to every .slnx project
CSHARP_PROJECT_TYPE_GUID = "FAE04EC0-301F-11D3-BA7A-00C04FC2CCAE"

XML_PROLOG_MARKERS = ("<?xml", "<Solution")

_GUID_PATTERN = re.compile(r"\{([^}]*)\}")


def is_xml_solution(content: str) -> bool:
    """Whether content uses the .slnx dialect."""
    return content.lstrip().startswith(XML_PROLOG_MARKERS)


def parse_solution(content: str, base_dir: str | Path) -> SolutionFile:
    """Parse a .NET solution file (.sln or .slnx format).

    Args:
        content: Solution file text
        base_dir: Directory containing the solution

    Returns:
        Parsed solution

    Raises:
        ParseError: If a .slnx Project tag is never closed
    """
    base_dir = Path(base_dir)
    if is_xml_solution(content):
        return _parse_slnx(content, base_dir)
    return _parse_sln(content, base_dir)


def extract_guid(line: str) -> str | None:
    """Extract the first {GUID} token from a line, without braces."""
    match = _GUID_PATTERN.search(line)
    return match.group(1) if match else None


def parse_project_line(line: str) -> SolutionProject | None:
    """Parse a legacy project declaration line.

    Format: Project("{type-guid}") = "name", "path", "{guid}"
    """
    type_guid = extract_guid(line)
    if type_guid is None:
        return None

    _, sep, after_equals = line.partition("=")
    if not sep:
        return None

    parts = [part.strip().strip('"') for part in after_equals.split(",")]
    if len(parts) < 3:
        return None

    name, path, guid = parts[0], parts[1], parts[2]
    return SolutionProject(
        name=name,
        path=_relative_path(path),
        guid=guid.strip("{}"),
        type_guid=type_guid,
    )


def _relative_path(path: str) -> Path:
    """Convert a solution-relative path, which may use backslashes."""
    return Path(*PureWindowsPath(path).parts) if "\\" in path else Path(path)


def _parse_sln(content: str, base_dir: Path) -> SolutionFile:
    projects: list[SolutionProject] = []
    configurations: list[str] = []
    startup_project: str | None = None

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if line.startswith(PROJECT_LINE_PREFIX):
            project = parse_project_line(line)
            if project is not None:
                projects.append(project)
            else:
                logger.debug(f"Ignoring malformed project line: {line}")

        if line.startswith(CONFIGURATION_PREFIXES):
            config = line.split("|", 1)[0]
            if config not in configurations:
                configurations.append(config)

        if STARTUP_PROJECT_MARKER in line:
            guid = extract_guid(line)
            if guid is not None:
                startup_project = guid

    if startup_project is None and projects:
        startup_project = projects[0].guid

    return SolutionFile(
        path=base_dir / "solution.sln",
        projects=projects,
        configurations=configurations or list(DEFAULT_CONFIGURATIONS),
        startup_project=startup_project,
    )


def synthesize_guid(path: str) -> str:
    """Derive a stable GUID-shaped identifier from a project path.

    Not a real project GUID; the same path always yields the same value.
    """
    digest = hashlib.blake2b(path.encode("utf-8"), digest_size=8).digest()
    value = int.from_bytes(digest, "big")
    return "{:08x}-{:04x}-{:04x}-{:04x}-{:012x}".format(
        (value >> 32) & 0xFFFFFFFF,
        (value >> 16) & 0xFFFF,
        value & 0xFFFF,
        (value >> 48) & 0xFFFF,
        value & 0xFFFFFFFFFFFF,
    )


def _parse_slnx(content: str, base_dir: Path) -> SolutionFile:
    projects: list[SolutionProject] = []

    for tag in iter_start_tags(content, "Project"):
        path_str = tag.get("Path")
        if not path_str:
            continue

        path = _relative_path(path_str)
        projects.append(
            SolutionProject(
                name=path.stem or "Unknown",
                path=path,
                guid=synthesize_guid(path_str),
                type_guid=CSHARP_PROJECT_TYPE_GUID,
            )
        )

    return SolutionFile(
        path=base_dir / "solution.slnx",
        projects=projects,
        configurations=list(DEFAULT_CONFIGURATIONS),
        startup_project=projects[0].guid if projects else None,
    )
