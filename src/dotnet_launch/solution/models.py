"""Solution model types."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Heuristic marker for test projects. Advisory only.
TEST_PROJECT_MARKER = "Test"


@dataclass
class NuGetPackage:
    """A NuGet package reference in a project."""

    id: str
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"id": self.id}
        if self.version is not None:
            result["version"] = self.version
        return result


@dataclass
class SolutionProject:
    """A project in a .NET solution."""

    name: str
    path: Path
    """Path to the project file, relative to the solution directory."""

    guid: str
    type_guid: str
    packages: list[NuGetPackage] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "path": self.path.as_posix(),
            "guid": self.guid,
            "typeGuid": self.type_guid,
            "packages": [p.to_dict() for p in self.packages],
        }


@dataclass
class SolutionFile:
    """A parsed .NET solution (.sln or .slnx)."""

    path: Path
    projects: list[SolutionProject] = field(default_factory=list)
    configurations: list[str] = field(default_factory=list)
    startup_project: str | None = None
    """GUID of the startup project, if any."""

    def get_project(self, name: str) -> SolutionProject | None:
        """Get a project by name."""
        return next((p for p in self.projects if p.name == name), None)

    def get_project_by_guid(self, guid: str) -> SolutionProject | None:
        """Get the first project with the given GUID."""
        return next((p for p in self.projects if p.guid == guid), None)

    def get_startup_project(self) -> SolutionProject | None:
        """Get the startup project."""
        if self.startup_project is None:
            return None
        return self.get_project_by_guid(self.startup_project)

    def get_executable_projects(self) -> list[SolutionProject]:
        """Get projects likely to have an entry point.

        Name-based heuristic: anything containing "Test" is excluded.
        """
        return [p for p in self.projects if TEST_PROJECT_MARKER not in p.name]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "path": str(self.path),
            "projects": [p.to_dict() for p in self.projects],
            "configurations": list(self.configurations),
        }
        if self.startup_project is not None:
            result["startupProject"] = self.startup_project
        return result
