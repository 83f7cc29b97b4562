"""Solution and project descriptor parsing."""

from .loader import (
    find_project_file,
    find_solution_file,
    find_startup_project_path,
    load_solution,
    read_project_packages,
)
from .models import NuGetPackage, SolutionFile, SolutionProject
from .packages import parse_package_references
from .parser import parse_solution

__all__ = [
    "NuGetPackage",
    "SolutionFile",
    "SolutionProject",
    "parse_solution",
    "parse_package_references",
    "find_project_file",
    "find_solution_file",
    "find_startup_project_path",
    "load_solution",
    "read_project_packages",
]
