"""Utility modules for dotnet-launch."""

from .project import PROJECT_ROOT_ENV, find_dotnet_project_root, get_project_root, parse_file_uri

__all__ = [
    "PROJECT_ROOT_ENV",
    "find_dotnet_project_root",
    "get_project_root",
    "parse_file_uri",
]
