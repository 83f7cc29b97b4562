"""Project root detection.

The server starts from the --project path (or the working directory) and
follows the client: MCP roots win, then DOTNET_LAUNCH_PROJECT_ROOT.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..solution.loader import find_project_file, find_solution_file

if TYPE_CHECKING:
    from mcp.server.fastmcp import Context

logger = logging.getLogger(__name__)

PROJECT_ROOT_ENV = "DOTNET_LAUNCH_PROJECT_ROOT"


def parse_file_uri(uri: str) -> Path | None:
    """Local path of a file:// URI, or None for any other URI."""
    parsed = urlparse(str(uri))
    if parsed.scheme != "file":
        logger.warning(f"Not a file URI: {uri}")
        return None

    netloc = parsed.netloc if parsed.netloc != "localhost" else ""
    if netloc:
        if sys.platform != "win32":
            logger.warning(f"Remote file URI not supported: {uri}")
            return None
        path = Path(url2pathname(f"//{netloc}{parsed.path}"))
    else:
        path = Path(url2pathname(parsed.path))

    if not path.is_absolute():
        logger.warning(f"Parsed path is not absolute: {path}")
        return None
    return path


def find_dotnet_project_root(start_dir: str | Path | None = None) -> Path:
    """Find the .NET project root by walking up from a directory.

    A solution file anywhere above wins over a project file, which wins
    over a .git directory. Falls back to start_dir itself.
    """
    start = Path(start_dir or Path.cwd()).absolute()

    for find in (find_solution_file, find_project_file):
        found = find(start, max_parent_levels=None)
        if found is not None:
            return found.parent

    for directory in (start, *start.parents):
        if (directory / ".git").exists():
            return directory
    return start


async def get_project_root(ctx: Context | None = None) -> Path | None:
    """Project root requested by the client, if any.

    Args:
        ctx: MCP Context for client-provided roots; may be None

    Returns:
        First MCP root, else DOTNET_LAUNCH_PROJECT_ROOT, else None so the
        caller keeps its current root
    """
    if ctx is not None:
        try:
            roots = await ctx.list_roots()
        except Exception as e:
            # Client may not support roots
            logger.info(f"Could not get roots from client: {e}")
            roots = []
        if roots:
            path = parse_file_uri(str(roots[0].uri))
            if path and path.is_dir():
                logger.info(f"Using project root from MCP client: {path}")
                return path
            logger.warning(f"MCP root not usable: {roots[0].uri}")

    env_value = os.environ.get(PROJECT_ROOT_ENV)
    if env_value:
        path = Path(env_value)
        if path.is_dir():
            return path
        logger.warning(f"{PROJECT_ROOT_ENV}={env_value} is not a directory")
    return None
