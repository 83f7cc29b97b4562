"""Locate the compiled assembly produced by a dotnet build.

dotnet prints one line per built project:
    MyApp -> /path/to/bin/Debug/net8.0/MyApp.dll

When no such line points at an existing file, conventional output
directories are scanned instead.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Final

from ..errors import ArtifactNotFoundError

logger = logging.getLogger(__name__)

BUILD_OUTPUT_ARROW: Final[str] = "->"
ASSEMBLY_EXTENSIONS: Final[tuple[str, ...]] = (".dll", ".exe")
LIBRARY_EXTENSION: Final[str] = ".dll"

FALLBACK_CONFIGURATIONS: Final[tuple[str, ...]] = ("Debug", "Release")
FALLBACK_FRAMEWORKS: Final[tuple[str, ...]] = ("net6.0", "net5.0", "net8.0")


def find_assembly_in_output(output: str, cwd: str | Path) -> str | None:
    """Find the first existing assembly named on a "Project -> path" line.

    Relative paths are resolved against cwd.
    """
    cwd = Path(cwd)
    for line in output.splitlines():
        _, arrow, after = line.partition(BUILD_OUTPUT_ARROW)
        if not arrow:
            continue

        candidate = after.strip()
        if not candidate.endswith(ASSEMBLY_EXTENSIONS):
            continue

        path = Path(candidate)
        resolved = candidate if path.is_absolute() else str(cwd / path)
        if Path(resolved).exists():
            return resolved
        logger.debug(f"Build output names missing assembly: {resolved}")

    return None


def fallback_output_dirs(cwd: str | Path) -> list[Path]:
    """Conventional build output directories under cwd, in probe order."""
    cwd = Path(cwd)
    dirs = [cwd / "bin" / config for config in FALLBACK_CONFIGURATIONS]
    for config in FALLBACK_CONFIGURATIONS:
        dirs.extend(cwd / "bin" / config / framework for framework in FALLBACK_FRAMEWORKS)
    return dirs


def find_recent_assembly(cwd: str | Path) -> str | None:
    """Most recently modified .dll across the fallback output directories.

    Blocking; run it off the event loop.
    """
    best: tuple[float, str] | None = None
    for directory in fallback_output_dirs(cwd):
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            continue

        for entry in entries:
            if entry.suffix != LIBRARY_EXTENSION:
                continue
            try:
                if not entry.is_file():
                    continue
                mtime = entry.stat().st_mtime
            except OSError:
                continue
            # Strictly newer wins, so ties keep probe order
            if best is None or mtime > best[0]:
                best = (mtime, str(entry))

    return best[1] if best else None


async def find_output_assembly(output: str, cwd: str | Path) -> str:
    """Resolve the assembly produced by a build.

    Args:
        output: Captured build stdout
        cwd: Build working directory

    Returns:
        Path to the compiled assembly

    Raises:
        ArtifactNotFoundError: If neither the build output nor the
            conventional directories yield an existing assembly
    """
    found = find_assembly_in_output(output, cwd)
    if found:
        return found

    found = await asyncio.to_thread(find_recent_assembly, cwd)
    if found:
        logger.info(f"Assembly not named in build output, using {found}")
        return found

    raise ArtifactNotFoundError(
        "Could not find compiled assembly in dotnet build output.\n"
        f"Build output was:\n{output}",
        stdout=output,
    )
