"""Build process execution with concurrent output capture."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

READ_CHUNK_BYTES: int = 64 * 1024


@dataclass
class ProcessOutput:
    """Captured result of a finished process."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def merged_environment(env: Mapping[str, str] | None) -> dict[str, str]:
    """Current process environment overlaid with env."""
    merged = dict(os.environ)
    if env:
        merged.update(env)
    return merged


async def _drain(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    """Read a stream to EOF."""
    if stream is None:
        return
    while True:
        chunk = await stream.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        chunks.append(chunk)


async def run_process(
    program: str,
    args: list[str],
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ProcessOutput:
    """Run a process to completion and capture its output.

    stdout and stderr are drained concurrently before waiting on the exit
    status, so a child blocked on a full pipe cannot deadlock the read.
    No timeout is applied: the process runs until it exits.

    Args:
        program: Executable to run
        args: Arguments
        cwd: Working directory
        env: Extra environment variables, merged over the current environment

    Returns:
        Exit code and decoded output

    Raises:
        OSError: If the process cannot be spawned
    """
    # Never use shell=True; shell wrapping is explicit in args
    process = await asyncio.create_subprocess_exec(
        program,
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=merged_environment(env),
    )

    stdout_chunks: list[bytes] = []
    stderr_chunks: list[bytes] = []
    await asyncio.gather(
        _drain(process.stdout, stdout_chunks),
        _drain(process.stderr, stderr_chunks),
    )

    await process.wait()
    exit_code = process.returncode or 0

    return ProcessOutput(
        exit_code=exit_code,
        stdout=b"".join(stdout_chunks).decode("utf-8", errors="replace"),
        stderr=b"".join(stderr_chunks).decode("utf-8", errors="replace"),
    )
