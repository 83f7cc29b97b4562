"""Debugger executable discovery with a per-resolver cache.

Lookup order:
1. PATH lookup utility (which / where)
2. Per-adapter cache directory: <adapters_dir>/<adapter_name>/<binary>
3. DebuggerNotFoundError with install instructions

The first outcome is memoized for the resolver's lifetime. By default only
success is cached, so a failed lookup is retried on the next call. With
cache_failures=True a failure is cached too and every later call fails
the same way until invalidate() is called.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from ..build.runner import run_process
from ..config import DEFAULT_ADAPTER_NAME, default_adapters_dir
from ..errors import DebuggerNotFoundError

logger = logging.getLogger(__name__)

NETCOREDBG_DOWNLOAD_URL = "https://github.com/Samsung/netcoredbg/releases"


def platform_binary_name(adapter_name: str) -> str:
    """Executable file name for this platform."""
    return f"{adapter_name}.exe" if sys.platform == "win32" else adapter_name


def path_lookup_utility() -> str:
    """Program that resolves an executable name on PATH."""
    return "where" if sys.platform == "win32" else "which"


@dataclass(frozen=True)
class BinaryCacheEntry:
    """Memoized outcome of one resolution attempt."""

    path: Path | None = None
    error: str | None = None

    def unwrap(self) -> Path:
        if self.path is None:
            raise DebuggerNotFoundError(self.error or "Debugger not found")
        return self.path


class DebuggerBinaryResolver:
    """Finds the debugger executable and remembers where it is.

    Safe to call concurrently: the first lookup runs under a lock and
    later callers share its cached result.
    """

    def __init__(
        self,
        adapter_name: str = DEFAULT_ADAPTER_NAME,
        adapters_dir: str | Path | None = None,
        binary_name: str | None = None,
        cache_failures: bool = False,
    ):
        """Initialize resolver.

        Args:
            adapter_name: Debug adapter name, also its cache directory name
            adapters_dir: Root of per-adapter cache directories
            binary_name: Executable name (platform default if not provided)
            cache_failures: Cache failed lookups as well as successful ones
        """
        self._adapter_name = adapter_name
        self._adapters_dir = Path(adapters_dir) if adapters_dir else default_adapters_dir()
        self._binary_name = binary_name or platform_binary_name(adapter_name)
        self._cache_failures = cache_failures
        self._entry: BinaryCacheEntry | None = None
        self._lock = asyncio.Lock()

    @property
    def binary_name(self) -> str:
        return self._binary_name

    @property
    def cache_dir(self) -> Path:
        """Per-adapter cache directory."""
        return self._adapters_dir / self._adapter_name

    @property
    def cache_failures(self) -> bool:
        return self._cache_failures

    @property
    def cached(self) -> BinaryCacheEntry | None:
        """Cached outcome, if a lookup has been memoized."""
        return self._entry

    def invalidate(self) -> None:
        """Forget the cached outcome; the next call probes again."""
        if self._entry is not None:
            logger.info(f"Invalidating cached {self._adapter_name} location")
        self._entry = None

    async def _probe_path(self) -> Path | None:
        """Ask the PATH lookup utility for the binary."""
        utility = path_lookup_utility()
        try:
            result = await run_process(utility, [self._binary_name])
        except OSError as e:
            logger.debug(f"PATH lookup via {utility} unavailable: {e}")
            return None

        if not result.success:
            return None

        first_line = next((ln.strip() for ln in result.stdout.splitlines() if ln.strip()), "")
        if not first_line:
            return None

        path = Path(first_line)
        if not path.exists():
            logger.debug(f"{utility} reported missing path: {path}")
            return None
        return path

    def _probe_cache_dir(self) -> Path | None:
        cached_binary = self.cache_dir / self._binary_name
        return cached_binary if cached_binary.exists() else None

    async def _fetch(self) -> Path:
        path = await self._probe_path()
        if path is not None:
            logger.info(f"Found {self._adapter_name} in PATH: {path}")
            return path

        path = self._probe_cache_dir()
        if path is not None:
            logger.info(f"Found cached {self._adapter_name} at {path}")
            return path

        raise DebuggerNotFoundError(
            f"{self._adapter_name} not found on PATH or in {self.cache_dir}.\n"
            f"To install: download {self._adapter_name} from {NETCOREDBG_DOWNLOAD_URL} "
            f"and put it on PATH or extract it to {self.cache_dir}, "
            "or set NETCOREDBG_PATH to the executable."
        )

    async def resolve(self) -> Path:
        """Get the debugger path, probing on first use.

        Raises:
            DebuggerNotFoundError: If the debugger cannot be found
        """
        if self._entry is not None:
            return self._entry.unwrap()

        async with self._lock:
            if self._entry is not None:
                return self._entry.unwrap()

            try:
                path = await self._fetch()
            except DebuggerNotFoundError as e:
                if self._cache_failures:
                    self._entry = BinaryCacheEntry(error=str(e))
                raise

            self._entry = BinaryCacheEntry(path=path)
            return path

    async def get_binary_path(self, user_installed_path: str | Path | None = None) -> Path:
        """Debugger path, with an explicit user path bypassing discovery."""
        if user_installed_path:
            return Path(user_installed_path)
        return await self.resolve()
