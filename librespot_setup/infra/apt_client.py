"""
Debian package manager client for librespot-setup.

Wraps dpkg (queries) and apt-get (mutations) behind CommandRunner.
"""

import time
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from .command_runner import CommandRunner, CommandResult

logger = logging.getLogger(__name__)


class AptClient:
    """
    Abstraction over dpkg and apt-get.

    Example:
        apt = AptClient(runner)
        missing = apt.missing(["git", "pkg-config"])
        if missing:
            apt.install(missing)
    """

    def __init__(self, runner: CommandRunner, assume_yes: bool = True):
        self.runner = runner
        self.assume_yes = assume_yes

    def is_installed(self, package: str) -> bool:
        """Check the package database for an installed package."""
        return self.runner.succeeds(["dpkg", "-s", package])

    def missing(self, packages: Iterable[str]) -> List[str]:
        """Return the packages that are not installed, in the given order."""
        return [package for package in packages if not self.is_installed(package)]

    def install(self, packages: List[str]) -> CommandResult:
        """Install packages in a single apt-get invocation."""
        cmd = ["apt-get", "install"]
        if self.assume_yes:
            cmd.append("-y")
        cmd.extend(packages)
        return self.runner.run(cmd, privileged=True, capture=False)

    def update(self) -> CommandResult:
        """Refresh the package index."""
        return self.runner.run(["apt-get", "update"], privileged=True, capture=False)

    @staticmethod
    def cache_age_minutes(cache_path: Path, now: Optional[float] = None) -> Optional[int]:
        """
        Age of the apt package cache in whole minutes.

        Returns:
            Minutes since the cache was written, or None if it does not exist
        """
        try:
            mtime = Path(cache_path).stat().st_mtime
        except FileNotFoundError:
            return None
        now = time.time() if now is None else now
        return int((now - mtime) // 60)
