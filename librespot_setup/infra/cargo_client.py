"""
Rust toolchain client for librespot-setup.

Probes and bootstraps cargo (via rustup) and runs release builds.
"""

import shlex
from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from .command_runner import CommandRunner, CommandResult

logger = logging.getLogger(__name__)


class CargoClient:
    """
    Abstraction over cargo and the rustup installer.

    Example:
        cargo = CargoClient(runner)
        if not cargo.version():
            cargo.install_rustup("https://sh.rustup.rs")
    """

    def __init__(self, runner: CommandRunner, executable: str = "cargo"):
        self.runner = runner
        self.executable = executable

    def version(self, executable: Optional[str] = None) -> Optional[str]:
        """
        Probe ``cargo -V``.

        Returns:
            The version line, or None if cargo is not runnable
        """
        result = self.runner.run([executable or self.executable, "-V"])
        if not result.ok:
            return None
        return result.output or "cargo"

    def install_rustup(self, url: str, args: Sequence[str] = ()) -> CommandResult:
        """Download the rustup installer over TLS 1.2+ and pipe it to sh."""
        cmd = f"curl --proto '=https' --tlsv1.2 -sSf {shlex.quote(url)} | sh"
        if args:
            cmd += " -s -- " + " ".join(shlex.quote(arg) for arg in args)
        return self.runner.run(cmd, capture=False)

    def build_release(
        self,
        path: Union[str, Path],
        jobs: int,
        features: Sequence[str] = (),
        default_features: bool = False,
    ) -> CommandResult:
        """Run ``cargo build --release`` inside path."""
        cmd = [self.executable, "build", "--release", "--jobs", str(jobs)]
        if not default_features:
            cmd.append("--no-default-features")
        if features:
            cmd.extend(["--features", " ".join(features)])
        return self.runner.run(cmd, cwd=path, capture=False)
