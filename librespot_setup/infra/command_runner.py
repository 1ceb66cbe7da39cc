"""
Command execution infrastructure for librespot-setup.

Every external tool (dpkg, apt-get, git, cargo, curl, install, systemctl)
is invoked through CommandRunner, making calls:
- Easy to mock for testing
- Consistent in error handling
- Explicit about which ones need elevated privileges
"""

import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging

from ..exit_codes import StepFailure

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


@dataclass(frozen=True)
class CommandResult:
    """Result of running one external command."""
    args: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout.strip()


def format_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(str(part) for part in command)


class CommandRunner:
    """
    Runs external commands and returns typed results.

    Privileged commands get the prefix resolved by the privilege check
    (empty when already root, ``sudo`` otherwise). Until
    ensure_privileges() has run, privileged commands are refused.

    Example:
        runner = CommandRunner()
        runner.ensure_privileges()
        result = runner.run(["systemctl", "start", "raspotify"], privileged=True)
        if not result.ok:
            print(result.stderr)
    """

    def __init__(self, privilege_prefix: Optional[List[str]] = None):
        """
        Initialize CommandRunner.

        Args:
            privilege_prefix: Known prefix for privileged commands; skips
                the privilege check when given.
        """
        self.privilege_prefix = privilege_prefix

    def ensure_privileges(self) -> List[str]:
        """
        Resolve how privileged commands are run. Performed once per run.

        Returns:
            The command prefix for privileged calls

        Raises:
            StepFailure: Neither root nor a usable sudo is available
        """
        if self.privilege_prefix is not None:
            return self.privilege_prefix

        if os.geteuid() == 0:
            self.privilege_prefix = []
            return self.privilege_prefix

        if not shutil.which("sudo"):
            raise StepFailure("root privileges are required: run as root or install sudo")

        logger.info("Elevated privileges are required, validating sudo credentials")
        result = self._execute(["sudo", "-v"], cwd=None, capture=False, shell=False)
        if not result.ok:
            raise StepFailure("sudo could not obtain elevated privileges")

        self.privilege_prefix = ["sudo"]
        return self.privilege_prefix

    def run(
        self,
        command: Command,
        cwd: Optional[Union[str, Path]] = None,
        privileged: bool = False,
        capture: bool = True,
    ) -> CommandResult:
        """
        Run a command.

        Args:
            command: Argument list, or a string run through the shell
            cwd: Working directory
            privileged: Run with elevated privileges
            capture: Capture output instead of streaming it to the terminal

        Returns:
            CommandResult; never raises on a non-zero exit
        """
        shell = isinstance(command, str)
        if privileged:
            if self.privilege_prefix is None:
                raise RuntimeError("privileged command requested before the privilege check")
            if shell:
                command = format_command(self.privilege_prefix + ["sh", "-c", command]) if self.privilege_prefix else command
            else:
                command = self.privilege_prefix + list(command)
        return self._execute(command, cwd=cwd, capture=capture, shell=shell)

    def succeeds(self, command: Command, cwd: Optional[Union[str, Path]] = None) -> bool:
        """Probe a command, discarding its output."""
        return self.run(command, cwd=cwd).ok

    def _execute(self, command: Command, cwd, capture: bool, shell: bool) -> CommandResult:
        cmd_str = format_command(command)
        logger.debug(f"Running command in '{cwd or os.getcwd()}': {cmd_str}")

        try:
            result = subprocess.run(
                command if shell else [str(part) for part in command],
                shell=shell,
                cwd=str(cwd) if cwd else None,
                capture_output=capture,
                text=True,
                check=False,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            logger.debug(f"Command could not be started: {cmd_str} - {e}")
            return CommandResult(cmd_str, 127, "", str(e))

        stdout = result.stdout or ""
        stderr = result.stderr or ""
        if result.returncode != 0 and stderr.strip():
            logger.debug(f"Command '{cmd_str}' exited with {result.returncode}: {stderr.strip()}")

        return CommandResult(cmd_str, result.returncode, stdout, stderr)
