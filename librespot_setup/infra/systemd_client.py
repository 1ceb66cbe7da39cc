"""
systemd client for librespot-setup.
"""

import logging

from .command_runner import CommandRunner, CommandResult

logger = logging.getLogger(__name__)


class SystemdClient:
    """Thin wrapper over systemctl for one service unit."""

    def __init__(self, runner: CommandRunner, service: str):
        self.runner = runner
        self.service = service

    def is_active(self) -> bool:
        return self.runner.succeeds(["systemctl", "is-active", "--quiet", self.service])

    def stop(self) -> CommandResult:
        return self._systemctl("stop", self.service)

    def daemon_reload(self) -> CommandResult:
        return self._systemctl("daemon-reload")

    def enable(self) -> CommandResult:
        return self._systemctl("enable", self.service)

    def start(self) -> CommandResult:
        return self._systemctl("start", self.service)

    def _systemctl(self, *args: str) -> CommandResult:
        return self.runner.run(["systemctl", *args], privileged=True)
