"""
Service control for librespot-setup.

Stops a running daemon, copies the built and fetched artifacts into the
system and registers the daemon with systemd. A failure part-way leaves
whatever was already copied in place.
"""

import logging
from typing import List, Optional

from ..domain.plan import InstallerConfig, ManifestEntry, build_manifest
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.command_runner import CommandRunner
from ..infra.systemd_client import SystemdClient

logger = logging.getLogger(__name__)


class ServiceController:
    """
    Installs files and drives the systemd service.

    Example:
        controller = ServiceController(plan, runner)
        controller.stop_if_active()
        controller.install_files()
        controller.enable_and_start()
    """

    def __init__(
        self,
        plan: InstallerConfig,
        runner: CommandRunner,
        systemd: Optional[SystemdClient] = None,
    ):
        self.plan = plan
        self.runner = runner
        self.systemd = systemd or SystemdClient(runner, plan.service_name)

    def stop_if_active(self) -> StepResult:
        name = self.plan.service_name
        if not self.systemd.is_active():
            return StepResult.skipped(Step.STOP_SERVICE, f"{name} is not running")

        logger.info(f"Stopping {name}")
        if not self.systemd.stop().ok:
            raise StepFailure(f"failed to stop {name}", step=Step.STOP_SERVICE.value)
        return StepResult.success(Step.STOP_SERVICE, f"Stopped {name}")

    def install_file(self, entry: ManifestEntry) -> None:
        logger.info(f"{entry.source} -> {entry.destination}")
        result = self.runner.run(
            ["install", "-D", "-m", entry.mode, str(entry.source), str(entry.destination)],
            privileged=True,
        )
        if not result.ok:
            raise StepFailure(
                f"failed to copy {entry.source} to {entry.destination}",
                step=Step.INSTALL_FILES.value,
            )

    def install_files(self, manifest: Optional[List[ManifestEntry]] = None) -> StepResult:
        manifest = manifest if manifest is not None else build_manifest(self.plan)

        logger.info("Copying files into the local system")
        for entry in manifest:
            self.install_file(entry)

        return StepResult.success(
            Step.INSTALL_FILES,
            f"Installed {len(manifest)} file(s)",
            files=[entry.to_dict() for entry in manifest],
        )

    def enable_and_start(self) -> StepResult:
        name = self.plan.service_name

        for action, call in (
            ("reload systemd", self.systemd.daemon_reload),
            (f"enable {name}", self.systemd.enable),
            (f"start {name}", self.systemd.start),
        ):
            if not call().ok:
                raise StepFailure(f"failed to {action}", step=Step.ENABLE_START_SERVICE.value)

        logger.info(f"{name} is enabled and started")
        return StepResult.success(Step.ENABLE_START_SERVICE, f"Enabled and started {name}")
