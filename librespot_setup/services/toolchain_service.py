"""
Rust toolchain bootstrap service for librespot-setup.
"""

import logging

from ..domain.plan import InstallerConfig
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.cargo_client import CargoClient

logger = logging.getLogger(__name__)


class ToolchainService:
    """
    Makes sure cargo is runnable, installing Rust through rustup if not.

    The installer's exit status is ignored: after rustup runs, cargo is
    probed once more, on PATH and then in the cargo home, and only that
    probe decides success. After ensure() the CargoClient's executable
    points at a working cargo, so the build step can use it even when
    rustup's bin directory is not on PATH yet.
    """

    def __init__(self, plan: InstallerConfig, cargo: CargoClient):
        self.plan = plan
        self.cargo = cargo

    def ensure(self) -> StepResult:
        options = self.plan.toolchain

        version = self.cargo.version()
        if version:
            logger.debug(f"Found {version}")
            return StepResult.skipped(
                Step.ENSURE_TOOLCHAIN, f"{version} already installed", cargo=self.cargo.executable
            )

        logger.info("Installing Rust")
        self.cargo.install_rustup(self.plan.sources.rustup, options.installer_args)

        for executable in (self.cargo.executable, str(options.fallback_cargo)):
            version = self.cargo.version(executable)
            if version:
                self.cargo.executable = executable
                return StepResult.success(
                    Step.ENSURE_TOOLCHAIN, f"Installed {version}", cargo=executable
                )

        message = "Rust failed to install"
        if options.troubleshooting_url:
            message += f" see: {options.troubleshooting_url}"
        raise StepFailure(message, step=Step.ENSURE_TOOLCHAIN.value)
