"""
Installation orchestrator for librespot-setup.

Runs the steps strictly in order:

    PREFLIGHT -> CHECK_DEPS -> ENSURE_TOOLCHAIN -> ACQUIRE_SOURCE -> BUILD
    -> FETCH_ASSETS -> STOP_SERVICE -> INSTALL_FILES -> ENABLE_START_SERVICE
    -> DONE

The first StepFailure moves the run to ABORT; nothing after it runs.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..domain.plan import InstallerConfig
from ..domain.step import RunSummary, Step, StepResult
from ..exit_codes import StepFailure
from ..infra.apt_client import AptClient
from ..infra.cargo_client import CargoClient
from ..infra.command_runner import CommandRunner
from ..infra.git_client import GitClient
from ..infra.http_client import HttpClient
from .asset_service import AssetService
from .build_service import BuildService
from .dependency_service import DependencyService
from .service_controller import ServiceController
from .source_service import SourceService
from .toolchain_service import ToolchainService

logger = logging.getLogger(__name__)


class Installer:
    """
    Compiles, installs and starts librespot on this machine.

    Example:
        installer = Installer(InstallerConfig.from_dict(load_config()))
        summary = installer.run()
        print(summary.state)  # Step.DONE
    """

    def __init__(
        self,
        plan: InstallerConfig,
        runner: Optional[CommandRunner] = None,
        http: Optional[HttpClient] = None,
    ):
        """
        Initialize Installer.

        Args:
            plan: Immutable configuration of this run
            runner: CommandRunner (creates new if None)
            http: HttpClient (creates new if None)
        """
        self.plan = plan
        self.runner = runner or CommandRunner()
        self.http = http or HttpClient(timeout=plan.http_timeout)

        cargo = CargoClient(self.runner, plan.toolchain.cargo)
        self.dependencies = DependencyService(plan, AptClient(self.runner, plan.apt.assume_yes))
        self.toolchain = ToolchainService(plan, cargo)
        self.source = SourceService(plan, GitClient(self.runner))
        self.builder = BuildService(plan, cargo)
        self.assets = AssetService(plan, self.http)
        self.controller = ServiceController(plan, self.runner)
        self.last_summary: Optional[RunSummary] = None

    def preflight(self) -> StepResult:
        prefix = self.runner.ensure_privileges()
        how = "via " + " ".join(prefix) if prefix else "as root"
        return StepResult.success(Step.PREFLIGHT, f"Privileged commands run {how}")

    def steps(self) -> List[Tuple[Step, Callable[[], StepResult]]]:
        return [
            (Step.PREFLIGHT, self.preflight),
            (Step.CHECK_DEPS, self.dependencies.ensure),
            (Step.ENSURE_TOOLCHAIN, self.toolchain.ensure),
            (Step.ACQUIRE_SOURCE, self.source.acquire),
            (Step.BUILD, self.builder.build),
            (Step.FETCH_ASSETS, self.assets.fetch_all),
            (Step.STOP_SERVICE, self.controller.stop_if_active),
            (Step.INSTALL_FILES, self.controller.install_files),
            (Step.ENABLE_START_SERVICE, self.controller.enable_and_start),
        ]

    def run(self) -> RunSummary:
        """
        Execute every step in order.

        Returns:
            RunSummary in state DONE

        Raises:
            StepFailure: The failing step's error; ``summary`` is attached
        """
        summary = RunSummary()
        self.last_summary = summary

        logger.info("This script will compile and install Librespot and start it running as a daemon.")
        for step, action in self.steps():
            logger.debug(f"Step: {step.value}")
            try:
                result = action()
            except StepFailure as e:
                e.step = e.step or step.value
                summary.add(StepResult.failed(step, str(e)))
                e.summary = summary
                raise
            summary.add(result)

        summary.finish()
        return summary
