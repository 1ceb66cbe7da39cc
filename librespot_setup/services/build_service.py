"""
Build service for librespot-setup.
"""

import logging

from ..domain.plan import InstallerConfig
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.cargo_client import CargoClient

logger = logging.getLogger(__name__)


class BuildService:
    """
    Compiles the librespot release binary.

    Skips the build whenever the release binary exists. Only existence
    is checked, so a stale or truncated binary is reused as-is.
    """

    def __init__(self, plan: InstallerConfig, cargo: CargoClient):
        self.plan = plan
        self.cargo = cargo

    def build(self) -> StepResult:
        target = self.plan.paths.cargo_target
        options = self.plan.build

        logger.info("Building with cargo...")
        if target.is_file():
            logger.info(f"{target} already exists")
            return StepResult.skipped(Step.BUILD, f"{target} already exists", binary=str(target))

        jobs = options.job_count
        logger.info(f"build... ({jobs} jobs, features: {' '.join(options.features)})")
        result = self.cargo.build_release(
            self.plan.paths.temp_dir,
            jobs=jobs,
            features=options.features,
            default_features=options.default_features,
        )
        if not result.ok:
            raise StepFailure("cargo build failed", step=Step.BUILD.value)
        if not target.is_file():
            raise StepFailure(f"cargo build did not produce {target}", step=Step.BUILD.value)

        return StepResult.success(Step.BUILD, f"Built {target}", binary=str(target), jobs=jobs)
