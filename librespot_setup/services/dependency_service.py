"""
Build dependency service for librespot-setup.

Installs the Debian packages librespot needs to compile, skipping the
ones already present.
"""

import logging
from typing import Optional

from ..domain.plan import InstallerConfig
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.apt_client import AptClient

logger = logging.getLogger(__name__)


class DependencyService:
    """
    Ensures every required package is installed.

    Example:
        service = DependencyService(plan, AptClient(runner))
        result = service.ensure()
        print(result.metadata['installed'])
    """

    def __init__(self, plan: InstallerConfig, apt: AptClient):
        self.plan = plan
        self.apt = apt

    def refresh_cache(self, now: Optional[float] = None) -> bool:
        """
        Run ``apt-get update`` if the package cache is stale.

        Returns:
            True if the cache was refreshed
        """
        options = self.plan.apt
        age = self.apt.cache_age_minutes(options.cache_path, now=now)
        if age is not None and age < options.cache_max_age_minutes:
            logger.info("Apt cache is up to date. Skipping update.")
            return False

        logger.info(f"Apt cache is older than {options.cache_max_age_minutes} minutes. Updating...")
        if not self.apt.update().ok:
            raise StepFailure("failed to update the apt package cache", step=Step.CHECK_DEPS.value)
        return True

    def ensure(self) -> StepResult:
        """
        Install the missing subset of the plan's packages in one batch.

        Raises:
            StepFailure: apt-get install exited non-zero
        """
        refreshed = self.refresh_cache() if self.plan.apt.refresh_cache else False

        logger.info("Checking build dependencies")
        missing = self.apt.missing(self.plan.packages)

        if not missing:
            logger.info("All dependencies are already installed.")
            return StepResult.skipped(
                Step.CHECK_DEPS,
                "All dependencies are already installed",
                installed=[],
                cache_refreshed=refreshed,
            )

        logger.info(f"Installing the following packages: {' '.join(missing)}")
        if not self.apt.install(missing).ok:
            raise StepFailure("failed to install packages", step=Step.CHECK_DEPS.value)

        return StepResult.success(
            Step.CHECK_DEPS,
            f"Installed {len(missing)} package(s)",
            installed=missing,
            cache_refreshed=refreshed,
        )
