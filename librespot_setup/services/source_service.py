"""
Source checkout service for librespot-setup.

Clones librespot into the temp directory, or reuses an existing checkout.
Updating an existing checkout is opt-in (``git.update_checkout``).
"""

import logging
import os

from ..domain.plan import InstallerConfig
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class SourceService:
    """
    Acquires the librespot source tree.

    Example:
        service = SourceService(plan, GitClient(runner))
        result = service.acquire()
        result.metadata['cloned']  # False when the checkout already existed
    """

    def __init__(self, plan: InstallerConfig, git: GitClient):
        self.plan = plan
        self.git = git

    def acquire(self) -> StepResult:
        """
        Clone the repository unless the temp directory already exists.

        Raises:
            StepFailure: Clone failed, or the directory exists but is not accessible
        """
        directory = self.plan.paths.temp_dir
        repo = self.plan.sources.repository

        if not directory.exists():
            logger.info(f"Cloning {repo} into {directory}")
            if not self.git.clone(repo, directory).ok:
                raise StepFailure(f"failed to clone {repo}", step=Step.ACQUIRE_SOURCE.value)
            return StepResult.success(Step.ACQUIRE_SOURCE, f"Cloned {repo}", cloned=True, updated=False)

        if not directory.is_dir() or not os.access(directory, os.R_OK | os.X_OK):
            raise StepFailure(f"{directory} exists, but is not accessible", step=Step.ACQUIRE_SOURCE.value)

        updated = self.plan.update_checkout and self.update_checkout()
        return StepResult.skipped(
            Step.ACQUIRE_SOURCE,
            f"Using existing checkout in {directory}",
            cloned=False,
            updated=updated,
        )

    def update_checkout(self) -> bool:
        """
        Bring an existing checkout up to date with its default branch.

        Returns:
            True if a pull was performed
        """
        directory = self.plan.paths.temp_dir

        if not self.git.is_git_repo(directory):
            logger.warning(f"{directory} is not a Git repository, not updating it")
            return False

        if self.git.is_up_to_date(directory):
            logger.info("Repository is up to date")
            return False

        branch = self.git.default_branch(directory)
        logger.info(f"Repository is not up to date. Updating to the default branch: {branch}")
        if not self.git.pull(directory, branch=branch).ok:
            raise StepFailure(f"failed to update {directory}", step=Step.ACQUIRE_SOURCE.value)
        return True
