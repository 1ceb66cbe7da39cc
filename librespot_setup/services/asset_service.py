"""
Asset download service for librespot-setup.

Fetches the service unit, configuration file and event hook into the
temp directory. A sha256 can be configured per asset; when present the
download must match it.
"""

import hmac
import logging
from pathlib import Path
from typing import Dict

from ..domain.plan import AssetSpec, InstallerConfig
from ..domain.step import Step, StepResult
from ..exit_codes import StepFailure
from ..infra.http_client import DownloadError, HttpClient

logger = logging.getLogger(__name__)


class AssetService:
    """Downloads every asset of the plan, aborting on the first failure."""

    def __init__(self, plan: InstallerConfig, http: HttpClient):
        self.plan = plan
        self.http = http

    def fetch(self, asset: AssetSpec) -> Path:
        """
        Download one asset.

        Returns:
            Local path of the downloaded file

        Raises:
            StepFailure: Download failed or checksum mismatch
        """
        destination = self.plan.asset_path(asset)
        logger.info(f"Downloading {asset.url}")
        try:
            digest = self.http.download(asset.url, destination)
        except DownloadError as e:
            logger.debug(f"Download failed: {e.reason}")
            raise StepFailure(f"failed to download {asset.url}", step=Step.FETCH_ASSETS.value) from e

        if asset.sha256 and not hmac.compare_digest(digest, asset.sha256.lower()):
            destination.unlink(missing_ok=True)
            raise StepFailure(f"checksum mismatch for {asset.url}", step=Step.FETCH_ASSETS.value)

        return destination

    def fetch_all(self) -> StepResult:
        files: Dict[str, str] = {}
        for asset in self.plan.sources.assets:
            files[asset.name] = str(self.fetch(asset))
        return StepResult.success(Step.FETCH_ASSETS, f"Downloaded {len(files)} file(s)", files=files)
