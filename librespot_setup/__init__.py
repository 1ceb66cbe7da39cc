"""
librespot-setup - Compile librespot from source and run it as a daemon.

Quick Start:
    from librespot_setup import Installer, InstallerConfig, load_config

    plan = InstallerConfig.from_dict(load_config())
    summary = Installer(plan).run()
    for result in summary.results:
        print(result.step.value, result.status.value)

Steps (in order):
    preflight, check_deps, ensure_toolchain, acquire_source, build,
    fetch_assets, stop_service, install_files, enable_start_service

Every step is idempotent on re-run: packages, toolchain, checkout and
binary are only produced when missing. Downloads, file installation and
the service restart always run.
"""

__version__ = "0.1.0"

from .domain import (
    InstallerConfig,
    ManifestEntry,
    Step,
    StepStatus,
    StepResult,
    RunSummary,
)
from .services import Installer
from .exit_codes import StepFailure
from .config import load_config

__all__ = [
    "__version__",
    "Installer",
    "InstallerConfig",
    "ManifestEntry",
    "Step",
    "StepStatus",
    "StepResult",
    "RunSummary",
    "StepFailure",
    "load_config",
]
