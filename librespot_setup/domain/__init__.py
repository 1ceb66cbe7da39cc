"""
Domain layer for librespot-setup.

Contains pure domain objects with no I/O or side effects:
- InstallerConfig: The immutable plan for one run
- ManifestEntry: One file to install
- Step / StepResult / RunSummary: Run state machine and outcomes
"""

from .plan import (
    InstallerConfig,
    InstallPaths,
    RemoteSources,
    AssetSpec,
    BuildOptions,
    ToolchainOptions,
    AptOptions,
    ManifestEntry,
    build_manifest,
)
from .step import Step, StepStatus, StepResult, RunSummary

__all__ = [
    'InstallerConfig',
    'InstallPaths',
    'RemoteSources',
    'AssetSpec',
    'BuildOptions',
    'ToolchainOptions',
    'AptOptions',
    'ManifestEntry',
    'build_manifest',
    'Step',
    'StepStatus',
    'StepResult',
    'RunSummary',
]
