"""
Service layer for librespot-setup.

Contains the installation steps, each orchestrating infrastructure clients
according to the immutable InstallerConfig:
- DependencyService: Build dependencies via apt
- ToolchainService: cargo, bootstrapped with rustup
- SourceService: librespot checkout
- BuildService: Release build
- AssetService: Unit file, configuration and event hook downloads
- ServiceController: File installation and systemd
- Installer: Runs all of the above in order
"""

from .dependency_service import DependencyService
from .toolchain_service import ToolchainService
from .source_service import SourceService
from .build_service import BuildService
from .asset_service import AssetService
from .service_controller import ServiceController
from .installer import Installer

__all__ = [
    'DependencyService',
    'ToolchainService',
    'SourceService',
    'BuildService',
    'AssetService',
    'ServiceController',
    'Installer',
]
