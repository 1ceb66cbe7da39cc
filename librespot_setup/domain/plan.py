"""
Installation plan domain objects for librespot-setup.

The plan is the immutable configuration of one run: which packages to
install, where things live on disk, where remote artifacts come from and
how the daemon is built. It is built once from the layered config dict
and handed explicitly to every service.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

ASSET_NAMES = ('unit', 'config', 'hook')


def as_tuple(value) -> Tuple[str, ...]:
    """List-valued setting; a string (as env overrides produce) splits on whitespace."""
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


@dataclass(frozen=True)
class InstallPaths:
    """Absolute filesystem locations used during a run."""
    temp_dir: Path
    cargo_target: Path
    unit_destination: Path
    config_destination: Path
    binary_destination: Path
    hook_destination: Path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InstallPaths':
        temp_dir = Path(data['temp_dir'])
        cargo_target = data.get('cargo_target') or temp_dir / 'target' / 'release' / 'librespot'
        return cls(
            temp_dir=temp_dir,
            cargo_target=Path(cargo_target),
            unit_destination=Path(data['unit_destination']),
            config_destination=Path(data['config_destination']),
            binary_destination=Path(data['binary_destination']),
            hook_destination=Path(data['hook_destination']),
        )


@dataclass(frozen=True)
class AssetSpec:
    """A remote file fetched over HTTPS before installation."""
    name: str
    url: str
    filename: str
    sha256: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'AssetSpec':
        url = data['url']
        return cls(
            name=name,
            url=url,
            filename=data.get('filename') or url.rstrip('/').rsplit('/', 1)[-1],
            sha256=(data.get('sha256') or None),
        )


@dataclass(frozen=True)
class RemoteSources:
    """Remote locations of the source repository and auxiliary files."""
    repository: str
    rustup: str
    unit: AssetSpec
    config: AssetSpec
    hook: AssetSpec

    @property
    def assets(self) -> Tuple[AssetSpec, ...]:
        """Assets in fetch order."""
        return (self.unit, self.config, self.hook)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteSources':
        assets = data.get('assets', {})
        missing = [name for name in ASSET_NAMES if name not in assets]
        if missing:
            raise ValueError(f"Missing asset definitions: {', '.join(missing)}")
        return cls(
            repository=data['repository'],
            rustup=data['rustup'],
            **{name: AssetSpec.from_dict(name, assets[name]) for name in ASSET_NAMES},
        )


@dataclass(frozen=True)
class BuildOptions:
    """How cargo builds the daemon."""
    features: Tuple[str, ...] = ('alsa-backend', 'pulseaudio-backend')
    default_features: bool = False
    jobs: Optional[int] = None  # None = one job per processor

    @property
    def job_count(self) -> int:
        return self.jobs or os.cpu_count() or 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BuildOptions':
        return cls(
            features=as_tuple(data.get('features', cls.features)),
            default_features=bool(data.get('default_features', False)),
            jobs=int(data['jobs']) if data.get('jobs') else None,
        )


@dataclass(frozen=True)
class ToolchainOptions:
    """Where to find cargo and how to bootstrap it."""
    cargo: str = 'cargo'
    cargo_home: Path = Path('~/.cargo')
    installer_args: Tuple[str, ...] = ('-y',)
    troubleshooting_url: str = ''

    @property
    def fallback_cargo(self) -> Path:
        """cargo as rustup installs it, for shells that have not re-read PATH."""
        return self.cargo_home.expanduser() / 'bin' / 'cargo'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToolchainOptions':
        return cls(
            cargo=data.get('cargo', 'cargo'),
            cargo_home=Path(data.get('cargo_home', '~/.cargo')),
            installer_args=as_tuple(data.get('installer_args', ())),
            troubleshooting_url=data.get('troubleshooting_url', ''),
        )


@dataclass(frozen=True)
class AptOptions:
    """apt behaviour for the dependency installer."""
    refresh_cache: bool = False
    cache_path: Path = Path('/var/cache/apt/pkgcache.bin')
    cache_max_age_minutes: int = 60
    assume_yes: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AptOptions':
        return cls(
            refresh_cache=bool(data.get('refresh_cache', False)),
            cache_path=Path(data.get('cache_path', '/var/cache/apt/pkgcache.bin')),
            cache_max_age_minutes=int(data.get('cache_max_age_minutes', 60)),
            assume_yes=bool(data.get('assume_yes', True)),
        )


@dataclass(frozen=True)
class InstallerConfig:
    """
    Everything one run needs, fixed for the duration of the run.

    Example:
        plan = InstallerConfig.from_dict(load_config())
        print(plan.paths.cargo_target)
    """
    packages: Tuple[str, ...]
    paths: InstallPaths
    sources: RemoteSources
    build: BuildOptions = field(default_factory=BuildOptions)
    toolchain: ToolchainOptions = field(default_factory=ToolchainOptions)
    apt: AptOptions = field(default_factory=AptOptions)
    service_name: str = 'raspotify'
    update_checkout: bool = False
    http_timeout: int = 30

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'InstallerConfig':
        """Build the plan from a layered configuration dict."""
        return cls(
            packages=as_tuple(config.get('packages', ())),
            paths=InstallPaths.from_dict(config['paths']),
            sources=RemoteSources.from_dict(config['sources']),
            build=BuildOptions.from_dict(config.get('build', {})),
            toolchain=ToolchainOptions.from_dict(config.get('toolchain', {})),
            apt=AptOptions.from_dict(config.get('apt', {})),
            service_name=config.get('service', {}).get('name', 'raspotify'),
            update_checkout=bool(config.get('git', {}).get('update_checkout', False)),
            http_timeout=int(config.get('http', {}).get('timeout_seconds', 30)),
        )

    def asset_path(self, asset: AssetSpec) -> Path:
        """Local path a fetched asset is written to."""
        return self.paths.temp_dir / asset.filename


@dataclass(frozen=True)
class ManifestEntry:
    """One file to copy into the system during installation."""
    source: Path
    destination: Path
    mode: str = '0644'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': str(self.source),
            'destination': str(self.destination),
            'mode': self.mode,
        }


def build_manifest(plan: InstallerConfig) -> List[ManifestEntry]:
    """
    Map built and fetched artifacts to their final system locations.

    Called immediately before the copy step; the result is used once.
    """
    paths = plan.paths
    return [
        ManifestEntry(paths.cargo_target, paths.binary_destination, '0755'),
        ManifestEntry(plan.asset_path(plan.sources.unit), paths.unit_destination, '0644'),
        ManifestEntry(plan.asset_path(plan.sources.config), paths.config_destination, '0644'),
        ManifestEntry(plan.asset_path(plan.sources.hook), paths.hook_destination, '0755'),
    ]
