"""
Infrastructure layer for librespot-setup.

Contains abstractions for external systems:
- CommandRunner: External command execution and privilege escalation
- AptClient: dpkg/apt-get
- GitClient: Git command execution
- CargoClient: cargo and the rustup installer
- HttpClient: HTTPS downloads
- SystemdClient: systemctl

These provide clean interfaces that can be mocked for testing.
"""

from .command_runner import CommandRunner, CommandResult
from .apt_client import AptClient
from .git_client import GitClient
from .cargo_client import CargoClient
from .http_client import HttpClient, DownloadError
from .systemd_client import SystemdClient

__all__ = [
    'CommandRunner',
    'CommandResult',
    'AptClient',
    'GitClient',
    'CargoClient',
    'HttpClient',
    'DownloadError',
    'SystemdClient',
]
