"""
Shared fixtures for librespot-setup tests.

Nothing here touches the real system: FakeRunner records commands instead
of running them, SimulatedHost answers them from in-memory host state, and
FakeHttpClient serves downloads from a dict.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import pytest

from librespot_setup.config import get_default_config
from librespot_setup.domain.plan import InstallerConfig
from librespot_setup.infra.command_runner import CommandRunner, CommandResult, format_command
from librespot_setup.infra.http_client import DownloadError, HttpClient


@dataclass
class Call:
    """One recorded command."""
    args: Union[str, List[str]]
    cwd: Optional[str] = None
    privileged: bool = False

    @property
    def text(self) -> str:
        return format_command(self.args)

    def matches(self, prefix) -> bool:
        if isinstance(prefix, str):
            return self.text.startswith(prefix)
        if isinstance(self.args, str):
            return False
        return tuple(self.args[:len(prefix)]) == tuple(prefix)


class FakeRunner(CommandRunner):
    """CommandRunner that records calls and answers from registered handlers."""

    def __init__(self, privilege_prefix=("sudo",)):
        super().__init__(list(privilege_prefix) if privilege_prefix is not None else None)
        self.calls: List[Call] = []
        self.handlers = []

    def on(self, prefix, returncode=0, stdout="", stderr=""):
        """Answer commands starting with prefix; later registrations win."""
        self.handlers.append((prefix, returncode, stdout, stderr))
        return self

    def run(self, command, cwd=None, privileged=False, capture=True):
        if privileged and self.privilege_prefix is None:
            raise RuntimeError("privileged command requested before the privilege check")
        call = Call(command if isinstance(command, str) else [str(a) for a in command],
                    str(cwd) if cwd else None, privileged)
        self.calls.append(call)
        return self.respond(call)

    def respond(self, call: Call) -> CommandResult:
        for prefix, returncode, stdout, stderr in reversed(self.handlers):
            if call.matches(prefix):
                return CommandResult(call.text, returncode, stdout, stderr)
        return CommandResult(call.text, 0)

    def called(self, prefix) -> List[Call]:
        return [call for call in self.calls if call.matches(prefix)]


class SimulatedHost(FakeRunner):
    """
    FakeRunner backed by host state.

    Cloning creates the checkout, building creates the binary, installing
    packages marks them installed and systemctl toggles the service.
    """

    def __init__(self, plan: InstallerConfig, installed=(), cargo=False, service_active=False):
        super().__init__()
        self.plan = plan
        self.installed = set(installed)
        self.cargo = cargo
        self.service_active = service_active
        self.failing = []

    def fail(self, prefix):
        self.failing.append(prefix)
        return self

    def respond(self, call: Call) -> CommandResult:
        def result(ok):
            return CommandResult(call.text, 0 if ok else 1)

        if any(call.matches(prefix) for prefix in self.failing):
            return result(False)

        args = call.args
        if isinstance(args, str):
            if "sh.rustup.rs" in args:
                self.cargo = True
            return result(True)

        name = args[0]
        if name == "dpkg":
            return result(args[2] in self.installed)
        if name == "apt-get" and args[1] == "install":
            self.installed.update(a for a in args[2:] if not a.startswith("-"))
            return result(True)
        if args[1:] == ["-V"]:
            return CommandResult(call.text, 0 if self.cargo else 127,
                                 "cargo 1.80.0" if self.cargo else "")
        if name == "git" and args[1] == "clone":
            checkout = Path(args[3])
            (checkout / ".git").mkdir(parents=True)
            return result(True)
        if args[1:3] == ["build", "--release"]:
            target = self.plan.paths.cargo_target
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"\x7fELF")
            return result(True)
        if name == "systemctl":
            action = args[1]
            if action == "is-active":
                return result(self.service_active)
            if action == "stop":
                self.service_active = False
            elif action == "start":
                self.service_active = True
            return result(True)
        return super().respond(call)


class FakeHttpClient(HttpClient):
    """HttpClient serving bodies from a dict instead of the network."""

    def __init__(self, bodies=None, failing=()):
        super().__init__()
        self.bodies = bodies or {}
        self.failing = set(failing)
        self.requested: List[str] = []

    def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url in self.failing:
            raise DownloadError(url, "404 Client Error: Not Found")
        return self.bodies.get(url, f"# contents of {url}\n".encode())


@pytest.fixture
def plan_config(tmp_path):
    """Default configuration with every path redirected into tmp_path."""
    config = get_default_config()
    temp_dir = tmp_path / "librespot"
    root = tmp_path / "root"
    config["paths"] = {
        "temp_dir": str(temp_dir),
        "cargo_target": str(temp_dir / "target" / "release" / "librespot"),
        "unit_destination": str(root / "lib/systemd/system/raspotify.service"),
        "config_destination": str(root / "etc/raspotify/conf"),
        "binary_destination": str(root / "usr/bin/librespot"),
        "hook_destination": str(root / "usr/lib/raspotify/onevent.sh"),
    }
    config["toolchain"]["cargo_home"] = str(tmp_path / "cargo-home")
    config["apt"]["cache_path"] = str(tmp_path / "pkgcache.bin")
    return config


@pytest.fixture
def plan(plan_config):
    return InstallerConfig.from_dict(plan_config)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def host_factory(plan):
    def make(**state):
        return SimulatedHost(plan, **state)
    return make


@pytest.fixture
def http_factory():
    return FakeHttpClient
