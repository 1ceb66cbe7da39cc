"""
Git client infrastructure for librespot-setup.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

from pathlib import Path
from typing import Optional, Union
import logging

from .command_runner import CommandRunner, CommandResult

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient(runner)
        if not client.is_git_repo("/tmp/librespot"):
            client.clone(url, "/tmp/librespot")
    """

    def __init__(self, runner: CommandRunner):
        """
        Initialize GitClient.

        Args:
            runner: CommandRunner used for every git invocation
        """
        self.runner = runner

    def is_git_repo(self, path: PathLike) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.exists()

    def clone(self, url: str, target: PathLike) -> CommandResult:
        """Clone url into target."""
        return self.runner.run(["git", "clone", url, str(target)], capture=False)

    def default_branch(self, path: PathLike, remote: str = "origin") -> Optional[str]:
        """
        Get the remote's default branch name.

        Returns:
            Branch name (e.g. "dev") or None if origin/HEAD is not set
        """
        result = self.runner.run(["git", "symbolic-ref", f"refs/remotes/{remote}/HEAD"], cwd=path)
        if not result.ok or not result.output:
            return None
        prefix = f"refs/remotes/{remote}/"
        ref = result.output
        return ref[len(prefix):] if ref.startswith(prefix) else ref

    def is_up_to_date(self, path: PathLike) -> bool:
        """True if the working tree matches its upstream branch."""
        return self.runner.succeeds(["git", "diff", "--quiet", "@{upstream}"], cwd=path)

    def pull(self, path: PathLike, remote: str = "origin", branch: Optional[str] = None) -> CommandResult:
        """Pull from remote."""
        cmd = ["git", "pull", remote]
        if branch:
            cmd.append(branch)
        return self.runner.run(cmd, cwd=path, capture=False)
