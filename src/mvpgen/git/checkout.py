"""Shallow repository checkouts for template sources."""

import logging
import subprocess
from pathlib import Path

from mvpgen.errors import RepositoryCheckoutError
from mvpgen.remote.github import DEFAULT_BRANCH, is_ssh_url

logger = logging.getLogger(__name__)

SSH_HINT = (
    "SSH authentication failed. Make sure your SSH key is added to your "
    "GitHub account, or use the HTTPS URL instead."
)


class RepositoryCheckout:
    """Clones and refreshes template repositories with the git CLI."""

    def __init__(self, git: str = "git") -> None:
        self._git = git

    def _run(self, args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self._git, *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )

    def clone(self, repo_url: str, dest: Path, branch: str = DEFAULT_BRANCH) -> None:
        """Clone a single branch at depth 1 into `dest`.

        Raises:
            RepositoryCheckoutError: If git is missing or the clone fails.
        """
        logger.debug("Cloning %s (%s) into %s", repo_url, branch, dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            result = self._run(
                [
                    "clone",
                    "--depth",
                    "1",
                    "--single-branch",
                    "--branch",
                    branch,
                    repo_url,
                    str(dest),
                ]
            )
        except FileNotFoundError as e:
            raise RepositoryCheckoutError(repo_url, "git executable not found") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"git exited with {result.returncode}"
            hint = SSH_HINT if is_ssh_url(repo_url) else None
            raise RepositoryCheckoutError(repo_url, detail, hint)

    def pull(self, checkout_dir: Path) -> bool:
        """Refresh an existing checkout. Failure is logged, not raised."""
        logger.debug("Updating cached repository: %s", checkout_dir)
        try:
            result = self._run(["pull"], cwd=checkout_dir)
        except FileNotFoundError:
            logger.warning("git executable not found, using cached templates")
            return False

        if result.returncode != 0:
            logger.warning(
                "Failed to update cached repository, using existing version: %s",
                result.stderr.strip(),
            )
            return False
        return True
