"""Direct raw-file access to GitHub-hosted repositories."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import TracebackType

import httpx

logger = logging.getLogger(__name__)

RAW_HOST = "https://raw.githubusercontent.com"
DEFAULT_BRANCH = "main"
FETCH_TIMEOUT = 30.0
ARCHIVE_TIMEOUT = 60.0
MAX_PARALLEL_FETCHES = 8

# Files probed by check_repository, in order
REPOSITORY_PROBE_FILES: tuple[str, ...] = (
    "README.md",
    "readme.md",
    "README.txt",
    "package.json",
)

_SSH_PATTERN = re.compile(
    r"^(?:ssh://)?git@github\.com[:/](?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$"
)
_HTTPS_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)"
    r"(?:\.git)?(?:/.*)?$"
)


def parse_repository(repo_url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a GitHub URL, or None if unsupported."""
    url = repo_url.strip()
    for pattern in (_SSH_PATTERN, _HTTPS_PATTERN):
        match = pattern.match(url)
        if match:
            return match.group("owner"), match.group("repo")
    return None


def is_supported_host(repo_url: str) -> bool:
    """Return True if the URL points at a GitHub repository."""
    return parse_repository(repo_url) is not None


def is_ssh_url(repo_url: str) -> bool:
    """Return True for scp-style or ssh:// repository URLs."""
    url = repo_url.strip()
    return url.startswith("git@") or url.startswith("ssh://")


def to_raw_url(
    repo_url: str, file_path: str, branch: str = DEFAULT_BRANCH
) -> str | None:
    """Rewrite a repository reference into a raw content URL.

    git@github.com:user/repo.git, https://github.com/user/repo.git and
    https://github.com/user/repo all map to the same raw URL.
    """
    parsed = parse_repository(repo_url)
    if parsed is None:
        return None
    owner, repo = parsed
    return f"{RAW_HOST}/{owner}/{repo}/{branch}/{file_path.lstrip('/')}"


class RawContentFetcher:
    """Fetches single files from a repository without cloning it.

    Every failure (unsupported host, network error, timeout, non-2xx) is
    reported as None so callers can treat it as one failed source among many.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = FETCH_TIMEOUT,
        archive_timeout: float = ARCHIVE_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client()
        self.timeout = timeout
        self.archive_timeout = archive_timeout

    def __enter__(self) -> RawContentFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def _log_status(self, status: int, what: str, url: str) -> None:
        if status == 404:
            logger.debug("File not found: %s", what)
        elif status == 403:
            logger.debug("Access forbidden (private repo?): %s", what)
        else:
            logger.debug("HTTP %d for %s", status, url)

    def fetch(
        self,
        repo_url: str,
        file_path: str,
        branch: str = DEFAULT_BRANCH,
        timeout: float | None = None,
    ) -> str | None:
        """Fetch one file as trimmed text, or None when unavailable."""
        if not file_path:
            raise ValueError("file_path must be a non-empty repository path")

        raw_url = to_raw_url(repo_url, file_path, branch)
        if raw_url is None:
            logger.debug("Not a GitHub repository: %s", repo_url)
            return None

        logger.debug("Fetching from GitHub raw: %s", raw_url)
        try:
            response = self._client.get(
                raw_url,
                timeout=timeout if timeout is not None else self.timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException:
            logger.debug("Timed out fetching %s", raw_url)
            return None
        except httpx.HTTPError as e:
            logger.debug("Request failed for %s: %s", raw_url, e)
            return None

        if not response.is_success:
            self._log_status(response.status_code, file_path, raw_url)
            return None

        content = response.text.strip()
        if not content:
            logger.debug("Empty content returned for: %s", file_path)
            return None
        return content

    def fetch_many(
        self,
        repo_url: str,
        file_paths: list[str],
        branch: str = DEFAULT_BRANCH,
    ) -> dict[str, str | None]:
        """Fetch several files concurrently.

        Each file fails independently; the result preserves input order.
        """
        if not file_paths:
            return {}

        workers = min(MAX_PARALLEL_FETCHES, len(file_paths))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            contents = list(
                pool.map(lambda p: self.fetch(repo_url, p, branch), file_paths)
            )

        results = dict(zip(file_paths, contents))
        found = sum(1 for c in contents if c is not None)
        logger.debug("Downloaded %d/%d files from %s", found, len(file_paths), repo_url)
        return results

    def download(self, url: str, dest: Path, timeout: float | None = None) -> bool:
        """Stream a binary resource to `dest`. Returns False on any failure."""
        try:
            with self._client.stream(
                "GET",
                url,
                timeout=timeout if timeout is not None else self.archive_timeout,
                follow_redirects=True,
            ) as response:
                if not response.is_success:
                    self._log_status(response.status_code, url, url)
                    return False
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
        except httpx.HTTPError as e:
            logger.debug("Download failed for %s: %s", url, e)
            return False
        return True

    def check_repository(self, repo_url: str, branch: str = DEFAULT_BRANCH) -> bool:
        """Return True if any well-known file can be read from the branch."""
        for probe in REPOSITORY_PROBE_FILES:
            if self.fetch(repo_url, probe, branch) is not None:
                logger.debug("Repository accessible: %s (%s)", repo_url, branch)
                return True
        logger.debug("Repository not accessible or empty: %s (%s)", repo_url, branch)
        return False
