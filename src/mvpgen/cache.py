"""On-disk cache for repository checkouts."""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

logger = logging.getLogger(__name__)

APP_NAME = "mvp-gen"
REPO_PREFIX = "repo-"
CACHE_DIR_ENV = "MVP_GEN_CACHE_DIR"
NPM_CACHE_ENV = "npm_config_cache"


def get_cache_dir(prefer_package_manager: bool = True) -> Path:
    """Return the cache root for this platform.

    Resolution order:
    1. MVP_GEN_CACHE_DIR
    2. <npm cache>/_mvp-gen when npm exposes its cache root
    3. The platform user cache dir (XDG/~/.cache, Library/Caches, LOCALAPPDATA)
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if prefer_package_manager:
        npm_cache = os.environ.get(NPM_CACHE_ENV)
        if npm_cache:
            return Path(npm_cache).expanduser() / f"_{APP_NAME}"

    return platformdirs.user_cache_path(APP_NAME, appauthor=False)


def repo_cache_key(repo_url: str) -> str:
    """Directory name for a repository: prefix + SHA256[:16] of the URL.

    Truncation means two URLs could collide; at 64 bits this is ignored.
    """
    digest = hashlib.sha256(repo_url.strip().encode()).hexdigest()[:16]
    return f"{REPO_PREFIX}{digest}"


def format_size(num_bytes: int) -> str:
    """Human-readable size, e.g. '1.5 MB'."""
    size = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def _directory_size(path: Path) -> int:
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += (Path(dirpath) / name).lstat().st_size
            except OSError:
                continue
    return total


@dataclass(frozen=True)
class CacheInfo:
    """Snapshot of the cache directory."""

    dir: Path
    exists: bool
    size: str | None = None
    repositories: list[str] = field(default_factory=list)


class CacheManager:
    """Manages the cache root and its per-repository checkouts.

    There is no locking: concurrent runs against the same repository race
    on clone/pull and the last writer wins.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or get_cache_dir()

    def repo_dir(self, repo_url: str) -> Path:
        return self.root / repo_cache_key(repo_url)

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def repositories(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            item.name
            for item in self.root.iterdir()
            if item.is_dir() and item.name.startswith(REPO_PREFIX)
        )

    def info(self) -> CacheInfo:
        if not self.root.is_dir():
            return CacheInfo(dir=self.root, exists=False)
        return CacheInfo(
            dir=self.root,
            exists=True,
            size=format_size(_directory_size(self.root)),
            repositories=self.repositories(),
        )

    def clean(self) -> bool:
        """Remove the whole cache root. Returns False if there was nothing."""
        if not self.root.exists():
            logger.debug("Cache directory does not exist: %s", self.root)
            return False
        shutil.rmtree(self.root)
        logger.debug("Removed cache directory: %s", self.root)
        return True
