"""Copy or download template trees into a project directory."""

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
from enum import Enum
from pathlib import Path

from mvpgen.cache import CacheManager
from mvpgen.errors import TemplateNotFoundError
from mvpgen.git.checkout import RepositoryCheckout
from mvpgen.remote.github import DEFAULT_BRANCH, RawContentFetcher, to_raw_url

logger = logging.getLogger(__name__)

TEMPLATES_DIRNAME = "templates"
ARCHIVE_SUFFIX = ".zip"


class AcquisitionMode(str, Enum):
    """Where template files come from."""

    LOCAL = "local"
    REPO_CHECKOUT = "repo_checkout"
    DIRECT_ARCHIVE = "direct_archive"


def get_package_templates_path() -> Path:
    """Get path to package-bundled templates."""
    return Path(__file__).parent / "default"


def copy_template_tree(source: Path, target_dir: Path) -> None:
    """Recursively copy `source` into `target_dir`, merging with its contents."""
    shutil.copytree(source, target_dir, dirs_exist_ok=True)


def _safe_members(archive: zipfile.ZipFile, target_dir: Path) -> list[zipfile.ZipInfo]:
    """Return archive members, rejecting any that would land outside target."""
    root = target_dir.resolve()
    members = archive.infolist()
    for member in members:
        destination = (root / member.filename).resolve()
        if destination != root and root not in destination.parents:
            raise ValueError(f"Archive entry escapes target directory: {member.filename}")
    return members


def extract_archive(archive_path: Path, target_dir: Path) -> None:
    """Extract every entry of a zip archive into `target_dir`, overwriting."""
    target_dir.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path) as archive:
        archive.extractall(target_dir, members=_safe_members(archive, target_dir))


class TemplateAcquirer:
    """Materializes a template identified by a locator into a target directory.

    Three modes are supported:
    - LOCAL: copy from a directory of bundled or user templates
    - REPO_CHECKOUT: shallow-clone the repository (cached) and copy
      `templates/<locator>` out of it
    - DIRECT_ARCHIVE: download `templates/<locator>.zip` as a raw file and
      extract it

    Every mode either fully succeeds or raises an AcquisitionError. A
    failure may leave a partially populated target directory behind.
    """

    def __init__(
        self,
        templates_root: Path | None = None,
        cache: CacheManager | None = None,
        fetcher: RawContentFetcher | None = None,
        checkout: RepositoryCheckout | None = None,
        use_cache: bool = True,
    ) -> None:
        self.templates_root = templates_root or get_package_templates_path()
        self.cache = cache or CacheManager()
        self.fetcher = fetcher
        self.checkout = checkout or RepositoryCheckout()
        self.use_cache = use_cache

    def acquire(
        self,
        locator: str,
        target_dir: Path,
        repo: str | None = None,
        branch: str = DEFAULT_BRANCH,
        mode: AcquisitionMode = AcquisitionMode.LOCAL,
        fallback_name: str | None = None,
    ) -> str:
        """Populate `target_dir` with the template. Returns the source used."""
        mode = AcquisitionMode(mode)
        if mode is AcquisitionMode.LOCAL:
            return self.from_local(locator, target_dir, fallback_name)
        if not repo:
            raise ValueError(f"Acquisition mode {mode.value!r} requires a repository URL")
        if mode is AcquisitionMode.REPO_CHECKOUT:
            return self.from_repository(locator, target_dir, repo, branch)
        return self.from_archive(locator, target_dir, repo, branch)

    def from_local(
        self, locator: str, target_dir: Path, fallback_name: str | None = None
    ) -> str:
        candidates = [self.templates_root / locator]
        if fallback_name and fallback_name != locator:
            candidates.append(self.templates_root / fallback_name)

        for source in candidates:
            if source.is_dir():
                logger.debug("Copying local template: %s", source)
                copy_template_tree(source, target_dir)
                return str(source)

        raise TemplateNotFoundError(locator, [str(c) for c in candidates])

    def _copy_from_checkout(
        self, checkout_dir: Path, locator: str, target_dir: Path, repo: str
    ) -> str:
        source = checkout_dir / TEMPLATES_DIRNAME / locator
        if not source.is_dir():
            raise TemplateNotFoundError(
                locator, [f"{repo}: {TEMPLATES_DIRNAME}/{locator}"]
            )
        logger.debug("Copying template from checkout: %s", source)
        copy_template_tree(source, target_dir)
        return f"{repo}: {TEMPLATES_DIRNAME}/{locator}"

    def from_repository(
        self, locator: str, target_dir: Path, repo: str, branch: str = DEFAULT_BRANCH
    ) -> str:
        if not self.use_cache:
            with tempfile.TemporaryDirectory(prefix="mvp-gen-") as tmp:
                checkout_dir = Path(tmp) / "repo"
                self.checkout.clone(repo, checkout_dir, branch)
                return self._copy_from_checkout(checkout_dir, locator, target_dir, repo)

        checkout_dir = self.cache.repo_dir(repo)
        if checkout_dir.is_dir():
            logger.debug("Using cached repository: %s", checkout_dir)
            self.checkout.pull(checkout_dir)
        else:
            self.cache.ensure_root()
            self.checkout.clone(repo, checkout_dir, branch)
        return self._copy_from_checkout(checkout_dir, locator, target_dir, repo)

    def from_archive(
        self, locator: str, target_dir: Path, repo: str, branch: str = DEFAULT_BRANCH
    ) -> str:
        archive_path = f"{TEMPLATES_DIRNAME}/{locator}{ARCHIVE_SUFFIX}"
        url = to_raw_url(repo, archive_path, branch)
        if url is None:
            raise TemplateNotFoundError(locator, [f"{repo}: {archive_path}"])

        fetcher = self.fetcher or RawContentFetcher()
        with tempfile.NamedTemporaryFile(
            prefix="mvp-gen-", suffix=ARCHIVE_SUFFIX, delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
        try:
            logger.debug("Downloading template archive: %s", url)
            if not fetcher.download(url, tmp_path):
                raise TemplateNotFoundError(locator, [url])
            try:
                extract_archive(tmp_path, target_dir)
            except (zipfile.BadZipFile, ValueError) as e:
                logger.debug("Could not extract %s: %s", url, e)
                raise TemplateNotFoundError(locator, [url]) from e
        finally:
            tmp_path.unlink(missing_ok=True)
            if self.fetcher is None:
                fetcher.close()
        return url
