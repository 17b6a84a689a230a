"""Tests for raw-content fetching from GitHub."""

from pathlib import Path

import httpx
import pytest

from mvpgen.remote.github import (
    RawContentFetcher,
    is_ssh_url,
    is_supported_host,
    parse_repository,
    to_raw_url,
)

RAW = "https://raw.githubusercontent.com/user/repo/main"


def _fetcher(handler) -> RawContentFetcher:
    return RawContentFetcher(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestUrlRewriting:
    """Tests for repository URL parsing and raw URL construction."""

    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com:user/repo.git",
            "https://github.com/user/repo.git",
            "https://github.com/user/repo",
            "https://github.com/user/repo/tree/main/templates",
        ],
    )
    def test_all_shapes_map_to_same_raw_url(self, url: str) -> None:
        """Test that SSH, HTTPS and suffixed URLs agree on the raw URL."""
        assert to_raw_url(url, "templates.json") == f"{RAW}/templates.json"

    def test_branch_and_leading_slash(self) -> None:
        """Test that the branch is used and a leading slash is stripped."""
        url = to_raw_url("https://github.com/user/repo", "/config/workflow.yml", "dev")
        assert url == "https://raw.githubusercontent.com/user/repo/dev/config/workflow.yml"

    def test_unsupported_host(self) -> None:
        """Test that non-GitHub URLs are not supported."""
        assert to_raw_url("https://gitlab.com/user/repo.git", "a.json") is None
        assert is_supported_host("https://gitlab.com/user/repo") is False
        assert is_supported_host("not a url") is False

    def test_parse_repository(self) -> None:
        """Test owner/repo extraction strips .git."""
        assert parse_repository("git@github.com:acme/tools.git") == ("acme", "tools")
        assert parse_repository("https://www.github.com/acme/tools") == ("acme", "tools")

    def test_is_ssh_url(self) -> None:
        """Test SSH URL detection."""
        assert is_ssh_url("git@github.com:user/repo.git")
        assert is_ssh_url("ssh://git@github.com/user/repo.git")
        assert not is_ssh_url("https://github.com/user/repo.git")


class TestFetch:
    """Tests for RawContentFetcher.fetch."""

    def test_returns_trimmed_content(self) -> None:
        """Test that a 200 response body is returned trimmed."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == f"{RAW}/templates.json"
            return httpx.Response(200, text='  {"templates": []}\n\n')

        with _fetcher(handler) as fetcher:
            text = fetcher.fetch("https://github.com/user/repo.git", "templates.json")

        assert text == '{"templates": []}'

    @pytest.mark.parametrize("status", [403, 404, 500])
    def test_non_success_returns_none(self, status: int) -> None:
        """Test that error statuses yield None instead of raising."""
        fetcher = _fetcher(lambda request: httpx.Response(status))
        assert fetcher.fetch("https://github.com/user/repo", "missing.yml") is None

    def test_empty_body_returns_none(self) -> None:
        """Test that a whitespace-only body counts as unavailable."""
        fetcher = _fetcher(lambda request: httpx.Response(200, text="   \n"))
        assert fetcher.fetch("https://github.com/user/repo", "empty.yml") is None

    def test_network_error_returns_none(self) -> None:
        """Test that transport failures yield None."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        fetcher = _fetcher(handler)
        assert fetcher.fetch("https://github.com/user/repo", "a.yml") is None

    def test_timeout_returns_none(self) -> None:
        """Test that timeouts yield None."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = _fetcher(handler)
        assert fetcher.fetch("https://github.com/user/repo", "a.yml") is None

    def test_unsupported_host_makes_no_request(self) -> None:
        """Test that unsupported URLs short-circuit without a request."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="x")

        fetcher = _fetcher(handler)
        assert fetcher.fetch("https://gitlab.com/user/repo", "a.yml") is None
        assert calls == []

    def test_empty_path_is_programmer_error(self) -> None:
        """Test that an empty file path raises ValueError."""
        fetcher = _fetcher(lambda request: httpx.Response(200, text="x"))
        with pytest.raises(ValueError):
            fetcher.fetch("https://github.com/user/repo", "")


class TestFetchMany:
    """Tests for concurrent fetching."""

    def test_independent_failures_in_input_order(self) -> None:
        """Test that each file succeeds or fails on its own."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/b.yml"):
                return httpx.Response(404)
            return httpx.Response(200, text=request.url.path.rsplit("/", 1)[-1])

        fetcher = _fetcher(handler)
        results = fetcher.fetch_many(
            "https://github.com/user/repo", ["c.yml", "b.yml", "a.yml"]
        )

        assert list(results) == ["c.yml", "b.yml", "a.yml"]
        assert results == {"c.yml": "c.yml", "b.yml": None, "a.yml": "a.yml"}

    def test_empty_list(self) -> None:
        """Test that no paths means no requests."""
        fetcher = _fetcher(lambda request: httpx.Response(500))
        assert fetcher.fetch_many("https://github.com/user/repo", []) == {}


class TestDownloadAndProbe:
    """Tests for binary downloads and repository probing."""

    def test_download_writes_bytes(self, tmp_path: Path) -> None:
        """Test that a binary body is streamed to the destination."""
        payload = b"PK\x03\x04binary"
        fetcher = _fetcher(lambda request: httpx.Response(200, content=payload))
        dest = tmp_path / "out.zip"

        assert fetcher.download(f"{RAW}/templates/x.zip", dest) is True
        assert dest.read_bytes() == payload

    def test_download_failure(self, tmp_path: Path) -> None:
        """Test that a 404 download reports False."""
        fetcher = _fetcher(lambda request: httpx.Response(404))
        assert fetcher.download(f"{RAW}/templates/x.zip", tmp_path / "out.zip") is False

    def test_check_repository_probes_in_order(self) -> None:
        """Test that probing stops at the first readable file."""
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.rsplit("/", 1)[-1]
            requested.append(name)
            if name == "README.txt":
                return httpx.Response(200, text="hello")
            return httpx.Response(404)

        fetcher = _fetcher(handler)
        assert fetcher.check_repository("https://github.com/user/repo") is True
        assert requested == ["README.md", "readme.md", "README.txt"]

    def test_check_repository_inaccessible(self) -> None:
        """Test that a repository with no probe files is inaccessible."""
        fetcher = _fetcher(lambda request: httpx.Response(404))
        assert fetcher.check_repository("https://github.com/user/repo") is False
