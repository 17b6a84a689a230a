"""Remote content access."""

from mvpgen.remote.github import (
    RAW_HOST,
    RawContentFetcher,
    is_ssh_url,
    is_supported_host,
    parse_repository,
    to_raw_url,
)

__all__ = [
    "RAW_HOST",
    "RawContentFetcher",
    "is_ssh_url",
    "is_supported_host",
    "parse_repository",
    "to_raw_url",
]
