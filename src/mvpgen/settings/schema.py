"""Tool settings schema for mvp-gen."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Literal

ModeName = Literal["local", "repo", "archive"]
MODE_NAMES: tuple[str, ...] = ("local", "repo", "archive")


def _as_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class GeneratorSettings:
    """Defaults for `mvp-gen init`.

    Every field mirrors a CLI option. None means "not set" and is filled in
    by a lower layer when merged.
    """

    # Template source
    repo: str | None = None
    branch: str | None = None
    prefer_local: bool | None = None
    mode: ModeName | None = None
    use_cache: bool | None = None

    # Network
    fetch_timeout: float | None = None
    archive_timeout: float | None = None

    def merge(self, other: GeneratorSettings) -> GeneratorSettings:
        """Return new settings where non-None values from `other` win."""
        return GeneratorSettings(
            **{
                f.name: (
                    getattr(other, f.name)
                    if getattr(other, f.name) is not None
                    else getattr(self, f.name)
                )
                for f in fields(self)
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset values."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorSettings:
        """Create from a dictionary. Unknown keys and bad modes are ignored."""
        mode = data.get("mode")
        branch = data.get("branch")
        repo = data.get("repo")
        return cls(
            repo=str(repo) if repo else None,
            branch=str(branch) if branch else None,
            prefer_local=_as_bool(data.get("prefer_local")),
            mode=mode if mode in MODE_NAMES else None,
            use_cache=_as_bool(data.get("use_cache")),
            fetch_timeout=_as_float(data.get("fetch_timeout")),
            archive_timeout=_as_float(data.get("archive_timeout")),
        )


DEFAULT_SETTINGS = GeneratorSettings(
    repo=None,
    branch="main",
    prefer_local=False,
    mode="repo",
    use_cache=True,
    fetch_timeout=30.0,
    archive_timeout=60.0,
)
