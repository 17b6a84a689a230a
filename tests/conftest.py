"""Shared fixtures for mvp-gen tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from mvpgen.prompts.engine import Question
from mvpgen.prompts.registry import FunctionRegistries


class ScriptedBackend:
    """Prompt backend that answers from a queue and records every question."""

    def __init__(self, answers: list[Any]) -> None:
        self.answers = list(answers)
        self.questions: list[Question] = []
        self.errors: list[str] = []

    def ask(self, question: Question) -> Any:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected question: {question.name}")
        return self.answers.pop(0)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def asked(self) -> list[str]:
        return [q.name for q in self.questions]


@pytest.fixture
def registries() -> FunctionRegistries:
    """Registries isolated from the process-wide globals."""
    return FunctionRegistries().isolated()


@pytest.fixture
def cache_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the cache root at a temporary directory."""
    root = tmp_path / "cache"
    monkeypatch.setenv("MVP_GEN_CACHE_DIR", str(root))
    yield root
