"""
===============================================================================
Shared fixtures: throw‑away git repositories and a fake OpenAI client
===============================================================================

* `make_repo(files, commit=True)` → a fresh `git init` repository under
  tmp_path populated with *files* (path → text).
* `FakeOpenAIClient(answers)` mimics `client.chat.completions.create(...)`
  and returns the queued answers in order, recording every call.
"""
from __future__ import annotations

import itertools
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")


def git(repo: Path, *args: str, capture: bool = False) -> str:
    """Run *git* in *repo*, optionally capturing stdout."""
    res = subprocess.run(
        ["git", "-C", str(repo), *args],
        text=True,
        capture_output=capture,
        check=True,
    )
    return res.stdout if capture else ""


def write_files(root: Path, files: Dict[str, str]) -> None:
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")


@pytest.fixture
def make_repo(tmp_path: Path):
    counter = itertools.count(1)

    def _make(files: Optional[Dict[str, str]] = None, *, commit: bool = True) -> Path:
        repo = tmp_path / f"repo{next(counter)}"
        repo.mkdir()
        git(repo, "init", "-q")
        git(repo, "config", "user.email", "t@example.com")
        git(repo, "config", "user.name", "Test")
        git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
        write_files(repo, files or {})
        if commit and files:
            git(repo, "add", "-A")
            git(repo, "commit", "-q", "-m", "baseline")
        log.info("Initialised repo at %s", repo)
        return repo

    return _make


# ───────────────────────────── OpenAI fakes ──────────────────────────────────
class _Obj:
    """Simple attribute container to mimic SDK objects (choices/message)."""

    def __init__(self, **kw: Any):
        for k, v in kw.items():
            setattr(self, k, v)


class _FakeCompletions:
    def __init__(self, answers: List[Any]):
        self._answers = list(answers)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if not self._answers:
            raise AssertionError("unexpected extra model call")
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return _Obj(choices=[_Obj(message=_Obj(role="assistant", content=answer))])


class FakeOpenAIClient:
    """
    Minimal stand‑in for the OpenAI client:
        client.chat.completions.create(...)
    """

    def __init__(self, answers: List[Any]):
        self.chat = _Obj(completions=_FakeCompletions(answers))

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.chat.completions.calls


@pytest.fixture
def run_git():
    return git


@pytest.fixture
def fake_llm():
    return FakeOpenAIClient
