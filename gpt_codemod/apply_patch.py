#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Diff application backend
===============================================================================

Usage
-----
    backend = GitApplyBackend(Path("/tmp/repo-xyz"))
    backend.apply(diff_text)        # raises PatchRejectedError on failure

    # or from a shell, diff on stdin:
    git diff | python -m gpt_codemod.apply_patch /path/to/repo

Contract
--------
`DiffApplier.apply(diff_text)` applies a multi‑file unified diff to a working
tree and either succeeds completely or raises `PatchRejectedError`. The
caller does not care how; `GitApplyBackend` feeds the text to `git apply -`
on **stdin** (never via a temp file).

On rejection the tree is left as `git apply` left it. `git apply` is atomic
by default, so in practice nothing has been written.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol

from gpt_codemod import get_logger
from gpt_codemod.errors import CodemodError
from gpt_codemod.git_ops import GitOps
from gpt_codemod.patch import diff_paths

log = get_logger(__name__)


class PatchRejectedError(CodemodError):
    """The apply tool refused the diff."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class DiffApplier(Protocol):
    def apply(self, diff_text: str) -> None:
        """Apply *diff_text* or raise `PatchRejectedError`."""


class GitApplyBackend:
    """
    `git apply -` inside a working tree.
    """

    def __init__(self, repo: Path, git: GitOps | None = None):
        self.repo = Path(repo).expanduser().resolve()
        self.git = git or GitOps(self.repo)

    def apply(self, diff_text: str) -> None:
        # git apply treats a missing final newline as a corrupt patch
        payload = diff_text if diff_text.endswith("\n") else diff_text + "\n"
        log.debug("git apply: %d bytes, files=%s", len(payload), diff_paths(payload) or "<none>")
        res = self.git.apply(payload)
        if not res.ok:
            raise PatchRejectedError(
                f"git apply rejected the patch (rc={res.code})", stderr=res.err
            )
        log.info("Patch applied to %s", self.repo)


def _cli() -> None:
    """Apply a diff read from stdin to the repository given as argv[1]."""
    if len(sys.argv) != 2:
        sys.exit("Usage: python -m gpt_codemod.apply_patch <repo>  < patch.diff")
    try:
        GitApplyBackend(Path(sys.argv[1])).apply(sys.stdin.read())
    except PatchRejectedError as exc:
        sys.exit(f"{exc}\n{exc.stderr}")


__all__ = ["DiffApplier", "GitApplyBackend", "PatchRejectedError"]


if __name__ == "__main__":
    _cli()
