#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Git helpers for a single task run
===============================================================================

Responsibilities
----------------
* Shallow‑clone the target repository into a fresh temporary directory.
* Create the **task branch** (`ai-task-<epoch-millis>`).
* List candidate files while honouring `.gitignore` (for context sampling).
* Stage everything, commit with a fixed author identity, push the branch.

Design notes
------------
* All interactions go through `_git()` which logs commands and captures output.
* Credentials embedded in the clone URL are redacted before anything is logged.
* Clone and push failures surface as `TransportError`; every other non‑zero
  exit surfaces as `GitCommandError`. Nothing is retried.

Usage (example)
---------------
    repo = GitOps.clone(config.clone_url, workdir)
    branch = repo.create_task_branch("ai-task")
    ...
    repo.commit_all("AI: add a LICENSE file", author=("bot", "bot@example.com"))
    repo.push(branch)
"""
from __future__ import annotations

import re
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from gpt_codemod import get_logger
from gpt_codemod.errors import GitCommandError, TransportError

log = get_logger(__name__)

_CREDENTIALS_RE = re.compile(r"(?<=://)[^/@\s]+@")


def redact(text: str) -> str:
    """Hide `user:token@` credentials embedded in URLs."""
    return _CREDENTIALS_RE.sub("***@", text or "")


@dataclass(frozen=True)
class GitRunResult:
    """Simple carrier for git command results."""
    ok: bool
    code: int
    out: str
    err: str


def _run_git(
    args: List[str],
    *,
    cwd: Optional[Path] = None,
    input_text: Optional[str] = None,
    strip: bool = True,
) -> GitRunResult:
    cmd = ["git", *args]
    log.debug("git %s", redact(" ".join(args)))
    try:
        res = subprocess.run(
            cmd, cwd=str(cwd) if cwd else None, input=input_text,
            capture_output=True, text=True, check=False,
        )
    except OSError as exc:
        raise GitCommandError([redact(a) for a in args], -1, str(exc)) from exc

    # NUL-separated output keeps leading/trailing spaces that belong to paths
    out = (res.stdout or "").strip() if strip else (res.stdout or "")
    err = redact((res.stderr or "").strip())
    if res.returncode != 0:
        log.debug("git returned rc=%s | stderr=%r", res.returncode, err)
    return GitRunResult(ok=res.returncode == 0, code=res.returncode, out=out, err=err)


class GitOps:
    """
    Thin wrapper around the `git` executable scoped to one working tree.
    """

    def __init__(self, repo: Path):
        self.repo = Path(repo).expanduser().resolve()

    # --------------------------------------------------------------------- #
    # Core plumbing
    # --------------------------------------------------------------------- #
    def _git(
        self, *args: str, check: bool = False, input_text: Optional[str] = None, strip: bool = True
    ) -> GitRunResult:
        """
        Run `git <args...>` inside the working tree.

        Raises
        ------
        GitCommandError
            When *check* is True and git exits non‑zero.
        """
        res = _run_git(list(args), cwd=self.repo, input_text=input_text, strip=strip)
        if check and not res.ok:
            raise GitCommandError([redact(a) for a in args], res.code, res.err or res.out)
        return res

    # --------------------------------------------------------------------- #
    # Clone
    # --------------------------------------------------------------------- #
    @classmethod
    def clone(cls, url: str, dest: Path, *, depth: int = 1) -> "GitOps":
        """
        Shallow‑clone *url* into *dest* (which may exist but must be empty).

        Raises
        ------
        TransportError
            If the clone fails for any reason.
        """
        dest = Path(dest)
        log.info("Cloning %s → %s", redact(url), dest)
        res = _run_git(["clone", "--depth", str(depth), url, str(dest)])
        if not res.ok:
            raise TransportError(f"Clone of {redact(url)} failed (rc={res.code}): {res.err}")
        return cls(dest)

    # --------------------------------------------------------------------- #
    # Facts
    # --------------------------------------------------------------------- #
    def list_files(self, patterns: Tuple[str, ...] = ()) -> List[str]:
        """
        Tracked plus untracked‑but‑not‑ignored files, POSIX‑relative, in
        git's (sorted, deterministic) order. *patterns* are pathspecs such
        as `*.py`; an empty tuple lists everything.
        """
        args = ["ls-files", "--cached", "--others", "--exclude-standard", "-z"]
        if patterns:
            args += ["--", *patterns]
        res = self._git(*args, check=True, strip=False)
        seen: set[str] = set()
        files: List[str] = []
        for rel in res.out.split("\0"):
            if rel and rel not in seen:
                seen.add(rel)
                files.append(rel)
        return files

    def has_staged_changes(self) -> bool:
        """`git diff --cached --quiet` exits 0 when nothing is staged."""
        return not self._git("diff", "--cached", "--quiet").ok

    def apply(self, diff_text: str) -> GitRunResult:
        """`git apply -` with *diff_text* on stdin; never raises on rejection."""
        return self._git("apply", "-", input_text=diff_text)

    # --------------------------------------------------------------------- #
    # Branch / commit / push
    # --------------------------------------------------------------------- #
    def create_task_branch(self, prefix: str) -> str:
        """
        Create and switch to `<prefix>-<epoch-millis>`.
        """
        name = f"{prefix}-{int(time.time() * 1000)}"
        self._git("checkout", "-b", name, check=True)
        log.info("Created and switched to branch %s", name)
        return name

    def commit_all(self, message: str, *, author: Tuple[str, str]) -> bool:
        """
        Stage every change in the tree and commit it.

        Returns
        -------
        bool
            False (and no commit) when the tree has nothing to commit.
        """
        self._git("add", "-A", check=True)
        if not self.has_staged_changes():
            log.info("No changes detected for commit: %s (skipping)", message)
            return False
        name, email = author
        self._git(
            "-c", f"user.name={name}", "-c", f"user.email={email}",
            "commit", "-q", "-m", message,
            check=True,
        )
        log.info("Committed: %s", message)
        return True

    def push(self, branch: str, *, remote: str = "origin") -> None:
        """
        Push *branch* to *remote* and set upstream.

        Raises
        ------
        TransportError
            On any push failure.
        """
        res = self._git("push", "--set-upstream", remote, f"HEAD:refs/heads/{branch}")
        if not res.ok:
            raise TransportError(f"Push of {branch} to {remote} failed (rc={res.code}): {res.err}")
        log.info("Pushed branch %s to %s", branch, remote)


__all__ = ["GitOps", "GitRunResult", "redact"]
