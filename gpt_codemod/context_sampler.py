#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Context sampler
===============================================================================

Purpose
-------
Pick a small, predictable slice of the working tree to show the model.

Discovery
---------
* Source files matching `SOURCE_PATTERNS`, as listed by git (so `.gitignore`
  is honoured), followed by any `MANIFEST_FILES` present at the repository
  root that git did not already list (manifests are considered even when
  ignored).

Selection
---------
* Candidates are sorted by path length (shortest first); ties keep discovery
  order, so the result is deterministic for a given tree.
* A file is admitted only if it is smaller than `PER_FILE_CAP` bytes **and**
  the remaining byte budget stays strictly positive after admitting it.
* Sampling stops once `max_files` files have been admitted.
* No partial files are ever included.
* Sizes and the budget are measured in on‑disk bytes. Contents are decoded as
  UTF‑8 with invalid bytes replaced by U+FFFD, so a file with malformed
  bytes may render slightly longer than the size it was budgeted at.

Output
------
    FILE: <path>\\n<contents><FILE_DELIMITER>FILE: <path>\\n<contents>…

This module only reads files. A candidate that vanishes or cannot be read
between discovery and read raises `OSError`; it is never skipped silently.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from gpt_codemod import get_logger
from gpt_codemod.config import DEFAULT_MAX_BYTES, DEFAULT_MAX_FILES
from gpt_codemod.git_ops import GitOps

log = get_logger(__name__)

PER_FILE_CAP = 3_000
FILE_DELIMITER = "\n\n<<<END FILE>>>\n\n"

SOURCE_PATTERNS: Tuple[str, ...] = (
    "*.ts", "*.tsx", "*.js", "*.jsx", "*.py", "*.go", "*.rs", "*.java",
)
MANIFEST_FILES: Tuple[str, ...] = (
    "package.json", "pnpm-workspace.yaml", "tsconfig.json",
    "pyproject.toml", "setup.py", "setup.cfg", "requirements.txt",
)


@dataclass(frozen=True)
class ContextFile:
    path: str
    content: str
    size: int

    def render(self) -> str:
        return f"FILE: {self.path}\n{self.content}"


@dataclass(frozen=True)
class ContextBundle:
    """
    Ordered, read‑only sample of the working tree.

    Attributes
    ----------
    files : tuple[ContextFile, ...]
        Admitted files in admission order.
    max_files, max_bytes : int
        Limits the bundle was built under.
    """
    files: Tuple[ContextFile, ...] = field(default_factory=tuple)
    max_files: int = DEFAULT_MAX_FILES
    max_bytes: int = DEFAULT_MAX_BYTES

    @property
    def total_bytes(self) -> int:
        return sum(f.size for f in self.files)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def render(self) -> str:
        return FILE_DELIMITER.join(f.render() for f in self.files)

    def __len__(self) -> int:
        return len(self.files)


class ContextSampler:
    """
    Budgeted sampler over one working tree.

    Parameters
    ----------
    root : Path
        Working‑tree root (a git checkout).
    max_files : int
        File‑count limit (default 25).
    max_bytes : int
        Cumulative byte budget (default 40 000).
    """

    def __init__(
        self,
        root: Path,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        max_bytes: int = DEFAULT_MAX_BYTES,
        git: Optional[GitOps] = None,
    ):
        if max_files < 0 or max_bytes < 0:
            raise ValueError("max_files and max_bytes must not be negative")
        self.root = Path(root).expanduser().resolve()
        self.max_files = max_files
        self.max_bytes = max_bytes
        self.git = git or GitOps(self.root)

    # ---------------------------- discovery -------------------------------- #
    def discover(self) -> List[str]:
        """Candidate paths in discovery order (see module docstring)."""
        candidates = self.git.list_files(SOURCE_PATTERNS)
        listed = set(candidates)
        for name in MANIFEST_FILES:
            if name not in listed and (self.root / name).is_file():
                candidates.append(name)
        log.debug("Discovered %d candidate files", len(candidates))
        return candidates

    # ---------------------------- selection -------------------------------- #
    def select(self, candidates: Sequence[str]) -> List[Tuple[str, int]]:
        """
        Apply the admission rule to *candidates*; return (path, size) pairs.
        """
        # sorted() is stable: equal lengths keep discovery order
        ordered = sorted(candidates, key=len)
        picked: List[Tuple[str, int]] = []
        budget = self.max_bytes
        for rel in ordered:
            if len(picked) >= self.max_files:
                break
            size = (self.root / rel).stat().st_size
            if size < PER_FILE_CAP and budget - size > 0:
                picked.append((rel, size))
                budget -= size
        return picked

    def sample(self) -> ContextBundle:
        """
        Discover, select and read files into a `ContextBundle`.

        Raises
        ------
        OSError
            If a selected file disappears or cannot be read.
        """
        picked = self.select(self.discover())
        files = tuple(
            ContextFile(path=rel, content=self._read(rel), size=size) for rel, size in picked
        )
        bundle = ContextBundle(files=files, max_files=self.max_files, max_bytes=self.max_bytes)
        log.info(
            "Context sampled: %d files, %d/%d bytes",
            len(bundle), bundle.total_bytes, self.max_bytes,
        )
        return bundle

    def _read(self, rel: str) -> str:
        data = (self.root / rel).read_bytes()
        return data.decode("utf-8", errors="replace")


def sample_repo_context(
    root: Path,
    max_files: int = DEFAULT_MAX_FILES,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> ContextBundle:
    """Convenience wrapper around `ContextSampler(...).sample()`."""
    return ContextSampler(root, max_files=max_files, max_bytes=max_bytes).sample()


__all__ = [
    "ContextBundle",
    "ContextFile",
    "ContextSampler",
    "FILE_DELIMITER",
    "MANIFEST_FILES",
    "PER_FILE_CAP",
    "SOURCE_PATTERNS",
    "sample_repo_context",
]
