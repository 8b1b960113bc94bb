#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Model answer → Patch
===============================================================================

The model answers with either the exact sentinel `__NO_CHANGES__` or a
multi‑file unified diff. The raw text is turned into a tagged value here, at
the boundary, so the rest of the pipeline matches on type instead of
comparing strings:

    patch = parse_patch(raw)
    if isinstance(patch, NoChange): ...
    else: apply(patch.text)

Diff text is **not** validated here; whether it is acceptable is decided by
the apply step alone.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

NO_CHANGES_SENTINEL = "__NO_CHANGES__"

_DIFF_HEADER_RE = re.compile(r"^diff --git (?:a/)?(\S+) (?:b/)?(\S+)\s*$", re.MULTILINE)


@dataclass(frozen=True)
class NoChange:
    """The model reported that the task needs no edit."""

    def __str__(self) -> str:
        return NO_CHANGES_SENTINEL


@dataclass(frozen=True)
class DiffText:
    """Candidate unified diff, as returned by the model."""

    text: str

    def __str__(self) -> str:
        return self.text


Patch = Union[NoChange, DiffText]


def parse_patch(raw: str) -> Patch:
    """
    Classify a model answer.

    Only the exact sentinel (after trimming surrounding whitespace) is a
    `NoChange`; anything else, including the sentinel wrapped in prose or
    code fences, is a `DiffText`.
    """
    text = (raw or "").strip()
    if text == NO_CHANGES_SENTINEL:
        return NoChange()
    return DiffText(text)


def diff_paths(text: str) -> List[str]:
    """
    Return the new‑side paths named by `diff --git` headers, in order.
    Used for log lines only.
    """
    return [m.group(2) for m in _DIFF_HEADER_RE.finditer(text or "")]


__all__ = ["NO_CHANGES_SENTINEL", "NoChange", "DiffText", "Patch", "parse_patch", "diff_paths"]
