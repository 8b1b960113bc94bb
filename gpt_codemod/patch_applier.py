#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Patch applier (bounded retry)
===============================================================================

State machine
-------------
    start ── NoChange ─────────────────────────────► done (no‑op)
      │
      └─ DiffText → attempt 1 ── applied ──────────► applied
                        │
                        └─ rejected → re‑request with RETRY_INSTRUCTION
                                       → attempt 2 ── applied ──► applied
                                                  └── rejected ─► ApplyError

`MAX_APPLY_ATTEMPTS` is 2 and the loop below is the only place attempts are
created, so a third attempt cannot happen. There is no rollback: the working
tree is throw‑away and is discarded when the run aborts.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from gpt_codemod import get_logger
from gpt_codemod.apply_patch import DiffApplier, PatchRejectedError
from gpt_codemod.errors import ApplyError
from gpt_codemod.patch import DiffText, NoChange, Patch
from gpt_codemod.prompts import RETRY_INSTRUCTION

log = get_logger(__name__)

MAX_APPLY_ATTEMPTS = 2


class PatchSource(Protocol):
    def request(self, extra_instruction: str = "") -> Patch:
        ...


class ApplyOutcome(enum.Enum):
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass
class ApplyAttempt:
    number: int
    patch: Patch
    outcome: Optional[ApplyOutcome] = None
    error: str = ""


@dataclass
class ApplyResult:
    """
    Final state of the applier.

    `applied` is False only on the no‑op path (model returned `NoChange`).
    """
    applied: bool
    attempts: List[ApplyAttempt] = field(default_factory=list)

    @property
    def patch(self) -> Optional[DiffText]:
        for attempt in reversed(self.attempts):
            if attempt.outcome is ApplyOutcome.APPLIED and isinstance(attempt.patch, DiffText):
                return attempt.patch
        return None


class PatchApplier:
    """
    Apply the model's patch, asking *source* for one corrected patch if the
    first is rejected.
    """

    def __init__(self, backend: DiffApplier, source: PatchSource, *, max_attempts: int = MAX_APPLY_ATTEMPTS):
        if not 1 <= max_attempts <= MAX_APPLY_ATTEMPTS:
            raise ValueError(f"max_attempts must be between 1 and {MAX_APPLY_ATTEMPTS}")
        self.backend = backend
        self.source = source
        self.max_attempts = max_attempts

    def run(self, first: Patch) -> ApplyResult:
        """
        Drive the state machine starting from *first*.

        Raises
        ------
        ApplyError
            When every allowed attempt was rejected.
        """
        if isinstance(first, NoChange):
            log.info("Model reports no edits needed.")
            return ApplyResult(applied=False)

        attempts: List[ApplyAttempt] = []
        patch: Patch = first
        for number in range(1, self.max_attempts + 1):
            if number > 1:
                log.warning("Patch failed. Asking model to re-emit with full headers…")
                patch = self.source.request(RETRY_INSTRUCTION)

            attempt = ApplyAttempt(number=number, patch=patch)
            attempts.append(attempt)
            log.info("Apply attempt %d/%d", number, self.max_attempts)

            if isinstance(patch, NoChange):
                # a retry cannot retract the edit the first answer claimed
                attempt.outcome = ApplyOutcome.REJECTED
                attempt.error = "model answered with the no-change sentinel on retry"
                continue

            try:
                self.backend.apply(patch.text)
            except PatchRejectedError as exc:
                attempt.outcome = ApplyOutcome.REJECTED
                attempt.error = exc.stderr or str(exc)
                log.debug("Attempt %d rejected: %s", number, attempt.error)
                continue

            attempt.outcome = ApplyOutcome.APPLIED
            return ApplyResult(applied=True, attempts=attempts)

        last = attempts[-1].error if attempts else ""
        log.error("Patch failed %d times; giving up.", len(attempts))
        raise ApplyError(f"patch failed {len(attempts)} times", attempts=attempts, stderr=last)


__all__ = [
    "ApplyAttempt",
    "ApplyOutcome",
    "ApplyResult",
    "MAX_APPLY_ATTEMPTS",
    "PatchApplier",
    "PatchSource",
]
