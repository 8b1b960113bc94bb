#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Prompt builders
===============================================================================

The request is always three messages:

    system  – output contract (diff format or the no‑change sentinel)
    user    – "Repository context:\\n<bundle>"
    user    – "TASK:\\n<task>\\n<extra instruction>"

The extra instruction is empty on the first request and set to
`RETRY_INSTRUCTION` on the single corrective re‑request.
"""
from __future__ import annotations

import textwrap
from typing import Dict, List

from gpt_codemod import get_logger
from gpt_codemod.patch import NO_CHANGES_SENTINEL

log = get_logger(__name__)

SYSTEM_PROMPT = textwrap.dedent(
    f"""
    You are an expert software-engineering code-mod bot.
    Return ONLY valid output produced by:
        git diff --no-prefix -U1000
    (each file chunk MUST start with:
        diff --git a/<path> b/<path>
        --- a/<path>     or /dev/null
        +++ b/<path>)
    If you create a new file, include:
        new file mode 100644
    If no change is needed, output exactly {NO_CHANGES_SENTINEL} (no extra text).
    """
).strip()

RETRY_INSTRUCTION = (
    "The previous patch failed to apply. "
    "Re-emit the ENTIRE diff (with headers) and ensure it applies."
)


def build_messages(task: str, context: str, extra_instruction: str = "") -> List[Dict[str, str]]:
    """
    Return the chat messages for one patch request.
    """
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Repository context:\n{context}"},
        {"role": "user", "content": f"TASK:\n{task}\n{extra_instruction}"},
    ]
    log.debug(
        "Built prompt | system=%d chars | context=%d chars | task=%d chars | retry=%s",
        len(SYSTEM_PROMPT), len(context), len(task), bool(extra_instruction),
    )
    return messages


__all__ = ["SYSTEM_PROMPT", "RETRY_INSTRUCTION", "build_messages"]
