#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Patch requester (OpenAI Chat Completions)
===============================================================================

Purpose
-------
Turn (task, context bundle, optional extra instruction) into exactly one
Chat Completions call and hand back the model's answer.

* temperature 0, model from `AgentConfig.model` (default gpt-4o-mini)
* three messages, see `gpt_codemod.prompts.build_messages`
* answer = trimmed `choices[0].message.content`

No retries happen here; the apply step decides whether to ask again.
Errors raised by the SDK (authentication, rate limits, network) propagate
unchanged. `ModelError` is raised only for an answer with no usable content.

Testing
-------
Pass `client=` any object exposing `chat.completions.create(**kwargs)`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from gpt_codemod import get_logger
from gpt_codemod.config import AgentConfig
from gpt_codemod.context_sampler import ContextBundle
from gpt_codemod.errors import ModelError
from gpt_codemod.patch import Patch, parse_patch
from gpt_codemod.prompts import build_messages

log = get_logger(__name__)


def create_client(config: AgentConfig) -> Any:
    """Instantiate the official OpenAI SDK client from *config*."""
    from openai import OpenAI

    kwargs: dict[str, Any] = {"api_key": config.openai_api_key, "timeout": config.api_timeout}
    if config.openai_base_url:
        kwargs["base_url"] = config.openai_base_url
    log.info(
        "OpenAI client initialised | model=%s | timeout=%ss | base=%s",
        config.model, config.api_timeout, config.openai_base_url or "<default>",
    )
    return OpenAI(**kwargs)


@dataclass
class PatchRequester:
    """
    Builds the patch prompt for one run and sends it to the model.

    Attributes
    ----------
    config : AgentConfig
        Source of the model id and credentials.
    task : str
        The instruction for this run (immutable).
    context : ContextBundle
        Sampled repository content.
    client : Any | None
        Injected SDK‑compatible client; created lazily when omitted.
    """

    config: AgentConfig
    task: str
    context: ContextBundle
    client: Optional[Any] = None
    calls: int = field(default=0, init=False)

    def _ensure_client(self) -> Any:
        if self.client is None:
            self.client = create_client(self.config)
        return self.client

    def request_raw(self, extra_instruction: str = "") -> str:
        """
        Send one request and return the trimmed text of the first choice.

        Raises
        ------
        ModelError
            If the response carries no choices or an empty message.
        """
        client = self._ensure_client()
        messages = build_messages(self.task, self.context.render(), extra_instruction)
        self.calls += 1
        log.info("Requesting patch (call %d, model=%s)", self.calls, self.config.model)

        resp = client.chat.completions.create(
            model=self.config.model,
            temperature=0,
            messages=messages,
        )

        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise ModelError("Model response contained no choices.")
        content = getattr(getattr(choices[0], "message", None), "content", None)
        if content is None:
            raise ModelError("Model response contained an empty message.")

        text = content.strip()
        log.debug("Model answered with %d chars", len(text))
        return text

    def request(self, extra_instruction: str = "") -> Patch:
        """Same as `request_raw`, classified into `NoChange` or `DiffText`."""
        return parse_patch(self.request_raw(extra_instruction))


__all__ = ["PatchRequester", "create_client"]
