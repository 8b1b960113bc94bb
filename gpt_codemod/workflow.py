#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Single‑task workflow
===============================================================================

Strictly sequential pipeline for one task:

    1. clone (depth 1) into a fresh temp dir, create `ai-task-<ms>` branch
    2. sample repository context
    3. request a patch (NoChange → stop, nothing pushed)
    4. apply it, with at most one corrective re‑request
    5. commit `AI: <task>` and push the branch
    6. open the pull request against the base branch

Each stage consumes only the previous stage's output. Any error ends the run
as raised; steps that already completed are not undone (e.g. a pushed branch
stays when PR creation fails).

The working tree is deleted when the run ends unless `keep_workdir` is set.
"""
from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from gpt_codemod import get_logger
from gpt_codemod.api_client import PatchRequester
from gpt_codemod.apply_patch import GitApplyBackend
from gpt_codemod.config import AgentConfig
from gpt_codemod.context_sampler import ContextSampler
from gpt_codemod.errors import UsageError
from gpt_codemod.git_ops import GitOps
from gpt_codemod.github_client import GitHubClient, PullRequest
from gpt_codemod.patch_applier import ApplyAttempt, PatchApplier

log = get_logger(__name__)

STATUS_PUBLISHED = "published"
STATUS_NO_CHANGES = "no_changes"

# why a run ended as no_changes
REASON_MODEL_DECLINED = "model_declined"
REASON_EMPTY_PATCH = "empty_patch"


def commit_message(task: str) -> str:
    return f"AI: {task}"


def pull_request_body(task: str) -> str:
    return f"Automated patch generated by OpenAI\n\nTask:\n{task}"


@dataclass
class RunResult:
    status: str
    workdir: Path
    branch: Optional[str] = None
    pull_request: Optional[PullRequest] = None
    attempts: List[ApplyAttempt] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def published(self) -> bool:
        return self.status == STATUS_PUBLISHED


class CodemodWorkflow:
    """
    Runs one task end to end.

    Parameters
    ----------
    config : AgentConfig
        Run configuration, built once by the caller.
    llm_client : Any | None
        OpenAI‑compatible client; created from *config* when omitted.
    publisher : GitHubClient | None
        Pull‑request client; created from *config* when omitted.
    workdir_root : Path | None
        Parent directory for the temporary checkout (default: system temp).
    """

    def __init__(
        self,
        config: AgentConfig,
        *,
        llm_client: Optional[Any] = None,
        publisher: Optional[GitHubClient] = None,
        workdir_root: Optional[Path] = None,
    ):
        self.config = config
        self.llm_client = llm_client
        self.publisher = publisher
        self.workdir_root = workdir_root

    def run(self, task: str) -> RunResult:
        task = (task or "").strip()
        if not task:
            raise UsageError("A task description is required.")

        workdir = Path(tempfile.mkdtemp(prefix="repo-", dir=self.workdir_root))
        log.info("Task: %s | repo=%s | workdir=%s", task, self.config.slug, workdir)
        try:
            return self._run(task, workdir)
        finally:
            if self.config.keep_workdir:
                log.info("Working tree kept at %s", workdir)
            else:
                shutil.rmtree(workdir, ignore_errors=True)

    # --------------------------------------------------------------------- #
    def _run(self, task: str, workdir: Path) -> RunResult:
        cfg = self.config

        git = GitOps.clone(cfg.clone_url, workdir)
        branch = git.create_task_branch(cfg.branch_prefix)

        bundle = ContextSampler(workdir, max_files=cfg.max_files, max_bytes=cfg.max_bytes, git=git).sample()

        requester = PatchRequester(cfg, task, bundle, client=self.llm_client)
        applier = PatchApplier(GitApplyBackend(workdir, git), requester)
        outcome = applier.run(requester.request())
        if not outcome.applied:
            log.info("Model reports no edits needed – exiting.")
            return RunResult(status=STATUS_NO_CHANGES, workdir=workdir, reason=REASON_MODEL_DECLINED)

        if not git.commit_all(commit_message(task), author=(cfg.git_name, cfg.git_email)):
            log.warning("Patch applied but produced no changes; nothing to publish.")
            return RunResult(
                status=STATUS_NO_CHANGES,
                workdir=workdir,
                attempts=outcome.attempts,
                reason=REASON_EMPTY_PATCH,
            )

        git.push(branch)

        if self.publisher is not None:
            pr = self._publish(self.publisher, task, branch)
        else:
            with GitHubClient(cfg) as publisher:
                pr = self._publish(publisher, task, branch)

        return RunResult(
            status=STATUS_PUBLISHED,
            workdir=workdir,
            branch=branch,
            pull_request=pr,
            attempts=outcome.attempts,
        )

    def _publish(self, publisher: GitHubClient, task: str, branch: str) -> PullRequest:
        base = self.config.base_branch or publisher.default_branch()
        return publisher.create_pull_request(
            head=branch,
            base=base,
            title=commit_message(task),
            body=pull_request_body(task),
        )


__all__ = [
    "CodemodWorkflow",
    "REASON_EMPTY_PATCH",
    "REASON_MODEL_DECLINED",
    "RunResult",
    "STATUS_NO_CHANGES",
    "STATUS_PUBLISHED",
]
