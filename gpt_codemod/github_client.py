#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ GitHub pull‑request client
===============================================================================

Two REST calls, nothing more:

    GET  /repos/{owner}/{repo}          → default branch (when no base is set)
    POST /repos/{owner}/{repo}/pulls    → open the pull request

Any HTTP or network failure becomes a `TransportError` carrying the status
code and the API's error message. Nothing is retried.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from gpt_codemod import get_logger
from gpt_codemod.config import AgentConfig
from gpt_codemod.errors import TransportError

log = get_logger(__name__)

_ACCEPT = "application/vnd.github+json"
_API_VERSION = "2022-11-28"


@dataclass(frozen=True)
class PullRequest:
    number: int
    url: str
    head: str
    base: str


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:240]
    if isinstance(data, dict):
        msg = str(data.get("message") or "")
        errors = data.get("errors")
        if errors:
            msg = f"{msg} {errors}".strip()
        return msg
    return str(data)[:240]


class GitHubClient:
    """
    Minimal GitHub REST client bound to one repository.

    Parameters
    ----------
    config : AgentConfig
        Supplies owner, repo, token and API base URL.
    http : httpx.Client | None
        Injected client (tests use `httpx.MockTransport`).
    """

    def __init__(self, config: AgentConfig, http: Optional[httpx.Client] = None):
        self.owner = config.owner
        self.repo = config.repo
        self._http = http or httpx.Client(
            base_url=config.github_api_url,
            timeout=config.api_timeout,
        )
        self._headers = {
            "Authorization": f"Bearer {config.github_token}",
            "Accept": _ACCEPT,
            "X-GitHub-Api-Version": _API_VERSION,
        }

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # --------------------------------------------------------------------- #
    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"/repos/{self.owner}/{self.repo}{path}"
        log.debug("GitHub %s %s", method, url)
        try:
            resp = self._http.request(method, url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"GitHub {method} {url} failed: {exc}") from exc
        if resp.is_error:
            raise TransportError(
                f"GitHub {method} {url} failed (HTTP {resp.status_code}): {_error_detail(resp)}"
            )
        return resp.json()

    def default_branch(self) -> str:
        data = self._request("GET", "")
        branch = data.get("default_branch") or "main"
        log.debug("Default branch of %s/%s: %s", self.owner, self.repo, branch)
        return branch

    def create_pull_request(self, *, head: str, base: str, title: str, body: str) -> PullRequest:
        """
        Open a pull request from *head* into *base*.

        Raises
        ------
        TransportError
            On any HTTP/network failure.
        """
        data = self._request(
            "POST",
            "/pulls",
            {"title": title, "head": head, "base": base, "body": body},
        )
        pr = PullRequest(
            number=int(data.get("number") or 0),
            url=str(data.get("html_url") or ""),
            head=head,
            base=base,
        )
        log.info("Pull request opened: #%s %s (%s → %s)", pr.number, pr.url, head, base)
        return pr


__all__ = ["GitHubClient", "PullRequest"]
