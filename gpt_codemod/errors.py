#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Error taxonomy
===============================================================================

| Error            | Raised when                                   | Recovery        |
|------------------|-----------------------------------------------|-----------------|
| UsageError       | the task argument is missing                  | none (exit 1)   |
| ConfigError      | required run configuration is missing/invalid | none (exit 1)   |
| TransportError   | clone, push or the hosting API call fails     | none (exit 1)   |
| GitCommandError  | a local git command fails                     | none (exit 1)   |
| ModelError       | the model answer is malformed                 | none (exit 1)   |
| ApplyError       | the patch was rejected on both attempts       | one retry first |

Failures raised by the OpenAI SDK itself (authentication, quota, network)
are not wrapped; they reach the CLI boundary as the SDK raised them.
"""
from __future__ import annotations

from typing import Sequence


class CodemodError(Exception):
    """Base class for every error raised by gpt_codemod."""


class UsageError(CodemodError):
    """The command line did not provide a task."""


class ConfigError(CodemodError):
    """Run configuration is missing or malformed."""

    def __init__(self, message: str, missing: Sequence[str] = ()):
        super().__init__(message)
        self.missing = tuple(missing)


class TransportError(CodemodError):
    """Clone, push or pull‑request creation failed."""


class GitCommandError(CodemodError):
    """A local git command exited non‑zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.git_args = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"git {' '.join(self.git_args)} failed (rc={returncode}){detail}")


class ModelError(CodemodError):
    """The inference call returned something that is not a usable answer."""


class ApplyError(CodemodError):
    """The patch could not be applied within the allowed attempts."""

    def __init__(self, message: str, attempts: Sequence[object] = (), stderr: str = ""):
        super().__init__(message)
        self.attempts = tuple(attempts)
        self.stderr = stderr


__all__ = [
    "CodemodError",
    "UsageError",
    "ConfigError",
    "TransportError",
    "GitCommandError",
    "ModelError",
    "ApplyError",
]
