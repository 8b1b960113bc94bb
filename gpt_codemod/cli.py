#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Command Line Interface
===============================================================================

    gpt-codemod "Add a /settings page"
    gpt-codemod add a LICENSE file            # words are joined into one task

Options
-------
• --model         – override OPENAI_ASSISTANT_MODEL
• --max-files     – context file‑count limit (default 25)
• --max-bytes     – context byte budget (default 40000)
• --base          – pull‑request base branch (default: repo default branch)
• --keep-workdir  – keep the temporary checkout for inspection
• --env-file      – load settings from this file instead of ./.env
• --version       – print package version

Exit codes
----------
0  pull request opened, or the model reported no change is needed
1  usage/configuration error or any failure during the run
130 interrupted (Ctrl‑C)
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from dotenv import load_dotenv

from gpt_codemod import get_logger, get_version
from gpt_codemod.config import AgentConfig
from gpt_codemod.errors import ApplyError, CodemodError, ConfigError, UsageError
from gpt_codemod.workflow import REASON_EMPTY_PATCH, CodemodWorkflow

log = get_logger(__name__)

USAGE_EXAMPLE = 'gpt-codemod "Add /settings page …"'


class _ArgumentParser(argparse.ArgumentParser):
    """Report bad arguments as `UsageError` (exit 1) instead of exiting with 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="gpt-codemod",
        description="Ask a model for a patch implementing TASK and open a pull request with it.",
    )
    parser.add_argument("task", nargs="*", help="Task description (remaining words are joined).")
    parser.add_argument("--model", help="Model id (overrides OPENAI_ASSISTANT_MODEL).")
    parser.add_argument("--max-files", type=int, help="Context file-count limit.")
    parser.add_argument("--max-bytes", type=int, help="Context byte budget.")
    parser.add_argument("--base", help="Pull-request base branch.")
    parser.add_argument(
        "--keep-workdir", action="store_true", default=None,
        help="Do not delete the temporary checkout.",
    )
    parser.add_argument("--env-file", help="Path of a .env file to load.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def _load_config(args: argparse.Namespace) -> AgentConfig:
    if args.env_file and not Path(args.env_file).is_file():
        raise ConfigError(f"Env file not found: {args.env_file}")
    # existing environment variables win over the file
    load_dotenv(args.env_file or ".env")
    cfg = AgentConfig.from_env(os.environ)
    return cfg.with_overrides(
        model=args.model,
        max_files=args.max_files,
        max_bytes=args.max_bytes,
        base_branch=args.base,
        keep_workdir=args.keep_workdir,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        task = " ".join(args.task).strip()
        if not task:
            raise UsageError(f"Usage: {USAGE_EXAMPLE}")
        for name in ("max_files", "max_bytes"):
            value = getattr(args, name)
            if value is not None and value <= 0:
                raise UsageError(f"--{name.replace('_', '-')} must be positive")
        cfg = _load_config(args)
        result = CodemodWorkflow(cfg).run(task)
    except UsageError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    except ConfigError as exc:
        log.error("Configuration error: %s", exc)
        return 1
    except ApplyError as exc:
        log.error("Patch could not be applied: %s\n%s", exc, exc.stderr)
        return 1
    except CodemodError as exc:
        log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted by user (Ctrl‑C). Exiting.")
        return 130
    except Exception as exc:
        log.exception("Run failed: %s", exc)
        return 1

    if result.published and result.pull_request is not None:
        print(f"✅ Pull Request opened: {result.branch} → {result.pull_request.base} ({result.pull_request.url})")
    elif result.reason == REASON_EMPTY_PATCH:
        print("ℹ️ Patch applied but changed nothing – nothing pushed.")
    else:
        print("ℹ️ Model reports no edits needed – nothing pushed.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
