#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod ▸ Module Entry Point  (python -m gpt_codemod)
===============================================================================

* Fast `--version` path.
* Logs a concise startup banner (version, Python, platform).
* Delegates everything else to `gpt_codemod.cli:main`, so
  `python -m gpt_codemod` and the `gpt-codemod` console script behave the same.
"""
from __future__ import annotations

import platform
import sys


def main() -> None:
    argv = sys.argv[1:]

    if argv == ["--version"]:
        from gpt_codemod import get_version

        print(get_version())
        sys.exit(0)

    from gpt_codemod import get_logger, get_version
    from gpt_codemod.cli import main as cli_main

    get_logger(__name__).info(
        "GPT‑Codemod %s  |  Python %s  |  %s",
        get_version(),
        platform.python_version(),
        platform.platform(),
    )
    sys.exit(cli_main(argv))


if __name__ == "__main__":
    main()
