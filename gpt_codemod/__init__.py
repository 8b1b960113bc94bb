#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
GPT‑Codemod – Package Initialisation
===============================================================================

Exports
-------
* __version__     – Resolved from installed package metadata
* get_version()   – Helper returning the version string
* get_logger()    – Re‑export of gpt_codemod.logger.get_logger

Importing the package configures the root "gpt_codemod" logger once, so every
sub‑module shares the same console + rotating file handlers.
"""
from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version as _pkg_version

from gpt_codemod.logger import get_logger as _get_logger

_ROOT_LOGGER = _get_logger(None)

try:
    __version__: str = _pkg_version("gpt-codemod")
except PackageNotFoundError:
    # Keep in sync with pyproject.toml
    __version__ = "0.1.0"
    _ROOT_LOGGER.debug("Package metadata not found – using fallback version %s", __version__)


def get_version() -> str:
    """Return the package version string."""
    return __version__


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a logger configured with GPT‑Codemod's handlers & formatting.

    Parameters
    ----------
    name : str | None
        Module logger name (usually __name__), or None for the root
        project logger "gpt_codemod".
    """
    return _get_logger(name)


__all__ = ["__version__", "get_version", "get_logger"]
