#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
Logger tests
===============================================================================

* `gpt_codemod.get_logger` and `gpt_codemod.logger.get_logger` return the same
  logger objects (singleton semantics).
* Repeated calls never add handlers (idempotent configuration).
* Environment switches are parsed leniently.
"""
from __future__ import annotations

import logging
from pathlib import Path

from gpt_codemod import get_logger as pkg_get_logger
from gpt_codemod.logger import ROOT_LOGGER_NAME, LogSettings, configure, get_logger


def test_same_logger_instance_for_same_name() -> None:
    name = "gpt_codemod.test.logger"
    assert get_logger(name) is pkg_get_logger(name)
    assert get_logger(None) is logging.getLogger(ROOT_LOGGER_NAME)


def test_idempotent_handlers() -> None:
    root = get_logger(None)
    before = list(root.handlers)

    for _ in range(3):
        get_logger("gpt_codemod.test.idempotent")
        configure()

    assert root.handlers == before
    assert len(before) >= 1
    assert get_logger("gpt_codemod.test.idempotent").handlers == []


def test_children_propagate() -> None:
    child = get_logger("gpt_codemod.test.child")
    assert child.propagate is True
    assert get_logger(None).propagate is False


def test_settings_from_env() -> None:
    settings = LogSettings.from_env(
        {
            "GPT_CODEMOD_LOG_DIR": "/tmp/x",
            "GPT_CODEMOD_LOG_LVL": "debug",
            "GPT_CODEMOD_LOG_BACK": "3",
            "GPT_CODEMOD_LOG_UTC": "yes",
            "GPT_CODEMOD_LOG_JSON": "1",
        }
    )
    assert settings.log_dir == Path("/tmp/x")
    assert settings.console_level == logging.DEBUG
    assert settings.backup_count == 3
    assert settings.use_utc and settings.json_console


def test_settings_fall_back_on_garbage() -> None:
    settings = LogSettings.from_env({"GPT_CODEMOD_LOG_LVL": "LOUD", "GPT_CODEMOD_LOG_BACK": "many"})
    assert settings.console_level == logging.INFO
    assert settings.backup_count == 7
    assert settings.rotate_when == "midnight"
