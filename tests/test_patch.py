"""
===============================================================================
Unit‑tests for *gpt_codemod.patch*
===============================================================================

Only the exact `__NO_CHANGES__` literal (surrounding whitespace aside) is a
`NoChange`; every other answer is `DiffText` and is judged by the apply step.
"""
from __future__ import annotations

from textwrap import dedent

import pytest

from gpt_codemod.patch import NO_CHANGES_SENTINEL, DiffText, NoChange, diff_paths, parse_patch


@pytest.mark.parametrize("raw", ["__NO_CHANGES__", "  __NO_CHANGES__\n", "\n__NO_CHANGES__\t"])
def test_exact_sentinel_is_no_change(raw: str):
    assert isinstance(parse_patch(raw), NoChange)


@pytest.mark.parametrize(
    "raw",
    [
        "No changes needed: __NO_CHANGES__",
        "__NO_CHANGES__.",
        "```\n__NO_CHANGES__\n```",
        "__no_changes__",
    ],
)
def test_sentinel_with_extra_text_is_not_no_change(raw: str):
    patch = parse_patch(raw)
    assert isinstance(patch, DiffText)
    assert patch.text == raw.strip()


def test_diff_text_keeps_content():
    raw = "diff --git a/x b/x\n--- a/x\n+++ b/x\n"
    patch = parse_patch(raw + "\n\n")
    assert patch == DiffText(raw.rstrip("\n"))
    assert str(NoChange()) == NO_CHANGES_SENTINEL


def test_diff_paths_lists_new_side_paths():
    text = dedent(
        """\
        diff --git a/LICENSE b/LICENSE
        new file mode 100644
        --- /dev/null
        +++ b/LICENSE
        @@ -0,0 +1 @@
        +MIT
        diff --git a/src/app.py b/src/app.py
        --- a/src/app.py
        +++ b/src/app.py
        @@ -1 +1 @@
        -a
        +b
        """
    )
    assert diff_paths(text) == ["LICENSE", "src/app.py"]
    assert diff_paths("not a diff") == []
