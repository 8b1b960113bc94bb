"""
===============================================================================
Unit‑tests for *gpt_codemod.context_sampler*
===============================================================================

Goals
-----
* Bundle never exceeds the byte budget or the file‑count limit.
* Files at or above the 3 000‑byte cap are never included.
* Sampling is deterministic (byte‑identical renders for the same tree).
* Shorter paths first, `.gitignore` honoured, manifests always considered.
* Unreadable / vanished candidates raise instead of being skipped.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from gpt_codemod.context_sampler import (
    FILE_DELIMITER,
    PER_FILE_CAP,
    ContextSampler,
    sample_repo_context,
)


def _blob(n: int) -> str:
    return "x" * n


def test_budget_and_file_limit_are_respected(make_repo):
    files = {f"pkg/mod_{i:02d}.py": _blob(900) for i in range(40)}
    repo = make_repo(files)

    bundle = ContextSampler(repo, max_files=25, max_bytes=10_000).sample()

    assert 0 < len(bundle) <= 25
    assert bundle.total_bytes <= 10_000
    # 900 * 11 = 9 900 leaves 100 > 0; a 12th file would overdraw
    assert len(bundle) == 11


def test_file_count_limit_stops_sampling(make_repo):
    repo = make_repo({f"m{i}.py": "pass\n" for i in range(10)})

    bundle = ContextSampler(repo, max_files=3).sample()

    assert len(bundle) == 3


def test_files_at_or_above_cap_are_never_included(make_repo):
    repo = make_repo(
        {
            "at_cap.py": _blob(PER_FILE_CAP),
            "over.py": _blob(PER_FILE_CAP + 1),
            "below.py": _blob(PER_FILE_CAP - 1),
        }
    )

    bundle = ContextSampler(repo, max_bytes=1_000_000).sample()

    assert bundle.paths == ["below.py"]


def test_budget_may_not_reach_zero(make_repo):
    repo = make_repo({"a.py": _blob(100)})

    assert len(ContextSampler(repo, max_bytes=100).sample()) == 0
    assert ContextSampler(repo, max_bytes=101).sample().paths == ["a.py"]


def test_admission_skips_large_file_and_continues(make_repo):
    repo = make_repo({"a.py": _blob(60), "bb.py": _blob(50), "ccc.py": _blob(30)})

    bundle = ContextSampler(repo, max_bytes=100).sample()

    # a.py fits (40 left), bb.py would overdraw, ccc.py fits (10 left)
    assert bundle.paths == ["a.py", "ccc.py"]


def test_shorter_paths_first_ties_keep_discovery_order(make_repo):
    repo = make_repo(
        {
            "deep/nested/module.py": "x = 1\n",
            "b.py": "b = 1\n",
            "a.py": "a = 1\n",
            "src/c.ts": "export {}\n",
        }
    )

    bundle = ContextSampler(repo).sample()

    assert bundle.paths == ["a.py", "b.py", "src/c.ts", "deep/nested/module.py"]


def test_sampling_is_deterministic(make_repo):
    files = {f"dir{i % 3}/f{i}.js": f"// {i}\n" * (i + 1) for i in range(30)}
    repo = make_repo(files)

    first = sample_repo_context(repo, max_files=12, max_bytes=2_000).render()
    second = sample_repo_context(repo, max_files=12, max_bytes=2_000).render()

    assert first == second
    assert first  # non‑empty


def test_render_format(make_repo):
    repo = make_repo({"a.py": "print('a')\n", "bb.go": "package main\n"})

    text = ContextSampler(repo).sample().render()

    assert text == (
        "FILE: a.py\nprint('a')\n" + FILE_DELIMITER + "FILE: bb.go\npackage main\n"
    )


def test_only_source_extensions_and_manifests(make_repo):
    repo = make_repo(
        {
            "README.md": "# readme\n",
            "notes.txt": "notes\n",
            "main.rs": "fn main() {}\n",
            "package.json": "{}\n",
            "pyproject.toml": "[project]\n",
            "docs/conf.yaml": "a: 1\n",
        }
    )

    paths = ContextSampler(repo).sample().paths

    assert set(paths) == {"main.rs", "package.json", "pyproject.toml"}


def test_gitignore_is_honoured_but_manifests_still_considered(make_repo):
    repo = make_repo(
        {
            ".gitignore": "ignored.py\npackage.json\nbuild/\n",
            "kept.py": "k = 1\n",
            "ignored.py": "i = 1\n",
            "build/gen.py": "g = 1\n",
        },
        commit=False,
    )
    (repo / "package.json").write_text('{"name": "demo"}\n', encoding="utf-8")

    paths = ContextSampler(repo).sample().paths

    assert "kept.py" in paths
    assert "ignored.py" not in paths
    assert "build/gen.py" not in paths
    assert "package.json" in paths


def test_untracked_files_are_candidates(make_repo):
    repo = make_repo({"tracked.py": "t = 1\n"})
    (repo / "fresh.py").write_text("f = 1\n", encoding="utf-8")

    assert set(ContextSampler(repo).sample().paths) == {"tracked.py", "fresh.py"}


def test_paths_with_surrounding_spaces_survive_discovery(make_repo):
    repo = make_repo({" notes.py": "n = 1\n", "a.py": "a = 1\n", "tail .py": "t = 1\n"})

    bundle = ContextSampler(repo).sample()

    assert bundle.paths == ["a.py", "tail .py", " notes.py"]
    assert "FILE:  notes.py\nn = 1\n" in bundle.render()


def test_budget_counts_on_disk_bytes_for_malformed_utf8(make_repo):
    repo = make_repo({"ok.py": "ok = 1\n"})
    (repo / "bad.py").write_bytes(b"x = '\xff\xfe'\n")

    bundle = ContextSampler(repo).sample()
    bad = next(f for f in bundle.files if f.path == "bad.py")

    assert bad.size == 9
    assert "\ufffd" in bad.content
    assert bundle.total_bytes == 9 + len("ok = 1\n")


def test_vanished_candidate_raises(make_repo, monkeypatch):
    repo = make_repo({"a.py": "a = 1\n"})
    sampler = ContextSampler(repo)
    monkeypatch.setattr(sampler, "discover", lambda: ["a.py", "gone.py"])

    with pytest.raises(FileNotFoundError):
        sampler.sample()


def test_file_removed_after_selection_raises(make_repo, monkeypatch):
    repo = make_repo({"a.py": "a = 1\n"})
    sampler = ContextSampler(repo)
    real_select = sampler.select

    def select_then_delete(candidates):
        picked = real_select(candidates)
        (repo / "a.py").unlink()
        return picked

    monkeypatch.setattr(sampler, "select", select_then_delete)

    with pytest.raises(OSError):
        sampler.sample()


def test_negative_limits_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        ContextSampler(tmp_path, max_files=-1)
