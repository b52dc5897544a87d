"""Unit tests for trigger target loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from downstream_trigger.errors import TargetConfigError
from downstream_trigger.models import TriggerTarget
from downstream_trigger.targets import DEFAULT_TARGETS, load_targets, resolve_targets


def test_default_table_lists_the_four_downstream_builds() -> None:
    assert [(t.owner, t.repo, t.branch) for t in DEFAULT_TARGETS] == [
        ("vladfaust", "crystalworld", "master"),
        ("vladfaust", "onyx-40-loc-distributed-chat", "master"),
        ("vladfaust", "onyx-todo-json-api", "part-1"),
        ("vladfaust", "onyx-todo-json-api", "part-2"),
    ]


def test_resolve_targets_without_file_uses_default_table() -> None:
    assert resolve_targets(None) == list(DEFAULT_TARGETS)


def test_load_targets_from_list(tmp_path: Path) -> None:
    path = tmp_path / "targets.json"
    path.write_text(
        json.dumps([{"owner": "octo-org", "repo": "octo-repo", "branch": "main"}]),
        encoding="utf-8",
    )

    assert load_targets(path) == [TriggerTarget(owner="octo-org", repo="octo-repo", branch="main")]


def test_load_targets_from_wrapped_object(tmp_path: Path) -> None:
    path = tmp_path / "targets.json"
    path.write_text(
        json.dumps(
            {
                "targets": [
                    {"owner": "a", "repo": "b", "branch": "c"},
                    {"owner": "a", "repo": "b", "branch": "d"},
                ]
            }
        ),
        encoding="utf-8",
    )

    assert [t.branch for t in resolve_targets(path)] == ["c", "d"]


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"owner": "a", "repo": "b", "branch": "c"}),
        json.dumps([]),
        json.dumps([{"owner": "a", "repo": "b"}]),
        json.dumps([{"owner": "a", "repo": "b", "branch": ""}]),
        json.dumps([{"owner": "a", "repo": "b", "branch": "c", "ref": "d"}]),
    ],
)
def test_invalid_targets_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "targets.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(TargetConfigError):
        load_targets(path)


def test_missing_targets_file_raises(tmp_path: Path) -> None:
    with pytest.raises(TargetConfigError, match="not found"):
        load_targets(tmp_path / "missing.json")
