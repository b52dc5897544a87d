"""Downstream trigger targets.

The built-in table lists the projects built against every onyx-http commit.
A JSON file can replace it, either as a bare list or wrapped in an object:

    [{"owner": "vladfaust", "repo": "crystalworld", "branch": "master"}]
    {"targets": [...]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from downstream_trigger.errors import TargetConfigError
from downstream_trigger.models import TriggerTarget

logger = logging.getLogger(__name__)

DEFAULT_TARGETS: tuple[TriggerTarget, ...] = (
    TriggerTarget(owner="vladfaust", repo="crystalworld", branch="master"),
    TriggerTarget(owner="vladfaust", repo="onyx-40-loc-distributed-chat", branch="master"),
    TriggerTarget(owner="vladfaust", repo="onyx-todo-json-api", branch="part-1"),
    TriggerTarget(owner="vladfaust", repo="onyx-todo-json-api", branch="part-2"),
)

_TARGET_LIST = TypeAdapter(list[TriggerTarget])


def load_targets(path: Path) -> list[TriggerTarget]:
    """Load and validate a target table from a JSON file."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise TargetConfigError(f"Targets file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise TargetConfigError(f"Targets file {path} could not be read: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("targets")

    if not isinstance(raw, list):
        raise TargetConfigError(f"Targets file {path} must contain a list of targets")

    try:
        targets = _TARGET_LIST.validate_python(raw)
    except ValidationError as e:
        raise TargetConfigError(f"Targets file {path} is invalid: {e}") from e

    if not targets:
        raise TargetConfigError(f"Targets file {path} lists no targets")

    logger.debug("Loaded targets", extra={"path": str(path), "count": len(targets)})
    return targets


def resolve_targets(path: Path | None) -> list[TriggerTarget]:
    """Return the targets from `path`, or the built-in table when it is None."""

    if path is None:
        return list(DEFAULT_TARGETS)
    return load_targets(path)
