"""Test configuration and fixtures."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from downstream_trigger.git import GitRepository
from downstream_trigger.models import CommitIdentity, TriggeredRequest, TriggerTarget
from downstream_trigger.travis.client import TravisClient

_SETTINGS_ENV_VARS = (
    "TRAVIS_API_TOKEN",
    "TRAVIS_API_URL",
    "TRIGGER_TARGETS_FILE",
    "TRIGGER_REPO_DIR",
    "TRIGGER_MESSAGE_PREFIX",
    "TRIGGER_COMMIT_ENV_VAR",
    "TRIGGER_MAX_WORKERS",
    "TRIGGER_REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every settings variable so tests only see what they set."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def identity() -> CommitIdentity:
    """Provide a commit identity."""
    return CommitIdentity(hash="abc1234567890def", subject="Fix bug")


@pytest.fixture
def target() -> TriggerTarget:
    """Provide a single trigger target."""
    return TriggerTarget(owner="octo-org", repo="octo-repo", branch="main")


@pytest.fixture
def mock_git(identity: CommitIdentity) -> Mock:
    """Provide a git repository that always resolves to `identity`."""
    git = Mock(spec=GitRepository)
    git.resolve_commit_identity.return_value = identity
    return git


@pytest.fixture
def mock_travis() -> Mock:
    """Provide a Travis client that accepts every request."""
    travis = Mock(spec=TravisClient)

    def _accept(*, owner: str, repo: str, payload: dict[str, object]) -> TriggeredRequest:
        branch = payload["request"]["branch"]  # type: ignore[index]
        return TriggeredRequest(repository=f"{owner}/{repo}", branch=branch, request_id=1)

    travis.create_request.side_effect = _accept
    return travis
