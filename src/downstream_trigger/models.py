"""Value objects shared by the trigger flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MESSAGE_PREFIX = "onyx-http"
DEFAULT_COMMIT_ENV_VAR = "ONYX_HTTP_COMMIT"
SHORT_HASH_LENGTH = 7


@dataclass(frozen=True, slots=True)
class CommitIdentity:
    """The commit being announced downstream."""

    hash: str
    subject: str

    @property
    def short_hash(self) -> str:
        return self.hash[:SHORT_HASH_LENGTH]


class TriggerTarget(BaseModel):
    """A downstream (owner, repository, branch) to build."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    branch: str = Field(min_length=1)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.slug}@{self.branch}"


class BuildRequest(BaseModel):
    """One build request, built per target and discarded after the call."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str
    commit_hash: str
    commit_subject: str

    @classmethod
    def for_target(cls, target: TriggerTarget, identity: CommitIdentity) -> BuildRequest:
        return cls(
            owner=target.owner,
            repo=target.repo,
            branch=target.branch,
            commit_hash=identity.hash,
            commit_subject=identity.subject,
        )

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def message(self, prefix: str = DEFAULT_MESSAGE_PREFIX) -> str:
        return f"{prefix}@{self.commit_hash[:SHORT_HASH_LENGTH]} {self.commit_subject}"

    def to_payload(
        self,
        *,
        prefix: str = DEFAULT_MESSAGE_PREFIX,
        commit_env_var: str = DEFAULT_COMMIT_ENV_VAR,
    ) -> dict[str, Any]:
        """Return the JSON body for Travis CI's create-request endpoint.

        `config.env` pins the downstream build to this exact commit.
        """

        return {
            "request": {
                "message": self.message(prefix),
                "branch": self.branch,
                "config": {"env": f"{commit_env_var}={self.commit_hash}"},
            }
        }


@dataclass(frozen=True, slots=True)
class TriggeredRequest:
    """Minimal request metadata returned by Travis CI."""

    repository: str
    branch: str
    request_id: int | None = None
    remaining_requests: int | None = None


@dataclass(frozen=True, slots=True)
class TriggerOutcome:
    """What happened to a single target in a run."""

    target: TriggerTarget
    ok: bool
    triggered: TriggeredRequest | None = None
    error: str | None = None
    status_code: int | None = None


@dataclass(frozen=True, slots=True)
class TriggerReport:
    """Every target's outcome for one run, in table order."""

    identity: CommitIdentity
    outcomes: list[TriggerOutcome]
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def failures(self) -> list[TriggerOutcome]:
        return [o for o in self.outcomes if not o.ok]
