"""Settings for the downstream build trigger.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The API token keeps the name Travis CI documents for it, `TRAVIS_API_TOKEN`.
It is not validated here: `TravisClient` rejects an empty token with
`MissingCredentialError`, so a dry run works without one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TriggerSettings(BaseSettings):
    """Settings for one trigger run.

    Environment variables:
    - TRAVIS_API_TOKEN
    - TRAVIS_API_URL            (optional)
    - TRIGGER_TARGETS_FILE      (optional)
    - TRIGGER_REPO_DIR          (optional)
    - TRIGGER_MESSAGE_PREFIX    (optional)
    - TRIGGER_COMMIT_ENV_VAR    (optional)
    - TRIGGER_MAX_WORKERS       (optional)
    - TRIGGER_REQUEST_TIMEOUT   (optional)
    - LOG_LEVEL                 (optional)
    - LOG_FORMAT                (optional)

    Notes:
        Tests can point at a different env file via
        `TriggerSettings(_env_file=path_to_env)`.
    """

    travis_api_token: str = Field(
        default="",
        validation_alias="TRAVIS_API_TOKEN",
        description="Travis CI API token sent as `Authorization: token ...`",
    )
    travis_api_url: str = Field(
        default="https://api.travis-ci.org",
        validation_alias="TRAVIS_API_URL",
        description="Travis CI API base URL (travis-ci.com for private repositories)",
    )

    targets_file: Path | None = Field(
        default=None,
        validation_alias="TRIGGER_TARGETS_FILE",
        description="JSON file listing downstream targets; the built-in table is used if unset",
    )
    repo_dir: Path = Field(
        default=Path("."),
        validation_alias="TRIGGER_REPO_DIR",
        description="Working copy whose HEAD commit is announced downstream",
    )

    message_prefix: str = Field(
        default="onyx-http",
        min_length=1,
        validation_alias="TRIGGER_MESSAGE_PREFIX",
        description="Prefix of the build message, rendered as '<prefix>@<short hash> <subject>'",
    )
    commit_env_var: str = Field(
        default="ONYX_HTTP_COMMIT",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        validation_alias="TRIGGER_COMMIT_ENV_VAR",
        description="Environment variable set to the full commit hash in downstream builds",
    )

    max_workers: int = Field(
        default=4,
        ge=1,
        validation_alias="TRIGGER_MAX_WORKERS",
        description="Number of trigger requests in flight at once",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        validation_alias="TRIGGER_REQUEST_TIMEOUT",
        description="Per-request HTTP timeout in seconds",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="JSON lines for CI log collectors, or plain text for local runs",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level
