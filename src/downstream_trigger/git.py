"""Read-only git queries for the commit being announced."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from downstream_trigger.errors import CommitResolutionError
from downstream_trigger.models import CommitIdentity

logger = logging.getLogger(__name__)


class GitRepository:
    """Runs git commands inside a working copy."""

    def __init__(self, path: Path = Path("."), *, git_binary: str = "git") -> None:
        self._path = path
        self._git_binary = git_binary

    def run(self, *args: str) -> str:
        """Run `git <args>` and return its stripped stdout.

        Raises:
            CommitResolutionError: git is missing or exits non-zero.
        """

        command = (self._git_binary, *args)
        logger.debug("Running git", extra={"command": " ".join(command), "cwd": str(self._path)})
        try:
            result = subprocess.run(
                command,
                cwd=self._path,
                check=False,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CommitResolutionError(
                f"Could not run {' '.join(command)}", command=command, stderr=str(e)
            ) from e

        if result.returncode != 0:
            raise CommitResolutionError(
                f"{' '.join(command)} exited with status {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result.stdout.strip()

    def head_commit_hash(self) -> str:
        commit_hash = self.run("rev-parse", "HEAD")
        if not commit_hash:
            raise CommitResolutionError(
                "git rev-parse HEAD returned an empty hash",
                command=(self._git_binary, "rev-parse", "HEAD"),
            )
        return commit_hash

    def commit_subject(self, commit_hash: str) -> str:
        return self.run("show", "-s", "--format=%s", commit_hash)

    def resolve_commit_identity(self) -> CommitIdentity:
        """Return the hash and subject line of HEAD.

        The subject query is checked as strictly as the hash query: a failure
        there is a `CommitResolutionError` too.
        """

        commit_hash = self.head_commit_hash()
        subject = self.commit_subject(commit_hash)
        logger.info("Resolved commit", extra={"commit": commit_hash, "subject": subject})
        return CommitIdentity(hash=commit_hash, subject=subject)
