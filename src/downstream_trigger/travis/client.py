"""Travis CI v3 API client.

Keeps HTTP out of the trigger flow. `requests.Session` is not documented as
thread-safe, so each thread that sends requests gets its own session; tests
inject a factory that hands out a prepared one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import requests

from downstream_trigger import __version__
from downstream_trigger.errors import MissingCredentialError, TriggerRequestError
from downstream_trigger.models import TriggeredRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.travis-ci.org"
API_VERSION = "3"

_ERROR_BODY_LIMIT = 500


class TravisClient:
    """Small wrapper around the Travis CI REST API for build requests."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        if not token or not token.strip():
            raise MissingCredentialError("TRAVIS_API_TOKEN is required")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Travis-API-Version": API_VERSION,
            "Authorization": f"token {token.strip()}",
            "User-Agent": f"downstream-trigger/{__version__}",
        }

    def _session(self) -> requests.Session:
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update(self._headers)
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def repo_url(self, *, owner: str, repo: str, path: str = "") -> str:
        """Return the URL of a repository resource.

        Travis addresses repositories by slug with the slash percent-encoded.
        """

        slug = quote(f"{owner.strip('/')}/{repo.strip('/')}", safe="")
        path = path.strip("/")
        if not path:
            return f"{self._base_url}/repo/{slug}"
        return f"{self._base_url}/repo/{slug}/{path}"

    def create_request(
        self,
        *,
        owner: str,
        repo: str,
        payload: dict[str, Any],
    ) -> TriggeredRequest:
        """Ask Travis CI to build a repository.

        Raises:
            TriggerRequestError: the request could not be sent or was rejected.
        """

        slug = f"{owner}/{repo}"
        url = self.repo_url(owner=owner, repo=repo, path="requests")
        branch = str(payload.get("request", {}).get("branch", ""))

        try:
            resp = self._session().post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TriggerRequestError(f"Request to {slug} failed: {e}", slug=slug) from e

        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            body = (resp.text or "").strip()[:_ERROR_BODY_LIMIT]
            raise TriggerRequestError(
                f"Travis CI rejected the request for {slug} (HTTP {resp.status_code}): {body}",
                slug=slug,
                status_code=resp.status_code,
            ) from e

        return _parse_triggered_request(resp, slug=slug, branch=branch)

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
        logger.debug("Travis CI sessions closed", extra={"count": len(sessions)})


def _parse_triggered_request(
    resp: requests.Response, *, slug: str, branch: str
) -> TriggeredRequest:
    # Travis answers 202 with {"@type": "pending", "request": {...}, "remaining_requests": n}.
    try:
        data: Any = resp.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        return TriggeredRequest(repository=slug, branch=branch)

    request = data.get("request")
    request_id = request.get("id") if isinstance(request, dict) else None
    remaining = data.get("remaining_requests")

    return TriggeredRequest(
        repository=slug,
        branch=branch,
        request_id=request_id if isinstance(request_id, int) else None,
        remaining_requests=remaining if isinstance(remaining, int) else None,
    )
