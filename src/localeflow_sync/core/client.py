"""HTTP client for the LocaleFlow translation store.

``RemoteStore`` is the narrow interface the sync engine depends on;
``LocaleflowClient`` implements it over ``requests``.  Every transport
failure and non-2xx response is translated into ``RemoteError`` here so
callers never see ``requests`` exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError

from ..config import ResolvedOptions
from ..errors import RemoteError

logger = logging.getLogger(__name__)


class RemoteTranslations(BaseModel):
    """Response of ``GET /api/branches/{id}/translations``."""

    translations: dict[str, dict[str, str]] = {}
    languages: list[str] = []

    model_config = {"frozen": True}


class RemoteStore(Protocol):
    """Protocol for the remote translation store."""

    def resolve_branch(self, project: str, space: str, branch: str) -> str:
        """Return the id of *branch* in *space* of *project*.

        Raises:
            RemoteError: If the space or branch does not exist.
        """
        ...  # pragma: no cover

    def fetch_translations(self, branch_id: str) -> RemoteTranslations:
        """Fetch every translation of a branch."""
        ...  # pragma: no cover

    def upload_translations(
        self, branch_id: str, translations: dict[str, dict[str, str]]
    ) -> None:
        """Create or update (upsert) the given translations."""
        ...  # pragma: no cover


class LocaleflowClient:
    """``RemoteStore`` backed by the LocaleFlow HTTP API.

    Args:
        api_url: Base URL of the API, e.g. ``https://api.localeflow.dev``.
        api_key: API key sent in the ``X-API-Key`` header.
        timeout: Read timeout in seconds.
    """

    CONNECT_TIMEOUT = 10

    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        timeout: float = 60,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session: requests.Session | None = None

    @classmethod
    def from_options(cls, options: ResolvedOptions) -> LocaleflowClient:
        return cls(
            api_url=options.api_url,
            api_key=options.api_key,
            timeout=options.timeout,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {"Accept": "application/json", "User-Agent": "localeflow-cli"}
        )
        if self.api_key:
            session.headers["X-API-Key"] = self.api_key
        return session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        resource: str,
        json_body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path below the API URL.
            resource: Human-readable name used in error messages.
            json_body: Optional JSON payload.

        Raises:
            RemoteError: On network failure, non-2xx status or a body that
                is not JSON.
        """
        url = f"{self.api_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                json=json_body,
                timeout=(self.CONNECT_TIMEOUT, self.timeout),
            )
        except requests.RequestException as exc:
            raise RemoteError(
                f"Request for {resource} failed: {exc}", resource=resource
            ) from exc

        if not response.ok:
            detail = _error_detail(response)
            raise RemoteError(
                f"Request for {resource} failed with HTTP "
                f"{response.status_code}{detail}",
                resource=resource,
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(
                f"Response for {resource} is not valid JSON",
                resource=resource,
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------
    # RemoteStore
    # ------------------------------------------------------------------

    def resolve_branch(self, project: str, space: str, branch: str) -> str:
        data = self._request(
            "GET",
            f"/api/projects/{quote(project, safe='')}/spaces",
            resource=f"project '{project}'",
        )
        spaces = (data or {}).get("spaces", [])
        target_space = next(
            (s for s in spaces if s.get("slug") == space), None
        )
        if target_space is None:
            raise RemoteError(
                f"Space '{space}' not found in project '{project}'",
                resource=f"space '{space}'",
            )

        details = self._request(
            "GET",
            f"/api/spaces/{quote(str(target_space['id']), safe='')}",
            resource=f"space '{space}'",
        )
        branches = (details or {}).get("branches", [])
        target_branch = next(
            (b for b in branches if b.get("name") == branch), None
        )
        if target_branch is None:
            raise RemoteError(
                f"Branch '{branch}' not found in space '{space}'",
                resource=f"branch '{branch}'",
            )
        logger.debug(
            "Resolved %s/%s/%s to branch id %s",
            project,
            space,
            branch,
            target_branch["id"],
        )
        return str(target_branch["id"])

    def fetch_translations(self, branch_id: str) -> RemoteTranslations:
        resource = f"translations of branch {branch_id}"
        data = self._request(
            "GET",
            f"/api/branches/{quote(branch_id, safe='')}/translations",
            resource=resource,
        )
        try:
            return RemoteTranslations.model_validate(data or {})
        except ValidationError as exc:
            raise RemoteError(
                f"Unexpected response for {resource}: {exc}",
                resource=resource,
            ) from exc

    def upload_translations(
        self, branch_id: str, translations: dict[str, dict[str, str]]
    ) -> None:
        self._request(
            "PUT",
            f"/api/branches/{quote(branch_id, safe='')}/translations",
            resource=f"translations of branch {branch_id}",
            json_body={"translations": translations},
        )


def _error_detail(response: requests.Response) -> str:
    """Extract a server error message, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return f": {message}"
    return ""
