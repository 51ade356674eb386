"""GitHub gateway module: authenticated REST calls normalized to (ok, status, data).

This module provides a small async gateway focused on the operations the
uploader needs: checking and creating repositories, looking up the blob
SHA of an existing path (Contents API) and writing file contents. Non-2xx
responses are returned, not raised; only transport failures and malformed
JSON bodies raise `ExternalServiceError`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from config import GITHUB_API_URL, HTTP_TIMEOUT, HTTP_VERIFY, USER_AGENT, timeout_or_none
from core.errors import ConfigurationError, ExternalServiceError
from core.models import GatewayResponse, RemoteFileRef

from .refs import contents_endpoint, fetch_content_ref

logger = logging.getLogger(__name__)


class RepositoryGateway:
    """Async GitHub REST gateway bound to a single token.

    Purpose:
      - request(endpoint, method='GET', ...) -> GatewayResponse
      - repository_exists(owner, repo) -> bool
      - create_repository(name, private=True) -> GatewayResponse
      - get_content_ref(owner, repo, path, branch) -> RemoteFileRef
      - put_content(owner, repo, path, payload) -> GatewayResponse

    Key behavior:
      - Every request carries the bearer token plus the Accept / User-Agent
        pair GitHub requires.
      - No retries and, by default, no timeout.
    """

    JSON_ACCEPT = "application/vnd.github+json"

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API_URL,
        timeout: Optional[float] = timeout_or_none(HTTP_TIMEOUT),
        verify: bool = HTTP_VERIFY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        token_clean = (token or "").strip()
        if not token_clean:
            raise ConfigurationError("Missing GitHub token")

        self._base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self._timeout = timeout
        self._verify = bool(verify)
        self._transport = transport
        self._headers = self._build_headers(token_clean)

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> GatewayResponse:
        """Issue one request and normalize the response; never raises for HTTP status."""
        method_clean = method.upper()
        logger.debug("Request: %s %s", method_clean, endpoint)

        try:
            async with self._create_client(custom_headers=headers) as client:
                resp = await client.request(
                    method_clean,
                    endpoint,
                    params=dict(params or {}),
                    json=body,
                )
        except httpx.HTTPError as e:
            raise self._external(f"{method_clean} {endpoint}", e) from e

        logger.debug("Response: %s %s (status=%d)", method_clean, endpoint, resp.status_code)
        return GatewayResponse(
            ok=resp.is_success,
            status=resp.status_code,
            data=self._parse_json(resp, context=f"{method_clean} {endpoint}"),
        )

    async def repository_exists(self, owner: str, repo: str) -> bool:
        resp = await self.request(f"/repos/{owner}/{repo}")
        return resp.ok

    async def create_repository(self, name: str, *, private: bool = True, auto_init: bool = True) -> GatewayResponse:
        # auto_init gives the new repository an initial commit and default branch
        logger.info("Creating repository %s (private=%s)", name, private)
        return await self.request(
            "/user/repos",
            method="POST",
            body={"name": name, "private": bool(private), "auto_init": bool(auto_init)},
        )

    async def get_content_ref(self, owner: str, repo: str, path: str, branch: str) -> RemoteFileRef:
        return await fetch_content_ref(self.request, owner=owner, repo=repo, path=path, branch=branch)

    async def put_content(self, owner: str, repo: str, path: str, payload: Mapping[str, Any]) -> GatewayResponse:
        return await self.request(contents_endpoint(owner, repo, path), method="PUT", body=dict(payload))

    # --- HTTP helpers ---

    def _build_headers(self, token: str) -> dict[str, str]:
        return {
            "Accept": self.JSON_ACCEPT,
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {token}",
        }

    def _create_client(self, custom_headers: Optional[Mapping[str, str]] = None) -> httpx.AsyncClient:
        headers = {**self._headers, **dict(custom_headers or {})}
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            verify=self._verify,
            transport=self._transport,
        )

    def _external(self, context: str, err: BaseException) -> ExternalServiceError:
        return ExternalServiceError(f"GitHub request failed ({context}): {err}")

    def _parse_json(self, resp: httpx.Response, *, context: str) -> Any:
        if not resp.content:
            return {}
        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise self._external(context, e) from e
