"""Core protocol and interface definitions.

Defines the ContentGateway protocol the reconciler depends on, so the
GitHub gateway and test doubles expose a uniform API.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from core.models import GatewayResponse, RemoteFileRef


class ContentGateway(Protocol):
    """Contract for anything that can look up and write repository contents."""
    async def get_content_ref(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
    ) -> RemoteFileRef:
        ...

    async def put_content(
        self,
        owner: str,
        repo: str,
        path: str,
        payload: Mapping[str, Any],
    ) -> GatewayResponse:
        ...
