from __future__ import annotations
from typing import Awaitable, Callable
from urllib.parse import quote
from core.errors import ExternalServiceError, RemoteLookupError
from core.models import GatewayResponse, RemoteFileRef

RequestFn = Callable[..., Awaitable[GatewayResponse]]

def contents_endpoint(owner: str, repo: str, path: str) -> str:
    # Contents API keys files by owner/repo/path; segments are percent-encoded
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contents/{quote(path, safe='/')}"

async def fetch_content_ref(
    request: RequestFn,
    *,
    owner: str,
    repo: str,
    path: str,
    branch: str,
) -> RemoteFileRef:
    # Only a 404 means "absent"; anything else that is not ok is a real lookup failure
    try:
        resp = await request(contents_endpoint(owner, repo, path), params={"ref": branch})
    except ExternalServiceError as e:
        raise RemoteLookupError(f"lookup failed ({path}): {e}") from e

    if resp.status == 404:
        return RemoteFileRef(path=path)
    if not resp.ok:
        detail = resp.message or "unexpected response"
        raise RemoteLookupError(f"lookup failed ({path}): HTTP {resp.status}: {detail}", status=resp.status)

    # A directory listing comes back as a JSON array and carries no blob sha
    data = resp.data
    sha = data.get("sha") if isinstance(data, dict) else None
    return RemoteFileRef(path=path, sha=str(sha) if sha else None)
