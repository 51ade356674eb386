"""Shared wiring for relay routes: request bodies and the gateway factory type."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel
from fastapi.responses import JSONResponse

from clients.github import RepositoryGateway

# Builds a gateway for the token carried by one request
GatewayFactory = Callable[[str], RepositoryGateway]


def default_gateway_factory(token: str) -> RepositoryGateway:
    return RepositoryGateway(token)


class CheckRepoRequest(BaseModel):
    token: str = ""
    username: str = ""
    repoName: str = ""


class CreateRepoRequest(BaseModel):
    token: str = ""
    repoName: str = ""
    visibility: str = "private"


def json_error(status_code: int, **content: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content)
