"""Relay route that creates a repository for the authenticated user."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from clients.github import normalize_visibility
from core.errors import ExternalServiceError, ValidationError
from routes.common import CreateRepoRequest, GatewayFactory, json_error

logger = logging.getLogger(__name__)


def register(app: FastAPI, *, gateway_factory: GatewayFactory) -> None:
    @app.post("/api/create-repo")
    async def create_repo(req: CreateRepoRequest):
        """Create repoName (auto-initialized) and relay GitHub's payload.

        Returns {success: true, data} or {success: false, error}.
        """
        token = req.token.strip()
        name = req.repoName.strip()
        missing = [field for field, value in (("token", token), ("repo", name)) if not value]
        if missing:
            return json_error(400, success=False, error=f"Missing required configuration ({', '.join(missing)})")

        try:
            visibility = normalize_visibility(req.visibility)
        except ValidationError as e:
            return json_error(400, success=False, error=str(e))

        gateway = gateway_factory(token)
        try:
            resp = await gateway.create_repository(name, private=visibility == "private")
        except ExternalServiceError as e:
            logger.error("Repository creation failed for %s: %s", name, e)
            return json_error(500, success=False, error=str(e))

        if resp.ok:
            return {"success": True, "data": resp.data}
        return {"success": False, "error": resp.message or "Failed to create repository"}
