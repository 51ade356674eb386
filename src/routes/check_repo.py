"""Relay route that reports whether a repository exists.

Registers `POST /api/check-repo`, used by the browser before the first
upload of a batch.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from clients.github import normalize_config
from core.errors import ExternalServiceError, ValidationError
from core.models import UploadConfig
from routes.common import CheckRepoRequest, GatewayFactory, json_error

logger = logging.getLogger(__name__)


def register(app: FastAPI, *, gateway_factory: GatewayFactory) -> None:
    @app.post("/api/check-repo")
    async def check_repo(req: CheckRepoRequest):
        """Return {exists} for owner/repoName as seen with the caller's token."""
        try:
            config = normalize_config(UploadConfig(token=req.token, owner=req.username, repo=req.repoName))
        except ValidationError as e:
            return json_error(400, exists=False, error=str(e))

        gateway = gateway_factory(config.token)
        try:
            exists = await gateway.repository_exists(config.owner, config.repo)
        except ExternalServiceError as e:
            logger.error("Repository check failed for %s: %s", config.full_name, e)
            return json_error(500, exists=False, error=str(e))

        logger.info("Repository %s exists=%s", config.full_name, exists)
        return {"exists": exists}
