from __future__ import annotations

from datetime import datetime, timezone

from fastapi import FastAPI


def register(app: FastAPI) -> None:
    @app.get("/health")
    async def health():
        """Liveness probe."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
