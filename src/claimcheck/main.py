# src/claimcheck/main.py
"""Main entry point for the Claimcheck application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from claimcheck.api.v1 import (
    claims_router,
    evidence_router,
    moderation_router,
    replies_router,
    votes_router,
)
from claimcheck.core.errors import ClaimcheckError
from claimcheck.core.settings import settings
from claimcheck.services.seo import get_seo_regenerator

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Community claim verification: evidence, perspectives and votes",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(claims_router, prefix="/api/v1")
app.include_router(evidence_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")


@app.exception_handler(ClaimcheckError)
async def handle_claimcheck_error(request: Request, exc: ClaimcheckError) -> JSONResponse:
    """Translate domain errors into JSON responses."""
    if exc.status_code >= 500:
        logger.error("Unhandled failure on %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("shutdown")
async def _shutdown_seo_regenerator() -> None:
    regenerator = get_seo_regenerator()
    await regenerator.drain()
    await regenerator.client.close()


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning basic API information."""
    return {"message": f"{settings.app_name} API", "version": settings.app_version}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("claimcheck.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
