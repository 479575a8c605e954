"""FastAPI application for the PulseMind trust core.

Provides REST API endpoints wrapping the PulseMind Python package for:
- Accounts and bearer sessions
- Readiness scoring and engagement tracking (the trust ladder)
- Community events, recommendations and chat behind the toxicity gate
- Manual reports and the moderation queue
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the pulsemind package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pulsemind import __version__
from web.backend.app.routers import auth, community, moderation, trust

app = FastAPI(
    title="PulseMind API",
    description=(
        "REST API for the PulseMind trust core: progressive trust ladder, "
        "engagement tracking, and toxicity-gated community content."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(trust.router)
app.include_router(community.router)
app.include_router(moderation.router)


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "PulseMind API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
