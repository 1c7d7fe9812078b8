"""
FastAPI service exposing the commune database.

Endpoints:
  GET /communes         - Multi-criteria search (nom, codePostal, code, lat+lon)
  GET /communes/{code}  - Single commune by code
  GET /health           - Dataset and index sizes
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request

from communes_geo.config import get_settings
from communes_geo.database import CommuneDatabase, get_indexed_db
from communes_geo.errors import CriteriaError
from communes_geo.models import HealthResponse

logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the indexes once unless a database was injected."""
    if getattr(app.state, "db", None) is None:
        logger.info("Building commune database...")
        app.state.db = get_indexed_db()
    yield
    logger.info("API server shut down.")


# ── App ───────────────────────────────────────────────────────────────

def create_app(db: CommuneDatabase | None = None) -> FastAPI:
    app = FastAPI(
        title="Communes Geo API",
        description="Look up communes by name, postal code, code or coordinates",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.db = db
    app.include_router(_router)
    return app


def _db(request: Request) -> CommuneDatabase:
    return request.app.state.db


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

_router = APIRouter()


@_router.get("/communes")
def search_communes(
    request: Request,
    nom: Optional[str] = Query(None, min_length=1, max_length=200, description="Commune name (fuzzy)"),
    code_postal: Optional[str] = Query(None, alias="codePostal", description="Postal code"),
    code: Optional[str] = Query(None, description="Commune code"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
) -> list[dict[str, Any]]:
    """
    Communes matching every supplied criterion.

    lat and lon must be given together. Name matches carry a `_score`.
    """
    params = {"nom": nom, "codePostal": code_postal, "code": code, "lat": lat, "lon": lon}
    criteria = {k: v for k, v in params.items() if v is not None}
    try:
        communes = _db(request).search(criteria)
    except CriteriaError as e:
        raise HTTPException(400, str(e))

    max_results = get_settings().api.max_results
    if max_results:
        communes = communes[:max_results]
    return [c.to_dict() for c in communes]


@_router.get("/communes/{code}")
def get_commune(request: Request, code: str) -> dict[str, Any]:
    found = _db(request).query_by_code(code)
    if not found:
        raise HTTPException(404, "Commune not found")
    return found[0].to_dict()


@_router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    return HealthResponse(status="ok", **_db(request).stats())


app = create_app()
