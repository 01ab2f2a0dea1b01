import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, Request, status

from app.ai.factory import get_model_clients
from app.analytics.db import SqliteTelemetrySink
from app.career_path.errors import ValidationError
from app.career_path.orchestrator import CareerPathGenerator
from app.career_path.telemetry import TelemetryEmitter
from app.core.career_path_store import SqliteCareerPathStore, list_career_paths
from app.core.rate_limit import rate_limit
from app.core.security import check_api_key
from app.schemas.career_path import CareerPathResponse, StoredCareerPath

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_generator() -> CareerPathGenerator:
    try:
        clients = get_model_clients()
    except (RuntimeError, ValueError) as exc:
        logger.warning("career_path_model_client_unavailable: %s", exc)
        clients = []
    return CareerPathGenerator(
        clients,
        telemetry=TelemetryEmitter(SqliteTelemetrySink()),
        store=SqliteCareerPathStore(),
    )


def _owner_id(x_user_id: str | None) -> str:
    owner = (x_user_id or "").strip()
    return owner or "anonymous"


@router.post("/career-path/generate", response_model=CareerPathResponse, response_model_by_alias=True)
@rate_limit()
def generate_career_path(
    request: Request,
    payload: Any = Body(...),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    generator: CareerPathGenerator = Depends(get_generator),
):
    _ = request
    check_api_key(x_api_key)
    try:
        return generator.generate(payload, user_id=_owner_id(x_user_id))
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(exc), "details": exc.errors},
        ) from exc


@router.get("/career-path", response_model=list[StoredCareerPath], response_model_by_alias=True)
def list_generated_paths(
    limit: int = Query(default=20, ge=1, le=100),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
):
    check_api_key(x_api_key)
    return list_career_paths(_owner_id(x_user_id), limit=limit)
