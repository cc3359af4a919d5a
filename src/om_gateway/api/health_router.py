"""Health probes (no auth).

GET /health    : liveness, always 200 while the process is up
GET /health/db : readiness, SELECT 1 round-trip; 503 if the database is unreachable
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.om_common.datetime_utils import isoformat_z, utc_now

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": isoformat_z(utc_now())}


@router.get("/db")
async def health_db(request: Request) -> JSONResponse:
    connected = await request.app.state.indexer_repository.ping()
    if connected:
        return JSONResponse(
            status_code=200,
            content={
                "status": "ok",
                "database": "connected",
                "timestamp": isoformat_z(utc_now()),
            },
        )
    return JSONResponse(
        status_code=503,
        content={
            "status": "error",
            "database": "disconnected",
            "timestamp": isoformat_z(utc_now()),
        },
    )
