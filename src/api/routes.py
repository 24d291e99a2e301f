from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
import logging
import time

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.limits import BodySizeLimitMiddleware
from src.auth.security import client_address, require_api_token
from src.core.config import (
    CORS_ALLOW_ORIGINS,
    CORS_ALLOW_CREDENTIALS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_HEADERS,
    get_api_token,
    get_port,
    masked_token,
)
from src.core.errors import PlayerNotFoundError
from src.core.metrics import UNMATCHED_ROUTE, metrics
from src.core.stats import derive_darkrp_stats
from src.core.store import StatusStore
from src.core.time_utils import parse_utc, utc_now

logger = logging.getLogger(__name__)

ENDPOINTS = [
    ("POST", "/gmod/update", "game server pushes a snapshot"),
    ("GET", "/gmod/status", "server status without players"),
    ("GET", "/gmod/players", "full player list"),
    ("GET", "/gmod/player/{id}", "single player by SteamID/SteamID64"),
    ("GET", "/gmod/darkrp/stats", "DarkRP economy statistics"),
]


class UpdateAck(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    hasData: bool
    lastUpdate: Optional[str] = None
    ageSeconds: Optional[float] = None
    uptime_s: float


def get_status_store(request: Request) -> StatusStore:
    return request.app.state.status_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the startup banner; the relay has nothing else to start or stop."""
    logger.info(
        "startup_config",
        extra={"port": get_port(), "token": masked_token(get_api_token())},
    )
    for method, path, description in ENDPOINTS:
        logger.info("endpoint %-4s %-22s %s", method, path, description)
    yield
    logger.info("shutdown")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("invalid_body", extra={"path": request.url.path, "errors": len(exc.errors())})
    return JSONResponse(status_code=400, content={"error": "invalid request body"})


def create_app(store: Optional[StatusStore] = None) -> FastAPI:
    """Build the relay application around its own status store."""
    app = FastAPI(title="GMod Status Relay", version="2.2.0", lifespan=lifespan)
    app.state.status_store = store if store is not None else StatusStore()

    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=CORS_ALLOW_CREDENTIALS,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration = time.perf_counter() - start
            route_obj = request.scope.get("route")
            route_path = getattr(route_obj, "path", UNMATCHED_ROUTE)
            status = getattr(response, "status_code", 500)
            metrics.record_http(request.method, route_path, status, duration)

    @app.get("/")
    async def root():
        """Simple banner indicating server readiness."""
        return {"message": "GMod Status Relay", "status": "running"}

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz(store: StatusStore = Depends(get_status_store)):
        last_update = store.last_update()
        stamped = parse_utc(last_update)
        return HealthResponse(
            status="ok",
            hasData=last_update is not None,
            lastUpdate=last_update,
            ageSeconds=max(0.0, (utc_now() - stamped).total_seconds()) if stamped is not None else None,
            uptime_s=metrics.uptime_s(),
        )

    @app.get("/metrics")
    async def get_metrics():
        return metrics.snapshot()

    @app.post(
        "/gmod/update",
        response_model=UpdateAck,
        dependencies=[Depends(require_api_token)],
        responses={403: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
    )
    async def update_status(
        request: Request,
        payload: Dict[str, Any] = Body(...),
        store: StatusStore = Depends(get_status_store),
    ):
        """Replace the stored snapshot with the pushed payload."""
        store.replace(payload, client_address(request))
        return UpdateAck(success=True)

    @app.get("/gmod/status")
    async def get_status(store: StatusStore = Depends(get_status_store)) -> Dict[str, Any]:
        """Current snapshot without the player list."""
        return store.read_without_players()

    @app.get("/gmod/players")
    async def get_players(store: StatusStore = Depends(get_status_store)) -> List[Any]:
        return store.read_players()

    @app.get("/gmod/player/{player_id}", responses={404: {"model": ErrorResponse}})
    async def get_player(player_id: str, store: StatusStore = Depends(get_status_store)):
        """Single player by SteamID (case-insensitive) or SteamID64 (exact)."""
        try:
            return store.find_player(player_id)
        except PlayerNotFoundError:
            raise HTTPException(status_code=404, detail="player not found")

    @app.get("/gmod/darkrp/stats")
    async def get_darkrp_stats(store: StatusStore = Depends(get_status_store)):
        """DarkRP stats, sender-supplied when present, otherwise computed live."""
        return derive_darkrp_stats(store.read_full())

    return app


app = create_app()

__all__ = ["app", "create_app", "get_status_store"]
