import logging

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request, WebSocket, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..canvas.validation import require_user_id
from ..config.config import AppConfig
from ..errors import ConflictError, CooldownError, PixelboardError, StorageError, ValidationError
from .bootstrap import Services
from .models import (
    CanvasConfigResponse,
    CooldownStatusResponse,
    PixelItem,
    PixelsListResponse,
    PlacePixelRequest,
    PlacePixelResponse,
    StatusResponse,
)

logger = logging.getLogger(__name__)


def status_for(error: PixelboardError) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, CooldownError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _build_pixels_router(services: Services) -> APIRouter:
    router = APIRouter()
    gate = services.gate
    tracker = services.tracker

    @router.get("/config", response_model=CanvasConfigResponse)
    async def canvas_config() -> CanvasConfigResponse:
        cfg = gate.config
        return CanvasConfigResponse(
            grid_width=cfg.grid_width,
            grid_height=cfg.grid_height,
            cooldown_minutes=cfg.cooldown_minutes,
        )

    @router.get("/pixels", response_model=PixelsListResponse)
    def list_pixels() -> PixelsListResponse:
        items = [PixelItem.from_pixel(p) for p in gate.list_pixels()]
        return PixelsListResponse(data=items, total=len(items))

    @router.get("/pixels/cooldown", response_model=CooldownStatusResponse)
    def cooldown_status(
        user_id: str | None = Query(default=None, alias="userId"),
        user_id_snake: str | None = Query(default=None, alias="user_id"),
    ) -> CooldownStatusResponse:
        uid = require_user_id(user_id or user_id_snake)
        eligibility = tracker.check_eligibility(uid)
        return CooldownStatusResponse(
            can_place=eligibility.eligible,
            cooldown_end=eligibility.cooldown_ends_at,
            remaining_seconds=eligibility.remaining_seconds,
            remaining_minutes=eligibility.remaining_minutes,
        )

    @router.get("/pixels/{x}/{y}", response_model=PixelItem)
    def get_pixel(x: int, y: int) -> PixelItem:
        pixel = gate.pixel_at(x, y)
        if pixel is None:
            raise HTTPException(status_code=404, detail="No pixel at this position")
        return PixelItem.from_pixel(pixel)

    @router.post("/pixels/place", response_model=PlacePixelResponse)
    async def place_pixel(request: Request) -> PlacePixelResponse:
        try:
            body = await request.json()
        except Exception as e:
            logger.error(f"Failed to parse JSON body: {e}")
            raise HTTPException(status_code=400, detail="Invalid JSON in request body")
        if not isinstance(body, dict):
            raise ValidationError("missing_fields")
        req = PlacePixelRequest.model_validate(body)
        result = await run_in_threadpool(
            gate.place,
            x=req.x,
            y=req.y,
            color=req.color,
            user_id=req.user_id,
            link=req.link,
            user_name=req.user_name,
        )
        if result.cooldown_error is not None:
            logger.warning(
                f"Pixel {result.pixel.id} committed but cooldown update failed for {result.pixel.owner_id}: {result.cooldown_error}"
            )
        for err in result.listener_errors:
            logger.error(f"Pixel {result.pixel.id} committed but a listener failed: {err}", exc_info=err)
        logger.info(f"Pixel placed at ({result.pixel.x}, {result.pixel.y}) by {result.pixel.owner_id}")
        return PlacePixelResponse(
            success=True,
            pixel=PixelItem.from_pixel(result.pixel),
            cooldown_end=result.cooldown_ends_at,
            cooldown_recorded=result.cooldown_recorded,
        )

    return router


def create_app(services: Services, cfg: AppConfig | None = None) -> FastAPI:
    cfg = cfg or AppConfig()
    app = FastAPI(title="Pixelboard")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.frontend_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PixelboardError)
    async def pixelboard_error_handler(request: Request, exc: PixelboardError) -> JSONResponse:
        code = status_for(exc)
        headers = {}
        if isinstance(exc, CooldownError):
            headers["Retry-After"] = str(exc.retry_after_seconds)
        if isinstance(exc, StorageError):
            logger.error(f"Storage failure on {request.url.path}: {exc}", exc_info=exc.cause or exc)
        return JSONResponse(exc.to_dict(), status_code=code, headers=headers)

    @app.get("/health", response_model=StatusResponse)
    async def health() -> StatusResponse:
        return StatusResponse(status="ok")

    app.include_router(_build_pixels_router(services), prefix="/api")

    @app.websocket("/ws/pixels")
    async def pixel_feed(websocket: WebSocket) -> None:
        await services.broadcaster.serve(websocket)

    return app
