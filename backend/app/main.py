"""FastAPI entry point for the Karaoke Room POS."""
import asyncio
import contextlib
import logging

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.errors import PersistenceError
from interfaces import auth_router, catalog_router, frontdesk_router, report_router, debug_router
from interfaces import deps
from infrastructure.socketio_manager import sio, set_services, push_live_bills

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)

set_services(deps.registry, deps.billing_service)

app = FastAPI(title="Karaoke Room POS")

app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(frontdesk_router)
app.include_router(report_router)
app.include_router(debug_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=deps.settings.cors_origins or ["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Socket.IO wraps FastAPI into one ASGI app
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """The in-memory state already moved on; tell the terminal the write can be retried."""
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "key": exc.key, "retryable": True},
    )


@app.get("/health", tags=["health"])
def health_check() -> dict:
    """Expose a minimal health endpoint to help dev tooling."""
    return {"status": "ok", "configVersion": deps.settings.version}


# Background tasks ----------------------------------------------
@app.on_event("startup")
async def _start_background_tasks() -> None:  # pragma: no cover - runtime wiring
    """Start the live-bill refresh loop; the core itself never ticks."""

    async def _bill_loop():
        while True:
            try:
                await push_live_bills()
            except Exception:
                logger.exception("Live bill push failed")
            await asyncio.sleep(deps.settings.refresh_interval_seconds)

    app.state._bill_task = asyncio.create_task(_bill_loop())
    logger.info("Background tasks started: live bill refresh")


@app.on_event("shutdown")
async def _stop_background_tasks() -> None:  # pragma: no cover - runtime wiring
    bill_task = getattr(app.state, "_bill_task", None)
    if bill_task:
        bill_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await bill_task
    logger.info("Background tasks stopped")
