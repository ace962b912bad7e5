import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from parley.config import get_settings
from parley.errors import ParleyError
from parley.api.routes import (
    admin,
    auth,
    channels,
    dms,
    messages,
    notifications,
    standups,
    users,
)

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("parley")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

app = FastAPI(
    title=settings.app_name,
    description="Team chat backend: channels, DMs, mentions, notifications and standups",
    version="0.1.0",
)


@app.exception_handler(ParleyError)
async def parley_error_handler(request: Request, exc: ParleyError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": exc.message},
    )


# Include routers
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router, tags=["Users"])
app.include_router(channels.router, tags=["Channels"])
app.include_router(dms.router, prefix="/dm", tags=["DMs"])
app.include_router(messages.router, prefix="/message", tags=["Messages"])
app.include_router(messages.search_router, tags=["Messages"])
app.include_router(standups.router, prefix="/standup", tags=["Standups"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
app.include_router(admin.router, tags=["Admin"])


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": "0.1.0",
        "endpoints": {
            "auth": "/auth",
            "channels": "/channels",
            "dm": "/dm",
            "message": "/message",
            "standup": "/standup",
            "notifications": "/notifications",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}
