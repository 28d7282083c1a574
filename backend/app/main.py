import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.health import router as health_router
from app.api.routes_items import router as items_router
from app.config import settings
from app.db import init_db
from app.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)
log = logging.getLogger("inventory.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup; RESET_DB=1 drops and recreates the schema
    init_db()
    log.info("Inventory API ready on %s:%s", settings.APP_HOST, settings.APP_PORT)
    yield


app = FastAPI(title="Inventory Tracker - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(items_router, tags=["items"])


def run(host: str = None, port: int = None):
    import uvicorn

    uvicorn.run(app, host=host or settings.APP_HOST, port=port or settings.APP_PORT)
