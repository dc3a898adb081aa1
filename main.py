import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitepunch.core.config import settings
from sitepunch.core.errors import register_error_handlers
from sitepunch.core.logging import setup_logging
from sitepunch.api.v1.admin import router as admin_router
from sitepunch.api.v1.auth import router as auth_router
from sitepunch.api.v1.time_entries import router as time_router
from sitepunch.db.mongo import create_mongo_client
from sitepunch.db.mongo_indexes import ensure_indexes


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    client = create_mongo_client()
    app.state.mongo_client = client
    app.state.mongo_db = client[settings.MONGODB_DB_NAME]
    # Create required indexes (non-fatal on failure)
    try:
        await ensure_indexes(app.state.mongo_db)
    except Exception as exc:
        logger.warning("Mongo index initialization failed: %s", exc)
    try:
        yield
    finally:
        client.close()


app = FastAPI(title="SitePunch Backend", lifespan=lifespan)

# The mobile client sends no Origin; browsers (admin console) are allowlisted
app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted({o.rstrip("/") for o in settings.ALLOWED_ORIGINS}),
    allow_origin_regex=r"^http(s)?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
def read_root():
    return {"message": "Welcome to SitePunch Backend"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Mount API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(time_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
