import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from core import config, db
from core.errors import install_error_handlers
from core.logging_setup import configure_logging
from dataset import router as dataset_router
from reports import router as reports_router

logger = logging.getLogger(__name__)

HELP_TEXT = "Heavy Metals Data API. See /api/health, /api/states, /api/data?state=NAME"


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Refuse to start without store credentials.
    config.validate_required()
    # An unreachable store only fails the report endpoints; the pool is retried on use.
    try:
        await db.init_pool()
    except db.STORE_ERRORS as e:
        logger.warning("db_pool_unavailable error=%s", e)
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Heavy Metals Data API", lifespan=lifespan)

# Only the frontend dev server may call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.cors_origin()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

app.include_router(dataset_router.router, tags=["dataset"])
app.include_router(reports_router.router, tags=["reports"])


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return HELP_TEXT


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.port())
