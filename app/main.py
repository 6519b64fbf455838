import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.attendance.router import router as attendance_router
from app.api.v1.attendance.router import summary_router
from app.api.v1.classes.classes_router import router as classes_router
from app.api.v1.students.student_router import router as students_router
from app.core.config import settings
from app.core.dependencies import get_subscriber_registry
from app.core.schemas import HealthResponse
from app.db.document_store import DocumentStore
from app.db.schema_check import ensure_tables
from app.db.session import AsyncSessionLocal, engine
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.registry import SubscriberRegistry
from app.realtime.router import router as realtime_router

APP_NAME = "Prayer Attendance Sync"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_tables(engine)
    store = DocumentStore(AsyncSessionLocal, key=settings.document_key)
    await store.load()
    registry = SubscriberRegistry(send_timeout=settings.broadcast_send_timeout)

    app.state.document_store = store
    app.state.subscriber_registry = registry
    app.state.broadcaster = ChangeBroadcaster(registry, send_timeout=settings.broadcast_send_timeout)
    logger.info(f"Data store: {engine.url.render_as_string(hide_password=True)} (document {store.key!r})")
    yield
    await registry.close_all()
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title=APP_NAME, lifespan=lifespan)

    # CORS: comma-separated origins, "*" for any
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(classes_router)
    app.include_router(students_router)
    app.include_router(attendance_router)
    app.include_router(summary_router)
    app.include_router(realtime_router)

    @app.get("/health", response_model=HealthResponse)
    async def health(registry: SubscriberRegistry = Depends(get_subscriber_registry)) -> HealthResponse:
        return HealthResponse(status="ok", app=APP_NAME, subscribers=len(registry))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
