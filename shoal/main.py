import asyncio
import logging
import signal
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from shoal.config import settings
from shoal.core.errors import register_error_handlers
from shoal.core.middleware import AccessLogMiddleware, RequestIDMiddleware
from shoal.routers import anything, auth, fish
from shoal.services.reaper import SessionReaper
from shoal.services.store import Store

logger = logging.getLogger("shoal")

_background_tasks: set[asyncio.Task] = set()


async def _dump_store(store: Store, destination: str) -> None:
    try:
        await store.dump(destination)
    except Exception:
        logger.exception("Failed to dump store to %s", destination)


def _install_dump_handler(store: Store) -> bool:
    """Dump the store to settings.dump_path on SIGUSR1."""

    def _on_signal() -> None:
        task = asyncio.create_task(_dump_store(store, settings.dump_path))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGUSR1, _on_signal)
    except (NotImplementedError, AttributeError, RuntimeError):
        logger.warning("SIGUSR1 dump trigger not supported on this platform")
        return False
    return True


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create the store, start the session reaper, and tear both down on exit."""
    store = Store(
        settings.database_url,
        session_ttl=timedelta(seconds=settings.session_ttl_seconds),
    )
    await store.initialize()
    application.state.store = store

    reaper = SessionReaper(store, interval_seconds=settings.reap_interval_seconds)
    reaper_task = asyncio.create_task(reaper.start())
    dump_installed = _install_dump_handler(store)

    yield

    if dump_installed:
        asyncio.get_running_loop().remove_signal_handler(signal.SIGUSR1)
    reaper.stop()
    try:
        await asyncio.wait_for(reaper_task, timeout=10)
    except asyncio.TimeoutError:
        logger.warning("Reaper task did not complete in time")
    if _background_tasks:
        await asyncio.gather(*_background_tasks)
    await store.close()


app = FastAPI(
    title=settings.app_name,
    description="Demo API managing a catalog of fish, isolated per anonymous session",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware order matters (last added = outermost = first to execute)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-request-id"],
)

# Error handlers
register_error_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(fish.router)
app.include_router(anything.router)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.app_name, "version": "0.1.0"}


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
