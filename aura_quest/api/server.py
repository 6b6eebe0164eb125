"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aura_quest import config
from aura_quest.api.routes import router
from aura_quest.exceptions import RecordNotFoundError, ValidationError
from aura_quest.gamification.engine import ProgressionEngine
from aura_quest.gamification.minigame import CalmCollector
from aura_quest.gamification.suggestions import SuggestionGenerator
from aura_quest.store import StoreAdapter, create_store
from aura_quest.sync.bus import SyncBus
from aura_quest.sync.poller import StorePoller
from aura_quest.sync.scheduler import TickScheduler

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Per-process wiring: one store context, one bus, one engine"""
    store: StoreAdapter
    bus: SyncBus
    engine: ProgressionEngine
    game: CalmCollector
    poller: StorePoller


def build_runtime(
    store: Optional[StoreAdapter] = None,
    scheduler: Optional[TickScheduler] = None,
    generator: Optional[SuggestionGenerator] = None,
) -> Runtime:
    """Wire store, bus, engine and mini-game together"""
    store = store or create_store()
    bus = SyncBus(store, scheduler=scheduler)
    engine = ProgressionEngine(store, bus, generator=generator)
    return Runtime(
        store=store,
        bus=bus,
        engine=engine,
        game=CalmCollector(engine),
        poller=StorePoller(bus, poll_interval=config.SYNC_POLL_INTERVAL),
    )


def create_api_application(
    store: Optional[StoreAdapter] = None,
    scheduler: Optional[TickScheduler] = None,
    generator: Optional[SuggestionGenerator] = None,
    poll_store: bool = True,
) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        store: Store to use instead of the configured backend
        scheduler: Tick scheduler for bus delivery (defaults to the running loop)
        generator: Suggestion generator (seeded in tests)
        poll_store: Run the background poller that picks up other contexts' writes
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for FastAPI application"""
        # Startup
        logger.info("Starting API server...")
        config.validate_config()
        runtime = build_runtime(store=store, scheduler=scheduler, generator=generator)
        app.state.runtime = runtime
        if poll_store:
            await runtime.poller.start()

        yield

        # Shutdown
        logger.info("Shutting down API server...")
        await runtime.poller.stop()
        runtime.engine.close()
        runtime.store.close()
        logger.info("Store closed")

    app = FastAPI(
        title="Aura Quest API",
        description="Quests, XP, streaks and mood-based suggestions",
        version="0.1.0",
        lifespan=lifespan
    )

    app.include_router(router)

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
