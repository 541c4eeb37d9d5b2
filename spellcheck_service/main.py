"""
Main FastAPI application for the multi-dictionary spell-check service.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spellcheck_service.config import settings
from spellcheck_service.routes import dictionaries, health, spellcheck
from spellcheck_service.middleware.logging import RequestLoggingMiddleware
from spellcheck_service.services.spellcheck import create_dictionary_set
from spellcheck_service.utils.logger import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting spell-check service")
    logger.info(f"Environment: {'DEBUG' if settings.DEBUG else 'PRODUCTION'}")
    logger.info(f"Log level: {settings.LOG_LEVEL}")

    app.state.dictionary_set = None
    app.state.config_store = None
    app.state.dictionary_resource = None

    # Spell-check is optional - graceful degradation
    if settings.SPELLCHECK_ENABLED:
        try:
            dictionary_set = create_dictionary_set(settings)
        except Exception as e:
            logger.error(f"Spell-check initialization error (disabled): {e}", exc_info=True)
        else:
            app.state.dictionary_set = dictionary_set
            app.state.config_store = dictionary_set.config
            app.state.dictionary_resource = dictionary_set.resources
            # Dictionaries are large; give the service time to come up before parsing them
            dictionary_set.schedule_reload(delay=settings.SPELLCHECK_RELOAD_DELAY_SECONDS)
    else:
        logger.info("Spell-check service disabled via configuration")

    yield

    # Shutdown
    logger.info("Shutting down spell-check service")
    if app.state.dictionary_set is not None:
        await app.state.dictionary_set.shutdown()
    app.state.dictionary_set = None
    app.state.config_store = None
    app.state.dictionary_resource = None


# Create FastAPI application
app = FastAPI(
    title="Spell-check Service",
    description="Spell checking and suggestions across multiple language dictionaries",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(spellcheck.router)
app.include_router(dictionaries.router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint redirect to docs."""
    return {
        "message": "Spell-check Service",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "spellcheck_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )
