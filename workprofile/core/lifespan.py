"""Process lifespan: startup and shutdown for hosts embedding the work-profile core.

Single place for startup/shutdown wiring (logging, telemetry, DB engine
dispose). No business logic here. Use it around a worker or request loop:

    async with workprofile_lifespan():
        async for db in get_db_transactional():
            services = build_services(db, predicate)
            ...
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from workprofile.core.config import Settings, get_settings
from workprofile.infrastructure.persistence import database
from workprofile.shared.telemetry.logging import setup_logging
from workprofile.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def workprofile_lifespan(settings: Settings | None = None) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), SQLAlchemy
    instrumentation (if a database is configured). Shutdown order:
    telemetry shutdown, SQL engine dispose.
    """
    settings = settings or get_settings()

    # ---- Startup ----
    setup_logging(settings)

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        database._ensure_engine()
        if database.engine is not None:
            telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    if database.engine is not None:
        await database.engine.dispose()
        database.engine = None
        database.AsyncSessionLocal = None
        logger.info("Database engine disposed")
