import logging

import uvicorn
from config import ApplicationConfig
from src.adapter.services.database import create_tables
from src.api.app import create_app
from src.depends import engine, event_bus

logging.basicConfig(
    level=ApplicationConfig.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = create_app(ApplicationConfig)


async def on_startup():
    await create_tables(engine)
    logger.info("Database tables ready")


async def on_shutdown():
    await event_bus.drain()
    await engine.dispose()
    logger.info("Visit access control service stopped")


app.add_event_handler("startup", on_startup)
app.add_event_handler("shutdown", on_shutdown)

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=True,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
