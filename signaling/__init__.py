# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from fastapi import FastAPI

from signaling.logging import logger
from signaling.routing import collect_subrouters
from signaling.settings import app_settings


def startup():
    """
    Application startup handler
    """

    async def wrapper():
        logger.info(
            f"Signaling relay started (env: {app_settings.ENV.value}, "
            f"websocket path: {app_settings.WS_PATH})"
        )

    return wrapper


def shutdown():
    """
    Application shutdown handler
    """

    async def wrapper():
        """
        Registered connections are not closed here; uvicorn closes the
        sockets and each endpoint unregisters itself on disconnect.
        """
        from signaling.managers.connection_registry import connection_registry

        remaining = await connection_registry.count()
        logger.info(
            f"Signaling relay shutting down with {remaining} open connection(s)"
        )

    return wrapper


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Adds the startup and shutdown handlers and includes the routers
    collected by `signaling.routing.collect_subrouters()`: the HTTP
    endpoints (health, metrics) and the signaling WebSocket consumer.
    """
    app = FastAPI(
        title="WebRTC signaling relay",
        description="Relays session descriptions between WebRTC peers",
        version="1.0.0",
    )

    app.add_event_handler("startup", startup())
    app.add_event_handler("shutdown", shutdown())

    app.include_router(collect_subrouters())

    return app


app = application()  # Need for fastapi cli
