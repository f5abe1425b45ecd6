import os
import pkgutil
from importlib import import_module
from typing import Any, Awaitable, Callable
from uuid import UUID

from fastapi import APIRouter

from signaling.constants import MessageType
from signaling.logging import logger
from signaling.utils.metrics import ws_messages_dropped_total

HandlerCallableType = Callable[[UUID, Any], Awaitable[None]]


class MessageRouter:
    """
    Router for inbound signaling messages.

    Maps each inbound message type to the coroutine handling it. Handlers
    receive the sender's connection ID and the parsed message.
    """

    def __init__(self):
        """
        Initializes the router with an empty ``handlers_registry``, which
        maps message types to their handler functions.
        """
        self.handlers_registry: dict[MessageType, HandlerCallableType] = {}

    def register(self, *message_types: MessageType):
        """
        Decorator registering a handler for one or more message types.

        Registering the same function again is a no-op, which keeps module
        reloads harmless.

        Args:
            *message_types (MessageType): Inbound message types to handle.

        Raises:
            ValueError: If a different handler is already registered for
                one of the message types.
        """

        def decorator(func: HandlerCallableType):
            for message_type in message_types:
                if message_type in self.handlers_registry:
                    if self.handlers_registry[message_type] != func:
                        raise ValueError(
                            f"Different handler already registered for message type {message_type}"
                        )
                    continue

                self.handlers_registry[message_type] = func
                logger.info(
                    f"Register {func.__module__}.{func.__name__} for message type: {message_type}"
                )

            return func

        return decorator

    def get_handler(self, message_type: str) -> HandlerCallableType | None:
        # MessageType is a StrEnum, so plain strings hit the same keys
        return self.handlers_registry.get(message_type)

    async def dispatch(self, connection_id: UUID, message: Any) -> bool:
        """
        Calls the handler registered for the message's type.

        A message without a registered handler is logged and dropped.

        Args:
            connection_id: Connection the message arrived on.
            message: Parsed inbound message with a ``type`` attribute.

        Returns:
            True if a handler was called.
        """
        handler = self.get_handler(message.type)
        if handler is None:
            logger.warning(f"No handler found for message type {message.type}")
            ws_messages_dropped_total.labels(reason="unhandled").inc()
            return False

        await handler(connection_id, message)
        return True


message_router = MessageRouter()


# Track registered modules to prevent duplicate logging
_registered_http_modules: set[str] = set()
_registered_ws_modules: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Collects the HTTP and WebSocket routers of the application.

    Imports every module in ``api/http`` and ``api/ws/consumers`` and
    includes its ``router`` into a single main router.
    """
    main_router: APIRouter = APIRouter()

    app_dir = os.path.dirname(__file__)
    app_name = os.path.basename(app_dir)

    for _, module, _ in pkgutil.iter_modules([f"{app_dir}/api/http"]):
        api = import_module(f".{module}", package=f"{app_name}.api.http")
        main_router.include_router(api.router)

        if module not in _registered_http_modules:
            logger.info(f'Register "{module}" api')
            _registered_http_modules.add(module)

    for _, module, _ in pkgutil.iter_modules([f"{app_dir}/api/ws/consumers"]):
        ws_consumer = import_module(
            f".{module}", package=f"{app_name}.api.ws.consumers"
        )
        main_router.include_router(ws_consumer.router)

        if module not in _registered_ws_modules:
            logger.info(f'Register "{module}" websocket consumer')
            _registered_ws_modules.add(module)

    return main_router
