from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .config import KVStoreSettings
from .contracts import KeyValueStorePort
from .observability import RequestLoggingMiddleware, configure_logging
from .routes import router
from .store import InMemoryKeyValueStore

APP_NAME = "kvstore-mock"
APP_VERSION = "0.1.0"


def create_app(
    store: Optional[KeyValueStorePort] = None,
    settings: Optional[KVStoreSettings] = None,
) -> FastAPI:
    settings = settings or KVStoreSettings()
    configure_logging(settings)

    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.state.settings = settings
    # One store per app; handlers reach it through routes.get_store
    app.state.store = store if store is not None else InMemoryKeyValueStore()

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(router)
    return app
