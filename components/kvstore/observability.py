from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Iterable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.processors import JSONRenderer

from .config import KVStoreSettings

logger = logging.getLogger("kvstore.http")


def _pre_chain(log_json: bool) -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.stdlib.add_logger_name
    yield structlog.stdlib.ExtraAdder()  # fields passed through extra=
    yield structlog.processors.TimeStamper(fmt="iso", utc=True, key="time")
    yield structlog.processors.StackInfoRenderer()
    yield structlog.processors.format_exc_info  # traceback lands under "exception"
    yield structlog.processors.UnicodeDecoder()
    if log_json:
        yield structlog.processors.EventRenamer("msg")


def build_formatter(log_json: bool = True) -> structlog.stdlib.ProcessorFormatter:
    renderer = JSONRenderer(default=str) if log_json else structlog.dev.ConsoleRenderer(colors=False)
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=list(_pre_chain(log_json)),
    )


def configure_logging(settings: Optional[KVStoreSettings] = None) -> logging.Logger:
    """Route the kvstore.* loggers to stdout through structlog's formatter, one JSON object per line."""
    settings = settings or KVStoreSettings()
    root = logging.getLogger("kvstore")
    root.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings.log_json))

    # replace rather than stack handlers when create_app is called repeatedly
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.propagate = False
    return root


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        fields = {"method": request.method, "path": request.url.path}
        logger.info("Received request", extra=fields)
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception("Request failed", extra={**fields, "duration_ms": duration_ms})
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "Request handled",
            extra={**fields, "status": response.status_code, "duration_ms": duration_ms},
        )
        return response
