from __future__ import annotations

import argparse
import logging
from typing import Optional

import uvicorn

from .app import create_app
from .config import KVStoreSettings

logger = logging.getLogger("kvstore.server")


def main(argv: Optional[list[str]] = None) -> None:
    settings = KVStoreSettings()

    parser = argparse.ArgumentParser(description="Run the in-memory KV store test server (uvicorn)")
    parser.add_argument("--host", default=settings.host, help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=settings.port, help="Port (default: %(default)s)")
    args = parser.parse_args(argv)

    settings = settings.model_copy(update={"host": args.host, "port": args.port})
    app = create_app(settings=settings)

    # Single process only: every worker would get its own empty store
    logger.info("HTTP test server started on port %d", settings.port, extra={"host": settings.host})
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    except Exception:
        logger.exception("HTTP test server failed to start")
        raise


if __name__ == "__main__":
    main()
