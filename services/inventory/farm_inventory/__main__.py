"""
Process entry point: `python -m farm_inventory` or the `farm-inventory` script.

Termination signals are handled by uvicorn, whose graceful shutdown runs the
application lifespan and closes MongoDB. A crash of the server loop is logged
and the server restarted, up to MAX_RESTARTS times.
"""
import logging
import sys
from typing import Callable

import uvicorn

from .config import Settings
from .lifecycle import configure_logging, install_exception_hooks
from .main import create_app

logger = logging.getLogger(__name__)

MAX_RESTARTS = 3


def serve(settings: Settings, server_factory: Callable[[uvicorn.Config], uvicorn.Server] = uvicorn.Server) -> int:
    """
    Run the HTTP server until it is asked to stop.

    Returns:
        int: Exit status, 0 after a clean shutdown, 1 if closing MongoDB failed,
            startup failed, or the server kept crashing
    """
    restarts = 0
    while True:
        app = create_app(settings)
        config = uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
        server = server_factory(config)
        try:
            server.run()
        except Exception:
            if restarts >= MAX_RESTARTS:
                logger.critical("Server crashed too many times, giving up", exc_info=True)
                return 1
            restarts += 1
            logger.exception(f"Server crashed, restarting ({restarts}/{MAX_RESTARTS})")
            continue

        if not server.started:
            logger.error("Failed to start server")
            return 1
        if not app.state.shutdown_clean:
            logger.error("Error during shutdown")
            return 1
        return 0


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    install_exception_hooks()
    sys.exit(serve(settings))


if __name__ == "__main__":
    main()
