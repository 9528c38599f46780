"""
Process-level error observers for the Farm Inventory service.

Uncaught errors are logged rather than silently lost. Errors inside request
handlers never reach these hooks; they are turned into responses by errors.py.
"""
import logging
import sys
import threading

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def log_uncaught_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def log_thread_exception(args):
    logger.error(
        f"Uncaught exception in thread {args.thread.name if args.thread else '?'}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def asyncio_exception_handler(loop, context):
    """Log task errors that were never awaited; the event loop keeps running."""
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error(f"Unhandled async error: {message}", exc_info=exc)
    else:
        logger.error(f"Unhandled async error: {message}")


def install_exception_hooks() -> None:
    sys.excepthook = log_uncaught_exception
    threading.excepthook = log_thread_exception
