import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """
    Route log records from fetch, the transport services and the signal
    listeners to STDOUT. Transport exchanges finish on event loop callbacks,
    so a single root handler keeps their output in one place.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove default handlers to avoid duplication
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ))

    logger.addHandler(handler)


def quiet_library_loggers() -> None:
    """Lowers logging level for aiohttp to avoid per-connection noise in STDOUT"""
    for name in ("aiohttp.client", "aiohttp.internal"):
        logging.getLogger(name).setLevel(logging.WARNING)
