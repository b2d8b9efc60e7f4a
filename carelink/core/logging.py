"""Application logging: one stdout handler on the ``carelink`` logger."""

import logging
import sys

from carelink.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Driver and Socket.IO internals log every heartbeat and query at INFO
NOISY_LOGGERS = ("pymongo", "engineio.server", "socketio.server")


def setup_logging() -> logging.Logger:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    app_logger = logging.getLogger("carelink")
    app_logger.setLevel(level)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        app_logger.addHandler(handler)

    if not settings.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return app_logger


logger = setup_logging()
