"""
Logging configuration for the Absensi backend
"""
import logging
import sys
from app.core.config import settings


def setup_logging() -> None:
    """
    Configure Python logging based on settings

    Sets up:
    - Console handler with appropriate format
    - Log level from settings.LOG_LEVEL
    """
    # Get log level from settings
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Set log levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # passlib probes bcrypt.__about__, which newer bcrypt releases dropped
    logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

    # Partition lifecycle events are always worth keeping
    logging.getLogger("app.db.partitions").setLevel(min(log_level, logging.INFO))

    logger = logging.getLogger(__name__)
    logger.info(
        "Logging configured: level=%s, env=%s, partitions=%s",
        settings.LOG_LEVEL, settings.APP_ENV, settings.resolved_partition_backend(),
    )
