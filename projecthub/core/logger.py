"""
Logging configuration using loguru
"""
import sys
from loguru import logger
from projecthub.config import settings

# Remove default handler
logger.remove()

logger.add(
    sys.stderr,
    level=settings.log_level,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
)

if settings.log_file:
    logger.add(
        settings.log_file,
        rotation="00:00",
        retention="30 days",
        level=settings.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

__all__ = ["logger"]
