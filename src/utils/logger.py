import logging

from rich.logging import RichHandler

from src.core.config import settings

# --------------------------------------------------------
# One package logger for every dentscan module
# --------------------------------------------------------
LOGGER_NAME = "dentscan"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(settings.log_level)

# If no handlers exist, add one (avoid duplicate logs)
if not logger.handlers:
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="%H:%M:%S"))
    logger.addHandler(handler)

logger.propagate = False  # Prevent duplicate uvicorn logs


def get_logger(name: str) -> logging.Logger:
    """Child logger under the package logger, e.g. ``dentscan.services.store_service``."""
    if name.startswith("src."):
        name = name[len("src."):]
    return logger.getChild(name)
