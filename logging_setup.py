import logging
import os
from logging.handlers import RotatingFileHandler

from config import Settings

FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings) -> None:
    root_logger = logging.getLogger()
    level = getattr(logging, settings.log_level, logging.INFO)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(FORMAT, DATEFMT)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if not settings.log_to_file:
        return
    try:
        os.makedirs(settings.log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(settings.log_dir, "portfolio.log"),
            maxBytes=5_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        logging.getLogger(__name__).warning("file logging disabled: %s", e)
