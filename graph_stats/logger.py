import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "graph_stats"

_FORMATTER = logging.Formatter(
    "%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_FORMATTER)
        logger.addHandler(console_handler)

    return logger


def attach_file_handler(logger: logging.Logger, log_path: Path) -> logging.FileHandler:
    """Add a UTF-8 file handler; the caller owns it and detaches it when done."""
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(_FORMATTER)
    logger.addHandler(file_handler)
    return file_handler


def detach_file_handler(logger: logging.Logger, handler: Optional[logging.FileHandler]) -> None:
    if handler is None:
        return
    logger.removeHandler(handler)
    handler.close()
