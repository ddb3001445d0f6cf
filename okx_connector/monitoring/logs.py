"""
Logging setup.

Console handler always; daily-rotated file handler when log_dir is set.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from okx_connector.core.config import MonitoringConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: MonitoringConfig, log_name: str = "okx_connector") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Monitoring settings (level, optional log directory)
        log_name: Logger name and log file prefix

    Returns:
        The configured logger
    """
    logger = logging.getLogger(log_name)
    logger.setLevel(config.log_level)

    # Avoid stacking handlers on repeated setup
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if config.log_dir:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_path / f"{log_name}.log",
            when="midnight",
            interval=1,
            backupCount=30,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
