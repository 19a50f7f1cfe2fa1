"""Application logging configuration."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(app) -> logging.Logger:
    """Configure the package and app loggers from ``LOG_LEVEL``."""
    log_level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    package_logger = logging.getLogger("src.dayflow.dayflow")
    package_logger.setLevel(log_level)
    if not package_logger.handlers:
        package_logger.addHandler(console_handler)

    app.logger.setLevel(log_level)
    logging.getLogger("werkzeug").setLevel(log_level)

    return app.logger
