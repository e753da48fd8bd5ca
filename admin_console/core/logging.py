"""
Logging setup.

configure_logging() is called once from main.py; every module does
    logger = get_logger(__name__)
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level="INFO", debug: bool = False) -> None:
    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), logging.INFO)
    else:
        level_value = level

    root = logging.getLogger()
    if not getattr(root, "_admin_console_configured", False):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        root.handlers.clear()
        root.addHandler(handler)
        root._admin_console_configured = True
    root.setLevel(level_value)

    # SQL echo only when debugging
    sql_level = logging.INFO if debug else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
