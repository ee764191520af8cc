"""
Logging setup for the application.

``setup_logging`` attaches a console handler to the root logger the first
time it is called.  Modules log through ``logging.getLogger(__name__)``.
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    logger = logging.getLogger()
    if logger.handlers:
        # already configured (tests, repeated create_app calls)
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
