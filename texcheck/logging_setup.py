"""
Console logging for the command line tool.
"""

import logging
import os
import sys


def setup_logging(force_debug: bool = False) -> None:
    """
    Configures the root logger. TEXCHECK_DEBUG=1 (or force_debug) enables DEBUG.
    """
    is_debug = force_debug or os.environ.get("TEXCHECK_DEBUG", "false").lower() in ("1", "true")
    log_level = logging.DEBUG if is_debug else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s - %(name)-24s - %(levelname)-8s - %(message)s",
        datefmt="%H:%M:%S",
    )

    root_logger = logging.getLogger()

    # Reset existing handlers
    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)

    # Pillow logs every plugin it probes at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.debug("Logging configured. Level: %s", logging.getLevelName(log_level))
