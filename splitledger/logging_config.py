"""Logging configuration for splitledger."""

import logging
import os

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def configure_logging():
    """Configure the root logger and the ``splitledger`` logger from the environment."""
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    package_level_name = os.getenv("LOG_LEVEL_SPLITLEDGER", log_level_name).upper()
    logging.getLogger("splitledger").setLevel(
        getattr(logging, package_level_name, log_level)
    )

    # werkzeug request lines are noise outside of debugging
    if log_level > logging.DEBUG:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
