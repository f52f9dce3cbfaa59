"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this only wires the
root handler once, at application start-up.
"""

import logging

from linkstats_app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging unless a handler is already installed (e.g. by pytest or uvicorn)."""
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
