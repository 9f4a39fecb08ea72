import logging
from typing import Optional

from edid.core.config import Settings, settings as default_settings


def setup_logger(settings: Optional[Settings] = None):
    """Configures logging for an application that uses edid.

    Library modules only call ``logging.getLogger``; this is meant to be
    called once from an application entry point.

    Args:
        settings: Source of LOG_LEVEL. Defaults to the environment settings.

    Returns:
        logging.Logger: The ``edid`` package logger.
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler()],
    )

    edid_logger = logging.getLogger("edid")
    edid_logger.setLevel(settings.LOG_LEVEL.upper())

    return edid_logger
