from __future__ import annotations
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for command line use of kubestore.

    `level` is a level name such as ``"DEBUG"``; unknown or missing names
    fall back to WARNING. Returns the package logger.
    """
    log_level = logging.WARNING
    if level:
        numeric = getattr(logging, level.upper(), None)
        if isinstance(numeric, int):
            log_level = numeric

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)

    # Keep known noisy libraries quiet by default
    logging.getLogger('kubernetes').setLevel(max(log_level, logging.WARNING))
    logging.getLogger('urllib3').setLevel(max(log_level, logging.WARNING))

    logger = logging.getLogger('kubestore')
    logger.setLevel(log_level)
    return logger
