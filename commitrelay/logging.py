"""Root logger setup from LoggingConfig (config.yaml logging.* or env LOGGING_*).

What the relay logs per level: ERROR for failed GitHub/downstream calls
and missing settings, WARNING for unsupported events, INFO for received
events, commit counts and forward results, DEBUG for raw HTTP lines.
"""

import logging

from commitrelay.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _resolve_level(level: str) -> int:
    """Map level name to logging constant; unknown names give INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


def setup_logging(config: LoggingConfig) -> None:
    """Apply level and format to the root logger.

    urllib3 never goes below INFO: at DEBUG it logs every connection made
    by requests.
    """
    level = _resolve_level(config.level)
    logging.basicConfig(level=level, format=config.format, force=True)
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
