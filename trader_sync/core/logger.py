"""
Logging setup for the trader_sync hierarchy: console plus optional file.
Secrets handed to setup_logging are masked on every handler.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


class RedactSecrets(logging.Filter):
    """Replaces each secret in the rendered message with MASK."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self.secrets:
            redacted = redacted.replace(secret, MASK)
        if redacted != message:
            record.msg, record.args = redacted, None
        return True


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    secrets: Iterable[str] = (),
) -> logging.Logger:
    """
    Configure the trader_sync logger. Safe to call again: old handlers are closed.
    requests' connection pool (urllib3) is held at WARNING so DEBUG runs stay readable.
    """
    log = logging.getLogger("trader_sync")
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)
    redact = RedactSecrets(secrets)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redact)
        log.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return log
