"""
# Logging Manager

Central factory for application loggers.

Every module obtains its logger through `get_logger()`, optionally with a
prefix that tags each line with the subsystem it came from:

```python
from admin_backend.managers.logging_manager import get_logger

logger = get_logger(prefix="[DATABASE]")
logger.info("Connected to %s", database_name)
# 2024-01-01 12:00:00 [INFO] admin_backend: [DATABASE] Connected to admin_backend
```

The root handler is configured once, on first use, from
`settings.DEFAULT_LOG_LEVEL`.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple

from admin_backend.config import settings

DEFAULT_LOGGER_NAME = "admin_backend"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed prefix to every message."""

    def __init__(self, logger: logging.Logger, prefix: str = ""):
        super().__init__(logger, {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        if self.prefix:
            msg = f"{self.prefix} {msg}"
        return msg, kwargs


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the application logger with a console handler.

    Safe to call repeatedly; only the first call attaches a handler.

    Args:
        level: Log level name. Defaults to `settings.DEFAULT_LOG_LEVEL`.
    """
    global _configured
    if _configured:
        return

    numeric_level = getattr(logging, (level or settings.DEFAULT_LOG_LEVEL).upper(), logging.INFO)
    app_logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    app_logger.setLevel(numeric_level)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    _configured = True


def get_logger(name: str = DEFAULT_LOGGER_NAME, prefix: str = "") -> PrefixedLoggerAdapter:
    """
    Return a logger for `name`, tagging every message with `prefix`.

    Args:
        name: Logger name. Child names (`admin_backend.x`) inherit the handler.
        prefix: Text prepended to every message, e.g. `"[Blog Routes]"`.

    Returns:
        PrefixedLoggerAdapter: A logger adapter supporting the usual logging API.
    """
    setup_logging()
    return PrefixedLoggerAdapter(logging.getLogger(name), prefix)
