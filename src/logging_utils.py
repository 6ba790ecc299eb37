"""Logging setup: everything goes to a file so the board screen stays clean."""
import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

_handler: Optional[logging.Handler] = None


def configure_logging(level: Union[str, int] = 'WARNING',
                      log_file: Optional[Union[str, Path]] = None) -> logging.Handler:
    """Install (or replace) the application log handler on the root logger.

    Without a log_file records go to a NullHandler.
    """
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding='utf-8')
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    root.setLevel(level)
    _handler = handler
    return handler
