"""
RIK — Logging Configuration
============================

What:  Process-wide logging setup and installation of a deployment's custom
       logger (from a customization module's get_custom_logger()).
Why:   Every RIK module logs through `logging.getLogger(__name__)` under the
       `rik` namespace, so one place decides where those records go.

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

Custom logger:
    get_custom_logger() may return
    - a logging.Handler   → becomes the only handler of the `rik` logger
    - a logging.Logger    → its handlers become the handlers of `rik`
    Either way `rik` stops propagating to the root logger so records are
    not emitted twice.
"""

import logging
import sys
from typing import Any, Optional

RIK_LOGGER_NAME = "rik"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure the root logger. Called once, first thing in create_app().
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def set_custom_logger(custom: Any, log_level: Optional[str] = None) -> None:
    """
    Route all `rik.*` records to a deployment-provided handler or logger.

    Raises:
        TypeError: `custom` is neither a logging.Handler nor a logging.Logger
    """
    if isinstance(custom, logging.Handler):
        handlers = [custom]
    elif isinstance(custom, logging.Logger):
        handlers = list(custom.handlers)
    else:
        raise TypeError(
            "get_custom_logger() must return a logging.Handler or logging.Logger, "
            f"got {type(custom).__name__}"
        )

    rik_logger = logging.getLogger(RIK_LOGGER_NAME)
    for handler in list(rik_logger.handlers):
        rik_logger.removeHandler(handler)
    for handler in handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
        rik_logger.addHandler(handler)
    rik_logger.propagate = False
    if log_level:
        rik_logger.setLevel(getattr(logging, log_level, logging.INFO))

    logger.info("Custom logger installed (%d handler(s))", len(handlers))


def reset_rik_logger() -> None:
    """Undo set_custom_logger(): drop custom handlers and propagate to root again."""
    rik_logger = logging.getLogger(RIK_LOGGER_NAME)
    for handler in list(rik_logger.handlers):
        rik_logger.removeHandler(handler)
    rik_logger.propagate = True
    rik_logger.setLevel(logging.NOTSET)
