"""Logging for the automation engine.

Engine modules log under the "automation" namespace. The host process
usually owns the root logger; setup_logging only touches the engine's
own logger, so it can be called from scripts and workers without
disturbing the host's handlers.
"""

import logging
import sys

from automation.core.config import Settings, get_settings

LOGGER_NAMESPACE = "automation"
_HANDLER_NAME = "automation.stdout"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Attach a stdout handler to the engine logger and set its level.

    Level is DEBUG when settings.debug is True, otherwise INFO. Repeated
    calls update the level and never add a second handler.

    Returns:
        The engine's namespace logger.
    """
    settings = settings or get_settings()
    engine_logger = logging.getLogger(LOGGER_NAMESPACE)
    engine_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    if not any(h.get_name() == _HANDLER_NAME for h in engine_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        engine_logger.addHandler(handler)
    return engine_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the engine namespace.

    Module names already under "automation." are used as-is; anything else
    (scripts, __main__) is nested under it so setup_logging covers it.
    """
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
