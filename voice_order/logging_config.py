"""
Logging setup for the voice order engine.

Call `setup_logging()` once at process start (the app module does). The
level comes from LOG_LEVEL unless passed explicitly; unknown names fall back
to INFO.
"""
import logging
import os
import sys

# Client libraries that log every request at INFO/DEBUG
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


def setup_logging(level: str = None) -> int:
    """
    Configure stdout logging for the `voice_order` package.

    Returns:
        The numeric level that was applied.
    """
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = logging.getLevelName(name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("voice_order").setLevel(numeric_level)

    quiet_level = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for chatty in _CHATTY_LOGGERS:
        logging.getLogger(chatty).setLevel(quiet_level)

    return numeric_level
