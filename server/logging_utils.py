"""Logging setup for the relay server."""

import logging
from collections.abc import Iterable

DEFAULT_LOG_LEVEL = "INFO"


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    extra_handlers: Iterable[logging.Handler] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Configure *logger* (the root logger by default) with a stdout handler.

    Does nothing if the logger already has handlers, e.g. when the server
    runs under uvicorn's logging config or inside a test session.
    """
    target = logger if logger is not None else logging.getLogger()
    if target.handlers:
        return

    target.setLevel(level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    target.addHandler(stream_handler)

    if extra_handlers:
        for handler in extra_handlers:
            target.addHandler(handler)


__all__ = ["DEFAULT_LOG_LEVEL", "setup_logging"]
