from __future__ import annotations

import logging
import sys

import structlog

# Driver and plotting libraries are chatty at INFO/DEBUG
_QUIET_LOGGERS = {
    "neo4j": logging.WARNING,
    "matplotlib": logging.WARNING,
    "PIL": logging.WARNING,
    "httpx": logging.WARNING,
}


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog and stdlib logging through one stdout handler.

    ``log_format`` is ``"json"`` (one object per line, tracebacks as dicts)
    or ``"console"`` (coloured when stdout is a terminal).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer_chain: list[structlog.types.Processor]
    if log_format == "console":
        renderer_chain = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        renderer_chain = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderer_chain,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in ("uvicorn", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
        logging.getLogger(name).propagate = True

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
