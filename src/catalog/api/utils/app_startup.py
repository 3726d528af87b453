"""Logging setup for the catalog service: loguru sinks plus stdlib routing."""

import logging
import sys
from pathlib import Path

from loguru import logger

from catalog.runtime.config.config_data import ConfigData, LoggingConfig
from catalog.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "{extra[service]} [<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers and the level they are held at
LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib log records into loguru.

    uvicorn's access lines and its error tracebacks are dropped; the request
    middleware logs both with the request id attached.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "uvicorn.access":
            return
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, tracebacks: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else CONSOLE_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=tracebacks,
        diagnose=tracebacks,
    )


def route_stdlib_logging() -> None:
    """Send every stdlib logger through ``InterceptHandler``."""
    # level=0 lets every record reach loguru, whose sinks filter by level
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True
    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(config: ConfigData | None = None) -> None:
    """Install the catalog's loguru sinks for ``config`` (the active config by default).

    Every record carries ``service`` (the app title) and ``request_id``,
    which is ``-`` outside a request.
    """
    config = config or get_config()
    cfg = config.logging
    # Variable values in tracebacks stay out of production logs
    tracebacks = config.app.environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-", "service": config.app.title})
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=tracebacks,
        diagnose=tracebacks,
    )
    if cfg.file:
        _add_file_sink(cfg, tracebacks)

    route_stdlib_logging()

    logger.info(
        "Logging configured",
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=config.app.environment,
    )
