import logging
import sys
from typing import Iterable

import structlog

# the imagery chain makes many short-lived connections; keep their INFO chatter out
QUIET_LOGGERS = ("urllib3", "PIL")


def _service_fields(app_name: str, app_env: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("env", app_env)
        return event_dict

    return processor


def _renderer(level: int, app_env: str):
    if level == logging.DEBUG or app_env == "development":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def init_logging(
    log_level: str = "INFO",
    app_name: str = "EcoScope",
    app_env: str = "production",
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> structlog.BoundLogger:
    """Route structlog through stdlib logging on stdout.

    Every event carries `app` and `env`, plus any request-scoped context bound
    with `structlog.contextvars` (the request id middleware uses this).
    Console output in development or at DEBUG, JSON lines otherwise.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # force: create_app may run several times in one process
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_fields(app_name, app_env),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(level, app_env),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger()
