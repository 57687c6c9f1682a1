import logging
import sys

from printbill.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers and the floor applied to each.
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,  # routes log their own requests
    "PIL": logging.INFO,
    "fpdf": logging.WARNING,
}


def _formatter(as_json: bool) -> logging.Formatter:
    if not as_json:
        return logging.Formatter(TEXT_FORMAT)
    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(
        fmt=JSON_FORMAT,
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )


def configure_logging() -> None:
    """Install a single stderr handler on the root logger.

    Text lines by default, JSON lines when ``PRINTBILL_LOG_JSON`` is set.
    Replaces any handlers already there, so it is safe to run again.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(settings.log_json))

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


# Alembic's env.py runs fileConfig, which replaces our handlers.
reconfigure = configure_logging
