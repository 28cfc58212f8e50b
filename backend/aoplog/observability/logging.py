import logging
from logging.config import dictConfig

from pythonjsonlogger import jsonlogger

from aoplog.config import settings

_CONFIGURED = False

METHOD_LOG_FIELDS = (
    "class_name",
    "method_name",
    "description",
    "location",
    "arguments",
    "result",
    "elapsed_time",
    "thread_id",
)


class JsonFormatter(jsonlogger.JsonFormatter):
    """Agrupa os campos de uma linha ``method_log`` sob a chave ``method``."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if record.getMessage() == "method_log":
            log_record["method"] = {name: log_record.pop(name, None) for name in METHOD_LOG_FIELDS}


def setup_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    level = settings.log_level.upper()
    log_format = "%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s %(request_id)s"

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "aoplog.observability.logging.JsonFormatter",
                    "fmt": log_format,
                },
            },
            "filters": {"request_id": {"()": "aoplog.observability.request_id.RequestIdFilter"}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "filters": ["request_id"],
                    "level": level,
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                "uvicorn": {"level": level, "propagate": True},
                "uvicorn.error": {"level": level, "propagate": True},
                "uvicorn.access": {"level": level, "propagate": True},
                "aoplog": {"level": level, "propagate": True},
            },
        }
    )
    logging.captureWarnings(True)
    logging.getLogger("aoplog").info("logging_configured", extra={"log_level": level})


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
