"""Logging setup shared by the API process and the services."""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

from blogsphere.core.config import settings

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True


def configure_logging(level: Optional[str] = None) -> None:
    logger = logging.getLogger("blogsphere")
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(request_id)s | %(name)s | %(message)s"
    )
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    logger.addHandler(handler)
    logger.setLevel((level or settings.LOG_LEVEL).upper())


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"blogsphere.{name}")


def set_request_id(value: Optional[str] = None) -> str:
    token = value or uuid.uuid4().hex
    _request_id.set(token)
    return token


def get_request_id() -> Optional[str]:
    return _request_id.get()
