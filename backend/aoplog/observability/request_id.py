"""Gerencia request id e IP do cliente via contextvars para rastreio de logs."""
import contextvars
import logging
import uuid

# Contexto por request para correlação de logs.
request_id_ctx_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
client_ip_ctx_var: contextvars.ContextVar[str] = contextvars.ContextVar("client_ip", default="")


def get_request_id() -> str:
    return request_id_ctx_var.get() or ""


def set_request_id(value: str) -> None:
    request_id_ctx_var.set(value)


def new_request_id() -> str:
    return str(uuid.uuid4())


def get_client_ip() -> str:
    return client_ip_ctx_var.get() or ""


def set_client_ip(value: str) -> None:
    client_ip_ctx_var.set(value)


class RequestIdFilter(logging.Filter):
    """Filtro de log que injeta request_id nos registros."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None) or get_request_id() or "-"
        return True
