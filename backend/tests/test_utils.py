"""Testes dos utilitários de serialização, contexto HTTP e thread."""
import threading
from datetime import date

from pydantic import BaseModel

from aoplog.observability.request_id import set_client_ip
from aoplog.utils.http_context import extract_client_ip, get_ip_address
from aoplog.utils.json_util import serialize_arguments, to_json_string
from aoplog.utils.thread_util import get_thread_id


class Payload(BaseModel):
    name: str


class Opaque:
    __slots__ = ()

    def __repr__(self):
        return "<opaque>"


def test_to_json_string_handles_models_and_dates():
    assert to_json_string({"p": Payload(name="ana"), "d": date(2024, 1, 2)}) == '{"p": {"name": "ana"}, "d": "2024-01-02"}'
    assert to_json_string(None) == "null"
    assert to_json_string("ção") == '"ção"'


def test_to_json_string_falls_back_to_repr():
    # Objetos sem forma JSON viram repr em vez de falhar a chamada.
    assert to_json_string([Opaque()]) == '["<opaque>"]'


def test_serialize_arguments_only_wraps_when_kwargs_present():
    assert serialize_arguments((1, "a"), {}) == '[1, "a"]'
    assert serialize_arguments((), {"x": 1}) == '{"args": [], "kwargs": {"x": 1}}'


def test_extract_client_ip_prefers_forwarded_header():
    assert extract_client_ip(" , 10.0.0.1, 10.0.0.2", "127.0.0.1") == "10.0.0.1"
    assert extract_client_ip("", "127.0.0.1") == "127.0.0.1"
    assert extract_client_ip("", None) == "unknown"


def test_get_ip_address_reads_request_context():
    set_client_ip("")
    assert get_ip_address() == "unknown"
    set_client_ip("192.168.0.9")
    assert get_ip_address() == "192.168.0.9"
    set_client_ip("")


def test_get_thread_id_is_current_thread():
    assert get_thread_id() == threading.get_ident()
