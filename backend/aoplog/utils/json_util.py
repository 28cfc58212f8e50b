"""Serialização JSON tolerante para argumentos e retornos de métodos."""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic_core import to_jsonable_python

logger = logging.getLogger("aoplog.json")


def to_json_string(value: Any) -> str:
    """Serializa ``value`` em JSON; nunca levanta, cai para ``repr`` em falhas."""
    try:
        return json.dumps(to_jsonable_python(value, fallback=repr), ensure_ascii=False)
    except Exception:
        logger.debug("json_serialization_failed", exc_info=True, extra={"value_type": type(value).__name__})
        return repr(value)


def serialize_arguments(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    if kwargs:
        return to_json_string({"args": list(args), "kwargs": kwargs})
    return to_json_string(list(args))
