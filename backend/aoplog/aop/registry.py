"""Tabela explícita de métodos marcados, montada na inicialização."""
from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from threading import Lock
from typing import Any

from aoplog.aop.annotations import get_tag
from aoplog.aop.strategy import StrategyTemplate

logger = logging.getLogger("aoplog.registry")

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def type_key(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def method_arity(fn: Callable[..., Any]) -> tuple[int, int | None]:
    """Retorna (mínimo, máximo) de argumentos aceitos, sem contar ``self``.

    Com ``*args`` ou ``**kwargs`` não há máximo e o segundo valor é ``None``.
    """
    signature = inspect.signature(fn)
    variadic = any(p.kind in _VARIADIC for p in signature.parameters.values())
    params = [p for p in signature.parameters.values() if p.kind not in _VARIADIC]
    if params and params[0].name == "self":
        params = params[1:]
    required = [p for p in params if p.default is inspect.Parameter.empty]
    return len(required), None if variadic else len(params)


class LogRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, dict[str, list[StrategyTemplate]]] = {}
        self._lock = Lock()

    def register(self, owner: type | str, template: StrategyTemplate) -> None:
        key = owner if isinstance(owner, str) else type_key(owner)
        with self._lock:
            methods = self._entries.setdefault(key, {})
            methods.setdefault(template.method_name, []).append(template)
        logger.debug(
            "log_strategy_registered",
            extra={
                "owner": key,
                "method_name": template.method_name,
                "location": template.location.value,
                "asynchronous": template.asynchronous,
            },
        )

    def scan(self, cls: type) -> int:
        count = 0
        for name, attr in vars(cls).items():
            if not inspect.isfunction(attr):
                continue
            tag = get_tag(attr)
            if tag is None:
                continue
            min_arity, max_arity = method_arity(attr)
            self.register(
                cls,
                StrategyTemplate(
                    qualname=f"{type_key(cls)}.{name}",
                    method_name=name,
                    arity=max_arity,
                    description=tag.description,
                    asynchronous=tag.asynchronous,
                    location=tag.location,
                    min_arity=min_arity,
                ),
            )
            count += 1
        return count

    def lookup(self, target_type: type, method_name: str, arity: int) -> StrategyTemplate | None:
        if not isinstance(target_type, type):
            raise TypeError(f"Cannot resolve type for target {target_type!r}")
        for klass in target_type.__mro__:
            with self._lock:
                candidates = list(self._entries.get(type_key(klass), {}).get(method_name, ()))
            for template in candidates:
                if template.accepts(arity):
                    return template
            # Uma sobrescrita sem marcação esconde a marcação da classe base.
            if method_name in vars(klass):
                return None
        return None

    def __len__(self) -> int:
        with self._lock:
            return sum(len(templates) for methods in self._entries.values() for templates in methods.values())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
