"""Estruturas de dados que descrevem o que registrar para cada chamada."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from aoplog.aop.enums import AnnotationType


@dataclass(frozen=True)
class StrategyTemplate:
    """Registro de inicialização de um método marcado."""
    qualname: str
    method_name: str
    arity: int | None
    description: str
    asynchronous: bool
    location: AnnotationType
    min_arity: int | None = None

    def accepts(self, arity: int) -> bool:
        # arity None: método variádico, sem limite superior.
        if self.arity is None:
            return arity >= (self.min_arity or 0)
        lowest = self.arity if self.min_arity is None else self.min_arity
        return lowest <= arity <= self.arity


@dataclass(frozen=True)
class LogStrategy:
    """Pacote de dados de uma única chamada; imutável depois de ir para o emitter."""
    class_name: str
    method_name: str
    description: str
    location: AnnotationType
    arguments: str
    asynchronous: bool = False
    result: str = "null"
    elapsed_time: float = 0.0
    thread_id: int | None = None
    request_id: str = ""

    @classmethod
    def from_template(cls, template: StrategyTemplate, class_name: str, arguments: str) -> LogStrategy:
        return cls(
            class_name=class_name,
            method_name=template.method_name,
            description=template.description,
            location=template.location,
            arguments=arguments,
            asynchronous=template.asynchronous,
        )

    def complete(self, result: str, elapsed_time: float, thread_id: int, request_id: str = "") -> LogStrategy:
        return replace(
            self,
            result=result,
            elapsed_time=max(elapsed_time, 0.0),
            thread_id=thread_id,
            request_id=request_id,
        )

    def to_extra(self) -> dict[str, Any]:
        extra: dict[str, Any] = {
            "class_name": self.class_name,
            "method_name": self.method_name,
            "description": self.description,
            "location": self.location.value,
            "arguments": self.arguments,
            "result": self.result,
            "elapsed_time": self.elapsed_time,
            "thread_id": self.thread_id,
        }
        if self.request_id:
            extra["request_id"] = self.request_id
        return extra
