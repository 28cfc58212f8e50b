"""Marcadores ``controller_log`` / ``service_log`` aplicados a métodos."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from aoplog.aop.enums import AnnotationType

F = TypeVar("F", bound=Callable[..., Any])

TAGS_ATTR = "__aoplog_tags__"


@dataclass(frozen=True)
class LogTag:
    location: AnnotationType
    description: str
    asynchronous: bool


def _tag(location: AnnotationType, description: str, asynchronous: bool) -> Callable[[F], F]:
    def deco(fn: F) -> F:
        tags = getattr(fn, TAGS_ATTR, ())
        setattr(fn, TAGS_ATTR, tags + (LogTag(location, description, asynchronous),))
        return fn

    return deco


def controller_log(description: str = "", *, asynchronous: bool = False) -> Callable[[F], F]:
    return _tag(AnnotationType.CONTROLLER, description, asynchronous)


def service_log(description: str = "", *, asynchronous: bool = False) -> Callable[[F], F]:
    return _tag(AnnotationType.SERVICE, description, asynchronous)


def get_tag(fn: Callable[..., Any]) -> LogTag | None:
    tags: tuple[LogTag, ...] = getattr(fn, TAGS_ATTR, ())
    # Controller tem precedência quando as duas marcas estão presentes.
    for location in (AnnotationType.CONTROLLER, AnnotationType.SERVICE):
        for tag in tags:
            if tag.location is location:
                return tag
    return None
