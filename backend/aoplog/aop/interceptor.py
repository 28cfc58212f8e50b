"""Interceptação de métodos: mede duração, resolve a estratégia e emite o log."""
from __future__ import annotations

import functools
import inspect
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from aoplog.aop.emitter import LogEmitter
from aoplog.aop.errors import InterceptedCallError
from aoplog.aop.registry import LogRegistry
from aoplog.aop.strategy import LogStrategy
from aoplog.observability.request_id import get_request_id
from aoplog.utils.http_context import get_ip_address
from aoplog.utils.json_util import serialize_arguments, to_json_string
from aoplog.utils.thread_util import get_thread_id

WOVEN_ATTR = "__aoplog_woven__"
OMITTED = '"<omitted>"'


def _under(module_name: str, prefix: str) -> bool:
    return module_name == prefix or module_name.startswith(prefix + ".")


class Pointcut:
    """Seleciona funções pelo módulo: dentro de ``include`` e fora de ``exclude``."""

    def __init__(self, include: str = "aoplog", exclude: Iterable[str] = ("aoplog.config",)):
        self.include = include
        self.exclude = tuple(p.strip() for p in exclude if p and p.strip())

    def matches(self, module_name: str | None) -> bool:
        if not module_name or not _under(module_name, self.include):
            return False
        return not any(_under(module_name, prefix) for prefix in self.exclude)


@dataclass(frozen=True)
class CallSite:
    target: Any
    function: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def target_type(self) -> type:
        return type(self.target)

    @property
    def class_name(self) -> str:
        owner = self.function.__qualname__.rpartition(".")[0] or self.target_type.__qualname__
        return f"{self.function.__module__}.{owner}"

    @property
    def method_name(self) -> str:
        return self.function.__name__

    @property
    def arity(self) -> int:
        return len(self.args) + len(self.kwargs)

    def proceed(self) -> Any:
        return self.function(self.target, *self.args, **self.kwargs)


class Interceptor:
    def __init__(
        self,
        registry: LogRegistry,
        emitter: LogEmitter,
        *,
        logger: logging.Logger | None = None,
        pointcut: Pointcut | None = None,
        log_arguments: bool = True,
        log_results: bool = True,
    ):
        self.registry = registry
        self.emitter = emitter
        self.pointcut = pointcut or Pointcut()
        self.log_arguments = log_arguments
        self.log_results = log_results
        self._logger = logger or logging.getLogger("aoplog.interceptor")

    def intercept(self, call_site: CallSite) -> Any:
        start = time.perf_counter()
        result = None
        try:
            result = call_site.proceed()
        except InterceptedCallError:
            raise
        except Exception as exc:
            self._logger.exception("method_err", extra=self._error_extra(call_site))
            raise InterceptedCallError(call_site.class_name, call_site.method_name, exc) from exc
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._print_log(call_site, result, elapsed_ms)
        return result

    async def intercept_async(self, call_site: CallSite) -> Any:
        start = time.perf_counter()
        result = None
        try:
            result = await call_site.proceed()
        except InterceptedCallError:
            raise
        except Exception as exc:
            self._logger.exception("method_err", extra=self._error_extra(call_site))
            raise InterceptedCallError(call_site.class_name, call_site.method_name, exc) from exc
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._print_log(call_site, result, elapsed_ms)
        return result

    def resolve_strategy(self, call_site: CallSite) -> LogStrategy | None:
        self._logger.debug("call_site_ip", extra={"client_ip": get_ip_address()})
        try:
            template = self.registry.lookup(call_site.target_type, call_site.method_name, call_site.arity)
        except Exception:
            self._logger.exception(
                "strategy_lookup_failed",
                extra={"method_name": call_site.method_name, "arity": call_site.arity},
            )
            return None
        if template is None:
            return None
        arguments = serialize_arguments(call_site.args, call_site.kwargs) if self.log_arguments else OMITTED
        return LogStrategy.from_template(template, call_site.class_name, arguments)

    def wrap(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        if getattr(fn, WOVEN_ATTR, False) or not self.pointcut.matches(getattr(fn, "__module__", None)):
            return fn

        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(target, *args, **kwargs):
                return await self.intercept_async(CallSite(target, fn, args, kwargs))

            wrapper = async_wrapper
        else:
            @functools.wraps(fn)
            def sync_wrapper(target, *args, **kwargs):
                return self.intercept(CallSite(target, fn, args, kwargs))

            wrapper = sync_wrapper

        setattr(wrapper, WOVEN_ATTR, True)
        return wrapper

    def _print_log(self, call_site: CallSite, result: Any, elapsed_ms: float) -> None:
        strategy = self.resolve_strategy(call_site)
        if strategy is None:
            return
        strategy = strategy.complete(
            result=to_json_string(result) if self.log_results else OMITTED,
            elapsed_time=round(elapsed_ms, 2),
            thread_id=get_thread_id(),
            request_id=get_request_id(),
        )
        self.emitter.emit(strategy)

    @staticmethod
    def _error_extra(call_site: CallSite) -> dict[str, Any]:
        return {"class_name": call_site.class_name, "method_name": call_site.method_name}


def weave(cls: type, interceptor: Interceptor) -> type:
    """Envolve os métodos públicos definidos diretamente em ``cls``."""
    for name, attr in list(vars(cls).items()):
        if name.startswith("_") or not inspect.isfunction(attr):
            continue
        setattr(cls, name, interceptor.wrap(attr))
    return cls
