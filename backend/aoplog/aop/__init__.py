from aoplog.aop.annotations import controller_log, service_log
from aoplog.aop.emitter import LogEmitter
from aoplog.aop.enums import AnnotationType
from aoplog.aop.errors import InterceptedCallError
from aoplog.aop.interceptor import CallSite, Interceptor, Pointcut, weave
from aoplog.aop.registry import LogRegistry
from aoplog.aop.strategy import LogStrategy, StrategyTemplate

__all__ = [
    "AnnotationType",
    "CallSite",
    "Interceptor",
    "InterceptedCallError",
    "LogEmitter",
    "LogRegistry",
    "LogStrategy",
    "Pointcut",
    "StrategyTemplate",
    "controller_log",
    "service_log",
    "weave",
]
