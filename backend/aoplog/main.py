from fastapi import FastAPI

from aoplog.aop import InterceptedCallError, Interceptor, LogEmitter, LogRegistry, Pointcut, weave
from aoplog.api import users
from aoplog.config import settings
from aoplog.middlewares.exception_handlers import (
    intercepted_call_exception_handler,
    unhandled_exception_handler,
)
from aoplog.middlewares.http_logging import HttpLoggingMiddleware
from aoplog.observability.logging import get_logger, setup_logging
from aoplog.services.users import UserService

setup_logging()

logger = get_logger("aoplog")

registry = LogRegistry()
emitter = LogEmitter(
    get_logger("aoplog.method"),
    queue_size=settings.log_queue_size,
    drain_timeout=settings.log_drain_timeout_seconds,
)
interceptor = Interceptor(
    registry,
    emitter,
    logger=get_logger("aoplog.interceptor"),
    pointcut=Pointcut(settings.pointcut_include, settings.pointcut_exclude.split(",")),
    log_arguments=settings.log_arguments,
    log_results=settings.log_results,
)

for woven_class in (users.UserController, UserService):
    registry.scan(woven_class)
    weave(woven_class, interceptor)

app = FastAPI(title="aoplog API", version="0.1.0")
app.add_middleware(HttpLoggingMiddleware)
app.add_exception_handler(InterceptedCallError, intercepted_call_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(users.router)


@app.on_event("startup")
def start_log_emitter() -> None:
    logger.info("log_emitter_starting", extra={"registered_methods": len(registry)})
    emitter.start()


@app.on_event("shutdown")
def drain_log_emitter() -> None:
    logger.info("log_emitter_draining", extra=emitter.health())
    emitter.shutdown()


@app.get("/health")
def health():
    return {"status": "ok", "environment": settings.environment, "log_emitter": emitter.health()}
