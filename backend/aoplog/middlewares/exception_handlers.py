from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from aoplog.aop.errors import InterceptedCallError
from aoplog.observability.logging import get_logger

log = get_logger("aoplog.errors")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception(
        "unhandled_exception",
        extra={"method": request.method, "path": str(request.url.path)},
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "requestId": _request_id(request)},
    )


async def intercepted_call_exception_handler(request: Request, exc: InterceptedCallError):
    cause = exc.__cause__
    if isinstance(cause, HTTPException):
        return JSONResponse(
            status_code=cause.status_code,
            content={"detail": cause.detail, "request_id": _request_id(request)},
            headers=cause.headers,
        )
    log.error(
        "intercepted_call_failed",
        extra={
            "method": request.method,
            "path": str(request.url.path),
            "class_name": exc.class_name,
            "method_name": exc.method_name,
            "cause": type(cause).__name__ if cause else None,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "requestId": _request_id(request)},
    )
