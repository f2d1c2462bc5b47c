"""
Access Log Middleware for aiohttp

Writes one summary line per handled request:

    203.0.113.7 GET /api/status?verbose=1 200 "curl/8.4.0"

Status classification:
- 400-499 -> warn
- 500+    -> error
- other   -> info

Handlers can attach per-request errors with add_request_error(); they are
written as one extra error line after the summary.

Usage:
    app = web.Application(middlewares=[access_log_middleware()])
    app = web.Application(middlewares=[access_log_middleware(my_log)])
"""

import asyncio
from typing import List, Optional

from aiohttp import web

from rotlog import registry
from rotlog.levels import ERROR, INFO, WARN
from rotlog.rotating_log import RotatingLog

REQUEST_ERRORS_KEY = 'rotlog_errors'

# Status recorded when the client goes away before a response is produced
CLIENT_CLOSED_STATUS = 499


def add_request_error(request: web.Request, message: str):
    """Record an error for this request; logged after the response."""
    errors: List[str] = request.setdefault(REQUEST_ERRORS_KEY, [])
    errors.append(message)


def status_level(status: int) -> str:
    if 400 <= status < 500:
        return WARN
    if status >= 500:
        return ERROR
    return INFO


def client_ip(request: web.Request) -> str:
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    return request.remote or '-'


def format_access_line(request: web.Request, status: int) -> str:
    user_agent = request.headers.get('User-Agent', '')
    return f'{client_ip(request)} {request.method} {request.path_qs} {status} "{user_agent}"'


def access_log_middleware(log: Optional[RotatingLog] = None):
    """
    Build the middleware.

    Args:
        log: RotatingLog to write to (default: the global log at request time)
    """

    def write(level: str, message: str):
        if log is None:
            registry.log(level, message)
        else:
            log.log(level, message)

    @web.middleware
    async def middleware(request: web.Request, handler):
        status = 500
        try:
            response = await handler(request)
            status = response.status
            return response
        except web.HTTPException as e:
            status = e.status
            raise
        except asyncio.CancelledError:
            status = CLIENT_CLOSED_STATUS
            add_request_error(request, 'request cancelled')
            raise
        except Exception as e:
            add_request_error(request, f"{type(e).__name__}: {e}")
            raise
        finally:
            write(status_level(status), format_access_line(request, status))
            errors = request.get(REQUEST_ERRORS_KEY)
            if errors:
                write(ERROR, '; '.join(errors))

    return middleware
