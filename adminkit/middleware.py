"""Request middleware: error recovery, demo mode, cache and security headers,
request ids, role checks and operation-log records."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Any

from adminkit.settings import is_casbin_excluded

_log = logging.getLogger("adminkit.middleware")

DEMO_MESSAGE = "谢谢您的参与，但为了大家更好的体验，所以本次提交就算了吧！\U0001F600\U0001F600\U0001F600"
FORBIDDEN_MESSAGE = "对不起，您没有该接口访问权限，请联系管理员"

# Operation log status values: 1 normal, 2 closed.
OPERA_STATUS_ENABLED = "1"
OPERA_STATUS_DISABLED = "2"

# Panics in these classes are reported to the client instead of propagating.
_RUNTIME_ERRORS = (ArithmeticError, LookupError, AttributeError, TypeError, RecursionError)


@dataclass
class Request:
    """The parts of an HTTP request the middleware looks at."""

    method: str = "GET"
    uri: str = "/"
    path: str = ""
    host: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    tls: bool = False
    full_path: str = ""

    def __post_init__(self) -> None:
        if not self.path:
            self.path = self.uri.split("?", 1)[0]

    def header(self, name: str) -> str:
        wanted = name.lower()
        return next((v for k, v in self.headers.items() if k.lower() == wanted), "")

    def set_header(self, name: str, value: str) -> None:
        wanted = name.lower()
        for key in [k for k in self.headers if k.lower() == wanted]:
            del self.headers[key]
        self.headers[name] = value

    @property
    def user_agent(self) -> str:
        return self.header("User-Agent")


def custom_error(panic: Any) -> dict[str, Any] | None:
    """Turn a recovered failure into a JSON body, or re-raise what cannot be handled.

    Strings of the form ``CustomError#<status>#<message>`` carry their own code;
    when the status is not a number no body is produced.
    """
    if isinstance(panic, str):
        parts = panic.split("#")
        if len(parts) == 3 and parts[0] == "CustomError":
            try:
                status_code = int(parts[1])
            except ValueError:
                return None
            _log.error(
                "%s [ERROR] %s %s",
                datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                status_code,
                parts[2],
            )
            return {"code": status_code, "msg": parts[2]}
        return {"code": 500, "msg": panic}
    if isinstance(panic, _RUNTIME_ERRORS):
        return {"code": 500, "msg": str(panic)}
    if isinstance(panic, BaseException):
        raise panic
    raise RuntimeError(panic)


def demo_env(mode: str, request: Request) -> dict[str, Any] | None:
    """In demo mode, refuse writes other than login and logout."""
    if mode != "demo":
        return None
    if request.method in ("GET", "OPTIONS") or request.uri in ("/api/v1/login", "/api/v1/logout"):
        return None
    return {"code": 500, "msg": DEMO_MESSAGE}


def no_cache_headers(now: datetime | None = None) -> dict[str, str]:
    """Headers that stop clients from caching the response."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return {
        "Cache-Control": "no-cache, no-store, max-age=0, must-revalidate, value",
        "Expires": "Thu, 01 Jan 1970 00:00:00 GMT",
        "Last-Modified": format_datetime(now.astimezone(timezone.utc), usegmt=True),
    }


def options_headers(request: Request) -> dict[str, str] | None:
    """Headers answering a CORS pre-flight; None when the request is not OPTIONS."""
    if request.method != "OPTIONS":
        return None
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
        "Access-Control-Allow-Headers": "authorization, origin, content-type, accept",
        "Allow": "HEAD,GET,POST,PUT,PATCH,DELETE,OPTIONS",
        "Content-Type": "application/json",
    }


def secure_headers(request: Request) -> dict[str, str]:
    """Security and resource-access headers."""
    headers = {
        "Access-Control-Allow-Origin": "*",
        "X-Content-Type-Options": "nosniff",
        "X-XSS-Protection": "1; mode=block",
    }
    if request.tls:
        headers["Strict-Transport-Security"] = "max-age=31536000"
    return headers


def ensure_request_id(request: Request, traffic_key: str) -> str | None:
    """Give the request an id, reusing one the client sent; OPTIONS requests get none."""
    if request.method == "OPTIONS":
        return None
    request_id = request.header(traffic_key) or request.header(traffic_key.lower())
    if not request_id:
        request_id = str(uuid.uuid4())
    request.set_header(traffic_key, request_id)
    return request_id


def auth_check_role(
    claims: Mapping[str, Any],
    request: Request,
    enforce: Callable[[Any, str, str], bool],
) -> dict[str, Any] | None:
    """Check a role against the policy; None lets the request through, else a JSON body."""
    role = claims.get("rolekey")
    if role == "admin":
        return None
    if is_casbin_excluded(request.path, request.method):
        _log.info("Casbin exclusion, no validation method:%s path:%s", request.method, request.path)
        return None
    try:
        allowed = enforce(role, request.path, request.method)
    except Exception as exc:  # the enforcer may fail for any reason
        _log.error("AuthCheckRole error:%s method:%s path:%s", exc, request.method, request.path)
        return {"code": 500, "msg": str(exc)}
    if allowed:
        _log.info("isTrue: %s role: %s method: %s path: %s", allowed, role, request.method, request.path)
        return None
    _log.warning("isTrue: %s role: %s method: %s path: %s", allowed, role, request.method, request.path)
    return {"code": 403, "msg": FORBIDDEN_MESSAGE}


def _format_fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def _format_duration(latency: timedelta) -> str:
    ns = (latency.days * 86_400 + latency.seconds) * 1_000_000_000 + latency.microseconds * 1_000
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_format_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_format_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    text = f"{_format_fraction(rest, 1_000_000_000)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def _should_record(request: Request, status_code: int, db_logging: bool) -> bool:
    """Whether a finished request goes to the operation log."""
    if "logout" in request.uri or "login" in request.uri:
        return False
    if request.method == "OPTIONS":
        return False
    return db_logging and status_code != 404


def build_operation_log(
    request: Request,
    client_ip: str,
    status_code: int,
    latency: timedelta,
    body: str,
    result: str,
    status: int,
    user_name: str,
    user_id: int,
) -> dict[str, Any]:
    """The operation-log record queued for a finished request."""
    return {
        "_fullPath": request.full_path,
        "operUrl": request.uri,
        "operIp": client_ip,
        "operLocation": "",
        "operName": user_name,
        "requestMethod": request.method,
        "operParam": body,
        "operTime": datetime.now(),
        "jsonResult": result,
        "latencyTime": _format_duration(latency),
        "statusCode": status_code,
        "userAgent": request.user_agent,
        "createBy": user_id,
        "updateBy": user_id,
        "status": OPERA_STATUS_ENABLED if status == 200 else OPERA_STATUS_DISABLED,
    }