import uuid
from datetime import datetime, timedelta, timezone

import pytest

from adminkit.middleware import (
    DEMO_MESSAGE,
    FORBIDDEN_MESSAGE,
    OPERA_STATUS_DISABLED,
    OPERA_STATUS_ENABLED,
    Request,
    _should_record,
    auth_check_role,
    build_operation_log,
    custom_error,
    demo_env,
    ensure_request_id,
    no_cache_headers,
    options_headers,
    secure_headers,
)


def test_custom_error_with_status():
    assert custom_error("CustomError#400#bad input") == {"code": 400, "msg": "bad input"}


def test_custom_error_plain_string():
    assert custom_error("boom") == {"code": 500, "msg": "boom"}


def test_custom_error_bad_status_gives_nothing():
    assert custom_error("CustomError#abc#bad") is None


def test_custom_error_runtime_error():
    assert custom_error(IndexError("out of range")) == {"code": 500, "msg": "out of range"}


def test_custom_error_reraises_others():
    with pytest.raises(ValueError):
        custom_error(ValueError("nope"))


def test_demo_rejects_writes():
    body = demo_env("demo", Request(method="POST", uri="/api/v1/sys-user"))
    assert body == {"code": 500, "msg": DEMO_MESSAGE}


@pytest.mark.parametrize(
    "mode,method,uri",
    [
        ("demo", "GET", "/api/v1/sys-user"),
        ("demo", "OPTIONS", "/x"),
        ("demo", "POST", "/api/v1/login"),
        ("demo", "POST", "/api/v1/logout"),
        ("prod", "POST", "/api/v1/sys-user"),
    ],
)
def test_demo_allows(mode, method, uri):
    assert demo_env(mode, Request(method=method, uri=uri)) is None


def test_no_cache_headers():
    headers = no_cache_headers(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    assert headers["Last-Modified"] == "Tue, 02 Jan 2024 03:04:05 GMT"
    assert headers["Expires"] == "Thu, 01 Jan 1970 00:00:00 GMT"


def test_options_headers():
    assert options_headers(Request(method="GET")) is None
    headers = options_headers(Request(method="OPTIONS"))
    assert headers["Access-Control-Allow-Methods"] == "GET,POST,PUT,PATCH,DELETE,OPTIONS"


def test_secure_headers_hsts_only_with_tls():
    assert "Strict-Transport-Security" not in secure_headers(Request())
    assert secure_headers(Request(tls=True))["Strict-Transport-Security"] == "max-age=31536000"


def test_request_id_reused_case_insensitively():
    req = Request(headers={"x-request-id": "abc"})
    assert ensure_request_id(req, "X-Request-Id") == "abc"
    assert req.headers == {"X-Request-Id": "abc"}


def test_request_id_generated():
    req = Request()
    rid = ensure_request_id(req, "X-Request-Id")
    assert str(uuid.UUID(rid)) == rid
    assert req.header("x-request-id") == rid


def test_request_id_skipped_for_options():
    req = Request(method="OPTIONS")
    assert ensure_request_id(req, "X-Request-Id") is None
    assert req.headers == {}


def _refuse(*_args):
    raise AssertionError("enforcer must not be called")


def test_admin_passes_without_enforcer():
    assert auth_check_role({"rolekey": "admin"}, Request(uri="/any", method="DELETE"), _refuse) is None


def test_excluded_route_passes():
    req = Request(uri="/api/v1/gen/preview/12", method="GET")
    assert auth_check_role({"rolekey": "common"}, req, _refuse) is None


def test_enforcer_decides():
    req = Request(uri="/api/v1/sys-post", method="POST")
    calls = []

    def allow(role, path, method):
        calls.append((role, path, method))
        return True

    assert auth_check_role({"rolekey": "common"}, req, allow) is None
    assert calls == [("common", "/api/v1/sys-post", "POST")]
    denied = auth_check_role({"rolekey": "common"}, req, lambda *a: False)
    assert denied == {"code": 403, "msg": FORBIDDEN_MESSAGE}


def test_enforcer_failure():
    def broken(*_args):
        raise RuntimeError("policy missing")

    body = auth_check_role({"rolekey": "common"}, Request(uri="/x", method="GET"), broken)
    assert body == {"code": 500, "msg": "policy missing"}


def test_operation_log_record():
    req = Request(method="POST", uri="/api/v1/sys-post?x=1", headers={"User-Agent": "tester"})
    record = build_operation_log(req, "10.0.0.1", 200, timedelta(milliseconds=1500), "{}", "{}", 200, "admin", 1)
    assert record["operUrl"] == req.uri
    assert record["userAgent"] == "tester"
    assert record["status"] == OPERA_STATUS_ENABLED
    assert record["latencyTime"] == "1.5s"
    assert (record["createBy"], record["updateBy"]) == (1, 1)


def test_operation_log_failure_status_and_small_latency():
    record = build_operation_log(Request(), "ip", 500, timedelta(microseconds=250), "", "", 500, "", 0)
    assert record["status"] == OPERA_STATUS_DISABLED
    assert record["latencyTime"] == "250µs"


@pytest.mark.parametrize(
    "uri,method,status,enabled,expected",
    [
        ("/api/v1/sys-post", "POST", 200, True, True),
        ("/api/v1/login", "POST", 200, True, False),
        ("/api/v1/sys-post", "OPTIONS", 200, True, False),
        ("/api/v1/sys-post", "POST", 404, True, False),
        ("/api/v1/sys-post", "POST", 200, False, False),
    ],
)
def test_should_record(uri, method, status, enabled, expected):
    assert _should_record(Request(uri=uri, method=method), status, enabled) is expected