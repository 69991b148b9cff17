"""Application-wide settings: version, queue topics, extension config and the
list of routes that bypass role-based access checks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

VERSION = "2.1.2"

# Queue topics used for asynchronous bookkeeping.
LOGIN_LOG = "login_log_queue"
OPERATE_LOG = "operate_log_queue"
API_CHECK = "api_check_queue"


@dataclass(frozen=True)
class UrlInfo:
    """A route pattern paired with an HTTP method."""

    url: str
    method: str


@dataclass
class AMap:
    """Map-service credentials from the ``extend`` configuration section."""

    key: str = ""


@dataclass
class Extend:
    """Extension configuration loaded alongside the main settings."""

    amap: AMap = field(default_factory=AMap)


EXT_CONFIG = Extend()

CASBIN_EXCLUDE: tuple[UrlInfo, ...] = (
    UrlInfo("/api/v1/dict/type-option-select", "GET"),
    UrlInfo("/api/v1/dict-data/option-select", "GET"),
    UrlInfo("/api/v1/deptTree", "GET"),
    UrlInfo("/api/v1/db/tables/page", "GET"),
    UrlInfo("/api/v1/db/columns/page", "GET"),
    UrlInfo("/api/v1/gen/toproject/:tableId", "GET"),
    UrlInfo("/api/v1/gen/todb/:tableId", "GET"),
    UrlInfo("/api/v1/gen/tabletree", "GET"),
    UrlInfo("/api/v1/gen/preview/:tableId", "GET"),
    UrlInfo("/api/v1/gen/apitofile/:tableId", "GET"),
    UrlInfo("/api/v1/getCaptcha", "GET"),
    UrlInfo("/api/v1/getinfo", "GET"),
    UrlInfo("/api/v1/menuTreeselect", "GET"),
    UrlInfo("/api/v1/menurole", "GET"),
    UrlInfo("/api/v1/menuids", "GET"),
    UrlInfo("/api/v1/roleMenuTreeselect/:roleId", "GET"),
    UrlInfo("/api/v1/roleDeptTreeselect/:roleId", "GET"),
    UrlInfo("/api/v1/refresh_token", "GET"),
    UrlInfo("/api/v1/configKey/:configKey", "GET"),
    UrlInfo("/api/v1/app-config", "GET"),
    UrlInfo("/api/v1/user/profile", "GET"),
    UrlInfo("/info", "GET"),
    UrlInfo("/api/v1/login", "POST"),
    UrlInfo("/api/v1/logout", "POST"),
    UrlInfo("/api/v1/user/avatar", "POST"),
    UrlInfo("/api/v1/user/pwd", "PUT"),
    UrlInfo("/api/v1/metrics", "GET"),
    UrlInfo("/api/v1/health", "GET"),
    UrlInfo("/", "GET"),
    UrlInfo("/api/v1/server-monitor", "GET"),
    UrlInfo("/api/v1/public/uploadFile", "POST"),
    UrlInfo("/api/v1/user/pwd/set", "PUT"),
    UrlInfo("/api/v1/sys-user", "PUT"),
)

_PARAM = re.compile(r":[^/]+")


def key_match2(key1: str, key2: str) -> bool:
    """Match a path against a route pattern with ``:param`` and ``/*`` parts."""
    pattern = key2.replace("/*", "/.*")
    pattern = _PARAM.sub("[^/]+", pattern)
    return re.search("^" + pattern + r"\Z", key1) is not None


def is_casbin_excluded(path: str, method: str) -> bool:
    """Whether a request skips the role check."""
    return any(
        key_match2(path, info.url) and method == info.method
        for info in CASBIN_EXCLUDE
    )