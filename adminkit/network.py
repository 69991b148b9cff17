"""Client address resolution for incoming requests."""

from __future__ import annotations

from collections.abc import Mapping

_LOOPBACK = "127.0.0.1"


def _header(headers: Mapping[str, str], name: str) -> str:
    wanted = name.lower()
    return next(
        (value for key, value in headers.items() if key.lower() == wanted), ""
    )


def get_client_ip(client_ip: str, remote_ip: str, headers: Mapping[str, str]) -> str:
    """Pick the most specific non-loopback address for the caller."""
    ip = _header(headers, "X-Forwarded-For")
    if _LOOPBACK in ip or ip == "":
        ip = _header(headers, "X-Real-Ip")
    if ip == "":
        ip = _LOOPBACK
    if remote_ip != _LOOPBACK:
        ip = remote_ip
    if client_ip != _LOOPBACK:
        ip = client_ip
    return ip