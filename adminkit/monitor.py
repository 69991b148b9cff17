"""Server health snapshot: host, memory, CPU, disk and network throughput."""

from __future__ import annotations

import os
import platform
import socket
import sys
import threading
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import psutil

B = 1
KB = 1024 * B
MB = 1024 * KB
GB = 1024 * MB

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_UINT64 = 1 << 64

EXCLUDE_NET_INTERFACES = ("lo", "tun", "docker", "veth", "br-", "vmbr", "vnet", "kube")


def _parse_local(text: str) -> datetime | None:
    try:
        return datetime.strptime(text, _TIME_FORMAT).astimezone()
    except ValueError:
        return None


def get_hour_differ(start_time: str, end_time: str) -> int:
    """Whole hours from ``start_time`` to ``end_time``; 0 unless the end is later.

    An unparsable start counts as the earliest possible time.
    """
    end = _parse_local(end_time)
    if end is None:
        return 0
    start = _parse_local(start_time) or datetime.min.replace(tzinfo=timezone.utc)
    if not start < end:
        return 0
    return int((end - start).total_seconds()) // 3600


def is_list_contains_str(items: Any, text: str) -> bool:
    """Whether any item occurs inside ``text``."""
    return any(item in text for item in items)


class NetworkSpeedTracker:
    """Bytes-per-second throughput computed between successive counter readings."""

    def __init__(self) -> None:
        self.in_speed = 0
        self.out_speed = 0
        self.in_transfer = 0
        self.out_transfer = 0
        self.last_update = 0

    def update(self, counters: Mapping[str, Any], now: int) -> tuple[int, int]:
        """Take a per-interface reading at ``now`` (seconds); return (in, out) speed.

        ``counters`` maps interface names to objects with ``bytes_recv`` and
        ``bytes_sent``. Virtual and loopback interfaces are ignored.
        """
        total_in = 0
        total_out = 0
        for name, counter in counters.items():
            if is_list_contains_str(EXCLUDE_NET_INTERFACES, name):
                continue
            total_in += counter.bytes_recv
            total_out += counter.bytes_sent
        now = int(now)
        diff = (now - self.last_update) % _UINT64
        if diff > 0:
            self.in_speed = ((total_in - self.in_transfer) % _UINT64) // diff
            self.out_speed = ((total_out - self.out_transfer) % _UINT64) // diff
        self.in_transfer = total_in
        self.out_transfer = total_out
        self.last_update = now
        return self.in_speed, self.out_speed


_TRACKER = NetworkSpeedTracker()


def _local_host() -> str:
    for addresses in psutil.net_if_addrs().values():
        for address in addresses:
            if address.family == socket.AF_INET and not address.address.startswith("127."):
                return address.address
    return ""


def _os_info() -> dict[str, Any]:
    return {
        "goOs": sys.platform,
        "arch": platform.machine(),
        "mem": 0,
        "compiler": platform.python_implementation(),
        "version": platform.python_version(),
        "numGoroutine": threading.active_count(),
        "ip": _local_host(),
        "projectDir": os.getcwd(),
        "hostName": socket.gethostname(),
        "time": datetime.now().strftime(_TIME_FORMAT),
    }


def server_info(tracker: NetworkSpeedTracker | None = None) -> dict[str, Any]:
    """A snapshot of the host's resources, shaped as the monitor endpoint answers."""
    if tracker is None:
        tracker = _TRACKER

    memory = psutil.virtual_memory()
    swap = psutil.swap_memory()
    mem_info = {
        "used": memory.used // MB,
        "total": memory.total // MB,
        "percent": round(memory.percent, 2),
    }
    swap_info = {"used": swap.total - swap.free, "total": swap.total}

    cpu_info = {
        "cpuInfo": [{
            "modelName": platform.processor(),
            "cores": psutil.cpu_count(logical=True) or 0,
        }],
        "percent": round(psutil.cpu_percent(interval=None), 2),
        "cpuNum": psutil.cpu_count(logical=False) or 0,
    }

    usage = psutil.disk_usage(os.path.abspath(os.sep))
    disk_info = {
        "total": float(usage.total // GB),
        "used": float(usage.used // GB),
        "percent": round(usage.percent, 2),
    }

    tracker.update(psutil.net_io_counters(pernic=True), int(time.time()))
    net_info = {
        "in": round(float(tracker.in_speed // KB), 2),
        "out": round(float(tracker.out_speed // KB), 2),
    }

    boot = datetime.fromtimestamp(int(psutil.boot_time()))
    return {
        "code": 200,
        "os": _os_info(),
        "mem": mem_info,
        "cpu": cpu_info,
        "disk": disk_info,
        "net": net_info,
        "swap": swap_info,
        "location": "Aliyun",
        "bootTime": get_hour_differ(
            boot.strftime(_TIME_FORMAT), datetime.now().strftime(_TIME_FORMAT)
        ),
    }