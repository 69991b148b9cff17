"""Row-level data permissions derived from a user's role."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

PERMISSION_KEY = "dataPermission"


class PermissionLookupError(Exception):
    """The user's permission data could not be read."""


@dataclass
class DataPermission:
    """The data scope and identity of the requesting user."""

    data_scope: str = ""
    user_id: int = 0
    dept_id: int = 0
    role_id: int = 0


class Scope(NamedTuple):
    """A WHERE fragment with its parameters."""

    clause: str
    params: list[Any]


def permission_scope(table_name: str, permission: DataPermission, enabled: bool) -> Scope | None:
    """The restriction a data scope puts on ``table_name``; None means no restriction."""
    if not enabled:
        return None
    scope = permission.data_scope
    if scope == "2":
        return Scope(
            table_name + ".create_by in (select sys_user.user_id from sys_role_dept "
            "left join sys_user on sys_user.dept_id=sys_role_dept.dept_id "
            "where sys_role_dept.role_id = ?)",
            [permission.role_id],
        )
    if scope == "3":
        return Scope(
            table_name + ".create_by in (SELECT user_id from sys_user where dept_id = ? )",
            [permission.dept_id],
        )
    if scope == "4":
        return Scope(
            table_name + ".create_by in (SELECT user_id from sys_user where sys_user.dept_id "
            "in(select dept_id from sys_dept where dept_path like ? ))",
            ["%/" + str(permission.dept_id) + "/%"],
        )
    if scope == "5":
        return Scope(table_name + ".create_by = ?", [permission.user_id])
    return None


_QUERY = (
    "SELECT sys_user.user_id, sys_role.role_id, sys_user.dept_id, sys_role.data_scope "
    "FROM sys_user LEFT JOIN sys_role ON sys_role.role_id = sys_user.role_id "
    "WHERE sys_user.user_id = ?"
)


def load_data_permission(conn: Any, user_id: Any) -> DataPermission:
    """Read a user's data permission; an unknown user yields an empty one."""
    try:
        cursor = conn.cursor()
        cursor.execute(_QUERY, (user_id,))
        row = cursor.fetchone()
    except Exception as exc:  # any driver error
        raise PermissionLookupError("获取用户数据出错 msg:" + str(exc)) from exc
    if row is None:
        return DataPermission()
    uid, role_id, dept_id, data_scope = row
    return DataPermission(
        data_scope="" if data_scope is None else str(data_scope),
        user_id=uid or 0,
        dept_id=dept_id or 0,
        role_id=role_id or 0,
    )