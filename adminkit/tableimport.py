"""Building generator table definitions from live database schema information."""

from __future__ import annotations

from collections.abc import Iterable

from adminkit.dbinfo import EMPTY_TABLE_NAME, DbColumn, DbTable
from adminkit.gentables import SysColumn, SysTable

DEFAULT_PACKAGE = "admin"
DEFAULT_AUTHOR = "adminkit"


def camel_names(name: str) -> tuple[str, str]:
    """Upper and lower camel-case forms of a snake_case name."""
    upper: list[str] = []
    lower: list[str] = []
    for index, part in enumerate(name.split("_")):
        head, tail = part[:1], part[1:]
        upper.append(head.upper() + tail)
        lower.append((head.lower() if index == 0 else head.upper()) + tail)
    return "".join(upper), "".join(lower)


def _types_for(column_type: str, primary: bool) -> tuple[str, str]:
    """The model field type and the form widget for a database column type."""
    if "int" in column_type:
        return ("int" if primary else "string"), "input"
    if "timestamp" in column_type or "datetime" in column_type:
        return "time.Time", "datetime"
    return "string", "input"


def column_from_db(db_column: DbColumn, sort: int) -> SysColumn:
    """Generator metadata for one live column, placed at position ``sort``."""
    go_field, json_field = camel_names(db_column.column_name)
    primary = "PR" in db_column.column_key
    required = "NO" in db_column.is_nullable
    go_type, html_type = _types_for(db_column.column_type, primary)
    return SysColumn(
        column_comment=db_column.column_comment,
        column_name=db_column.column_name,
        column_type=db_column.column_type,
        sort=sort,
        insert=True,
        is_insert="1",
        query_type="EQ",
        is_pk="1" if primary else "0",
        pk=primary,
        go_field=go_field,
        json_field=json_field,
        is_required="1" if required else "0",
        required=required,
        go_type=go_type,
        html_type=html_type,
    )


def gen_table_init(
    table_name: str, db_table: DbTable, db_columns: Iterable[DbColumn]
) -> SysTable:
    """A new generator table definition for a live table and its columns."""
    if not table_name:
        raise ValueError(EMPTY_TABLE_NAME)
    class_name, business_name = camel_names(table_name)
    comment = db_table.table_comment or class_name
    table = SysTable(
        tb_name=table_name,
        create_by=0,
        class_name=class_name,
        business_name=business_name,
        package_name=DEFAULT_PACKAGE,
        tpl_category="crud",
        crud=True,
        module_name=table_name.replace("_", "-"),
        table_comment=comment,
        function_name=comment,
        is_logical_delete="1",
        logical_delete=True,
        logical_delete_column="is_del",
        is_actions=2,
        is_data_scope=1,
        is_auth=1,
        function_author=DEFAULT_AUTHOR,
    )
    for sort, db_column in enumerate(db_columns, start=1):
        column = column_from_db(db_column, sort)
        if column.pk:
            table.pk_column = db_column.column_name
            table.pk_go_field = column.go_field
            table.pk_json_field = column.json_field
        table.columns.append(column)
    return table


def split_table_names(tables: str) -> list[str]:
    """The table names of a comma-separated form value."""
    return tables.split(",")