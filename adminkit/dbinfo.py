"""Schema information about live database tables and columns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from adminkit.dto import paginate

EMPTY_TABLE_NAME = "table name cannot be empty！"


class UnsupportedDriverError(Exception):
    """The operation only works against MySQL."""


def _text(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


@dataclass
class DbTable:
    """A row of ``information_schema.tables``."""

    table_name: str = ""
    engine: str = ""
    table_rows: str = ""
    table_collation: str = ""
    create_time: str = ""
    update_time: str = ""
    table_comment: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DbTable":
        return cls(
            table_name=_text(row, "TABLE_NAME"),
            engine=_text(row, "ENGINE"),
            table_rows=_text(row, "TABLE_ROWS"),
            table_collation=_text(row, "TABLE_COLLATION"),
            create_time=_text(row, "CREATE_TIME"),
            update_time=_text(row, "UPDATE_TIME"),
            table_comment=_text(row, "TABLE_COMMENT"),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "tableName": self.table_name,
            "engine": self.engine,
            "tableRows": self.table_rows,
            "tableCollation": self.table_collation,
            "createTime": self.create_time,
            "updateTime": self.update_time,
            "tableComment": self.table_comment,
        }


@dataclass
class DbColumn:
    """A row of ``information_schema.columns``."""

    table_schema: str = ""
    table_name: str = ""
    column_name: str = ""
    column_default: str = ""
    is_nullable: str = ""
    data_type: str = ""
    character_maximum_length: str = ""
    character_set_name: str = ""
    column_type: str = ""
    column_key: str = ""
    extra: str = ""
    column_comment: str = ""
    ordinal_position: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DbColumn":
        position = row.get("ORDINAL_POSITION")
        return cls(
            table_schema=_text(row, "TABLE_SCHEMA"),
            table_name=_text(row, "TABLE_NAME"),
            column_name=_text(row, "COLUMN_NAME"),
            column_default=_text(row, "COLUMN_DEFAULT"),
            is_nullable=_text(row, "IS_NULLABLE"),
            data_type=_text(row, "DATA_TYPE"),
            character_maximum_length=_text(row, "CHARACTER_MAXIMUM_LENGTH"),
            character_set_name=_text(row, "CHARACTER_SET_NAME"),
            column_type=_text(row, "COLUMN_TYPE"),
            column_key=_text(row, "COLUMN_KEY"),
            extra=_text(row, "EXTRA"),
            column_comment=_text(row, "COLUMN_COMMENT"),
            ordinal_position=int(position) if position is not None else 0,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "tableSchema": self.table_schema,
            "tableName": self.table_name,
            "columnName": self.column_name,
            "columnDefault": self.column_default,
            "isNullable": self.is_nullable,
            "dataType": self.data_type,
            "characterMaximumLength": self.character_maximum_length,
            "characterSetName": self.character_set_name,
            "columnType": self.column_type,
            "columnKey": self.column_key,
            "extra": self.extra,
            "columnComment": self.column_comment,
        }


def require_mysql(driver: str) -> None:
    """Refuse any driver other than MySQL."""
    if driver != "mysql":
        raise UnsupportedDriverError("目前只支持mysql数据库")


def table_page(
    tables: Iterable[DbTable], table_name: str, page_size: int, page_index: int
) -> tuple[list[DbTable], int]:
    """One page of tables, optionally filtered by exact name, with the total count."""
    matching = [t for t in tables if not table_name or t.table_name == table_name]
    window = paginate(page_size, page_index)
    if window.limit < 0:
        page = matching[window.offset:]
    else:
        page = list(window.apply(matching))
    return page, len(matching)


def get_db_table(tables: Iterable[DbTable], table_name: str) -> DbTable:
    """The table with the given name."""
    if not table_name:
        raise ValueError(EMPTY_TABLE_NAME)
    for table in tables:
        if table.table_name == table_name:
            return table
    raise LookupError(f"record not found: {table_name}")


def column_list(columns: Iterable[DbColumn], table_name: str) -> list[DbColumn]:
    """The columns of a table in ordinal order."""
    if not table_name:
        raise ValueError(EMPTY_TABLE_NAME)
    return sorted(
        (c for c in columns if c.table_name == table_name),
        key=lambda c: c.ordinal_position,
    )