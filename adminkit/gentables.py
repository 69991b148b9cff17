"""Code-generator table definitions and their column metadata, kept in a store
that filters, pages and soft-deletes the way the generator expects."""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from adminkit.dto import paginate

# Columns every generated model carries; hidden when columns are listed with ``exclude``.
EXCLUDED_COLUMNS = frozenset(
    {"id", "create_by", "update_by", "created_at", "updated_at", "deleted_at"}
)

# Fields that are never stored, so partial updates leave them alone.
_TRANSIENT_TABLE_FIELDS = frozenset(
    {"table_id", "ml_tb_name", "data_scope", "params", "columns", "created_at", "deleted_at"}
)
_TRANSIENT_COLUMN_FIELDS = frozenset({"column_id", "fk_col", "created_at", "deleted_at"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


@dataclass
class SysColumn:
    """Generator metadata for one column of a table."""

    column_id: int = 0
    table_id: int = 0
    column_name: str = ""
    column_comment: str = ""
    column_type: str = ""
    go_type: str = ""
    go_field: str = ""
    json_field: str = ""
    is_pk: str = ""
    is_increment: str = ""
    is_required: str = ""
    is_insert: str = ""
    is_edit: str = ""
    is_list: str = ""
    is_query: str = ""
    query_type: str = ""
    html_type: str = ""
    dict_type: str = ""
    sort: int = 0
    list: str = ""
    pk: bool = False
    required: bool = False
    super_column: bool = False
    usable_column: bool = False
    increment: bool = False
    insert: bool = False
    edit: bool = False
    query: bool = False
    remark: str = ""
    fk_table_name: str = ""
    fk_table_name_class: str = ""
    fk_table_name_package: str = ""
    fk_col: list["SysColumn"] = field(default_factory=list)
    fk_label_id: str = ""
    fk_label_name: str = ""
    create_by: int = 0
    update_by: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    table_name = "sys_columns"

    def to_dict(self) -> dict[str, Any]:
        return {
            _camel(f.name): _json_value(getattr(self, f.name))
            for f in fields(self)
            if f.name != "deleted_at"
        }


@dataclass
class Params:
    """Tree-table parameters sent by the front end."""

    tree_code: str = ""
    tree_parent_code: str = ""
    tree_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "treeCode": self.tree_code,
            "treeParentCode": self.tree_parent_code,
            "treeName": self.tree_name,
        }


@dataclass
class SysTable:
    """Generator metadata for one table."""

    table_id: int = 0
    tb_name: str = ""
    ml_tb_name: str = ""
    table_comment: str = ""
    class_name: str = ""
    tpl_category: str = ""
    package_name: str = ""
    module_name: str = ""
    module_front_name: str = ""
    business_name: str = ""
    function_name: str = ""
    function_author: str = ""
    pk_column: str = ""
    pk_go_field: str = ""
    pk_json_field: str = ""
    options: str = ""
    tree_code: str = ""
    tree_parent_code: str = ""
    tree_name: str = ""
    tree: bool = False
    crud: bool = True
    remark: str = ""
    is_data_scope: int = 0
    is_actions: int = 0
    is_auth: int = 0
    is_logical_delete: str = ""
    logical_delete: bool = False
    logical_delete_column: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    create_by: int = 0
    update_by: int = 0
    data_scope: str = ""
    params: Params = field(default_factory=Params)
    columns: list[SysColumn] = field(default_factory=list)

    table_name = "sys_tables"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name in ("ml_tb_name", "deleted_at"):
                continue
            key = "tableName" if f.name == "tb_name" else _camel(f.name)
            result[key] = _json_value(getattr(self, f.name))
        return result


def _merge_nonzero(target: Any, source: Any, skip: frozenset[str]) -> None:
    """Copy the fields of ``source`` that are set (non-zero) onto ``target``."""
    for f in fields(source):
        if f.name in skip:
            continue
        value = getattr(source, f.name)
        if value:
            setattr(target, f.name, value)


def fk_table_class(fk_table_name: str) -> str:
    """The class name derived from a table name: each ``_`` part capitalised."""
    return "".join(part[:1].upper() + part[1:] for part in fk_table_name.split("_"))


def resolve_foreign_keys(table: SysTable, known_tables: list[SysTable] | dict[str, SysTable]) -> SysTable:
    """Fill in the class and package of every column that refers to another table."""
    if isinstance(known_tables, dict):
        by_name = dict(known_tables)
    else:
        by_name = {t.tb_name: t for t in known_tables}
    for column in table.columns:
        if not column.fk_table_name:
            continue
        target = by_name.get(column.fk_table_name)
        if target is not None:
            column.fk_table_name_class = target.class_name
            target.ml_tb_name = target.tb_name.replace("_", "-")
            column.fk_table_name_package = target.ml_tb_name
        else:
            column.fk_table_name_class = fk_table_class(column.fk_table_name)
    return table


class TableStore:
    """The generator's table and column records.

    Deleting a table is soft: the record is stamped and hidden from queries.
    """

    def __init__(self) -> None:
        self._tables: dict[int, SysTable] = {}
        self._columns: dict[int, SysColumn] = {}
        self._table_ids = itertools.count(1)
        self._column_ids = itertools.count(1)

    def _live_tables(self) -> list[SysTable]:
        return [t for _, t in sorted(self._tables.items()) if t.deleted_at is None]

    def _filtered(self, table_id: int, table_name: str, table_comment: str) -> list[SysTable]:
        return [
            t
            for t in self._live_tables()
            if (not table_name or t.tb_name == table_name)
            and (not table_id or t.table_id == table_id)
            and (not table_comment or t.table_comment == table_comment)
        ]

    def list_columns(self, table_id: int, exclude: bool = False) -> list[SysColumn]:
        """The live columns of a table, optionally without the standard ones."""
        return [
            copy.deepcopy(c)
            for _, c in sorted(self._columns.items())
            if c.table_id == table_id
            and c.deleted_at is None
            and not (exclude and c.column_name in EXCLUDED_COLUMNS)
        ]

    def get_page(
        self, page_size: int, page_index: int, table_name: str = "", table_comment: str = ""
    ) -> tuple[list[SysTable], int]:
        """One page of tables matching the filters, with the total match count."""
        matching = self._filtered(0, table_name, table_comment)
        window = paginate(page_size, page_index)
        page = matching[window.offset:] if window.limit < 0 else list(window.apply(matching))
        return [copy.deepcopy(t) for t in page], len(matching)

    def get(
        self, table_id: int = 0, table_name: str = "", table_comment: str = "", exclude: bool = False
    ) -> SysTable:
        """The first table matching the filters, with its columns."""
        matching = self._filtered(table_id, table_name, table_comment)
        if not matching:
            raise LookupError("record not found")
        table = copy.deepcopy(matching[0])
        table.columns = self.list_columns(table.table_id, exclude)
        return table

    def get_tree(self) -> list[SysTable]:
        """Every table with all its columns."""
        tables = [copy.deepcopy(t) for t in self._live_tables()]
        for table in tables:
            table.columns = self.list_columns(table.table_id, False)
        return tables

    def create(self, table: SysTable) -> SysTable:
        """Store a new table and its columns; ids and timestamps are assigned."""
        now = datetime.now()
        table.create_by = 0
        table.table_id = next(self._table_ids)
        table.created_at = table.updated_at = now
        stored = copy.deepcopy(table)
        stored.columns = []
        self._tables[table.table_id] = stored
        for column in table.columns:
            column.table_id = table.table_id
            column.create_by = 0
            column.column_id = next(self._column_ids)
            column.created_at = column.updated_at = now
            self._columns[column.column_id] = copy.deepcopy(column)
        return copy.deepcopy(table)

    def _update_column(self, column: SysColumn, now: datetime) -> None:
        stored = self._columns.get(column.column_id)
        if stored is None or stored.deleted_at is not None:
            return
        column.update_by = 0
        _merge_nonzero(stored, column, _TRANSIENT_COLUMN_FIELDS | {"table_id"})
        stored.updated_at = now

    def update(self, table: SysTable) -> SysTable:
        """Apply the set fields of ``table`` and of its columns; return the stored table."""
        stored = self._tables.get(table.table_id)
        if stored is None or stored.deleted_at is None and False:
            raise LookupError(f"record not found: {table.table_id}")
        if stored.deleted_at is not None:
            raise LookupError(f"record not found: {table.table_id}")
        now = datetime.now()
        table.update_by = 0
        _merge_nonzero(stored, table, _TRANSIENT_TABLE_FIELDS)
        stored.updated_at = now

        names = {c.fk_table_name for c in table.columns if c.fk_table_name}
        known = {
            t.tb_name: copy.deepcopy(t) for t in self._live_tables() if t.tb_name in names
        }
        resolve_foreign_keys(table, known)
        for column in table.columns:
            self._update_column(column, now)
        return self.get(table_id=table.table_id)

    def delete(self, table_id: int) -> bool:
        """Soft-delete a table together with its columns."""
        now = datetime.now()
        for table in self._tables.values():
            if table.table_id == table_id and table.deleted_at is None:
                table.deleted_at = now
        for column in self._columns.values():
            if column.table_id == table_id and column.deleted_at is None:
                column.deleted_at = now
        return True

    def batch_delete(self, ids: list[int]) -> bool:
        """Remove the listed table records for good; their column rows are kept."""
        for table_id in ids:
            self._tables.pop(table_id, None)
        return True