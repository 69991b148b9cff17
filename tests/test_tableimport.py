import pytest

from adminkit.dbinfo import DbColumn, DbTable
from adminkit.tableimport import (
    DEFAULT_PACKAGE,
    camel_names,
    column_from_db,
    gen_table_init,
    split_table_names,
)


def _columns():
    return [
        DbColumn(table_name="tb_demo", column_name="id", column_type="int(11)",
                 column_key="PRI", is_nullable="NO", column_comment="key"),
        DbColumn(table_name="tb_demo", column_name="name", column_type="varchar(128)",
                 is_nullable="YES"),
        DbColumn(table_name="tb_demo", column_name="created_at", column_type="datetime(3)",
                 is_nullable="YES"),
    ]


def test_camel_names_single_part():
    assert camel_names("name") == ("Name", "name")


def test_camel_names_multi_part_consistency():
    upper, lower = camel_names("tb_demo_item")
    assert upper.lower() == lower.lower() == "tbdemoitem"
    assert upper[0].isupper() and lower[0].islower()
    assert upper[1:] == lower[1:]


def test_column_from_db_primary_int():
    col = column_from_db(_columns()[0], 1)
    assert col.go_type == "int"
    assert col.html_type == "input"
    assert col.is_pk == "1" and col.pk
    assert col.is_required == "1" and col.required
    assert col.query_type == "EQ"
    assert col.sort == 1


def test_column_from_db_plain_int_is_string():
    col = column_from_db(DbColumn(column_name="count", column_type="int", is_nullable="YES"), 2)
    assert col.go_type == "string"
    assert col.is_pk == "0" and not col.pk
    assert col.is_required == "0" and not col.required


def test_column_from_db_datetime():
    col = column_from_db(_columns()[2], 3)
    assert col.go_type == "time.Time"
    assert col.html_type == "datetime"
    assert col.json_field == camel_names("created_at")[1]


def test_gen_table_init_fields():
    table = gen_table_init("tb_demo", DbTable(table_name="tb_demo", table_comment="Demo"), _columns())
    assert table.class_name == "TbDemo"
    assert table.business_name == camel_names("tb_demo")[1]
    assert table.package_name == DEFAULT_PACKAGE
    assert table.tpl_category == "crud"
    assert table.logical_delete_column == "is_del"
    assert (table.is_actions, table.is_data_scope, table.is_auth) == (2, 1, 1)
    assert table.table_comment == table.function_name == "Demo"
    assert "_" not in table.module_name


def test_gen_table_init_primary_key_and_sort():
    table = gen_table_init("tb_demo", DbTable(table_name="tb_demo"), _columns())
    assert table.pk_column == "id"
    assert table.pk_json_field == "id"
    assert table.pk_go_field == "Id"
    assert [c.sort for c in table.columns] == list(range(1, len(_columns()) + 1))
    assert [c.column_name for c in table.columns] == [c.column_name for c in _columns()]


def test_gen_table_init_comment_falls_back_to_class_name():
    table = gen_table_init("tb_demo", DbTable(table_name="tb_demo"), [])
    assert table.table_comment == table.class_name
    assert table.columns == []


def test_gen_table_init_requires_name():
    with pytest.raises(ValueError):
        gen_table_init("", DbTable(), [])


def test_split_table_names():
    assert split_table_names("sys_user,sys_role") == ["sys_user", "sys_role"]
    assert split_table_names("") == [""]