import pytest

from adminkit.dbinfo import (
    DbColumn,
    DbTable,
    UnsupportedDriverError,
    column_list,
    get_db_table,
    require_mysql,
    table_page,
)


def _tables(n):
    return [DbTable(table_name=f"t{i}") for i in range(n)]


def test_db_table_from_row_reads_upper_case_keys():
    table = DbTable.from_row({"TABLE_NAME": "sys_user", "ENGINE": "InnoDB", "TABLE_COMMENT": None})
    assert table.table_name == "sys_user"
    assert table.engine == "InnoDB"
    assert table.table_comment == ""
    assert table.to_dict()["tableName"] == "sys_user"


def test_db_column_from_row_round_trip():
    row = {"TABLE_NAME": "sys_user", "COLUMN_NAME": "user_id", "COLUMN_KEY": "PRI",
           "IS_NULLABLE": "NO", "ORDINAL_POSITION": 1}
    column = DbColumn.from_row(row)
    assert (column.column_name, column.column_key, column.ordinal_position) == ("user_id", "PRI", 1)
    assert column.to_dict()["columnName"] == "user_id"


@pytest.mark.parametrize("driver", ["sqlite3", "postgres", ""])
def test_require_mysql_rejects_other_drivers(driver):
    with pytest.raises(UnsupportedDriverError):
        require_mysql(driver)


def test_table_page_slices_and_counts():
    tables = _tables(5)
    page, count = table_page(tables, "", 2, 2)
    assert page == tables[2:4]
    assert count == len(tables)


def test_table_page_first_page_for_bad_index():
    tables = _tables(3)
    page, _ = table_page(tables, "", 2, 0)
    assert page == tables[:2]


def test_table_page_filters_by_name():
    tables = _tables(4)
    page, count = table_page(tables, "t3", 10, 1)
    assert page == [tables[3]]
    assert count == 1


def test_get_db_table_finds_and_rejects():
    tables = _tables(2)
    assert get_db_table(tables, "t1") is tables[1]
    with pytest.raises(ValueError):
        get_db_table(tables, "")
    with pytest.raises(LookupError):
        get_db_table(tables, "absent")


def test_column_list_orders_and_filters():
    columns = [
        DbColumn(table_name="a", column_name="y", ordinal_position=2),
        DbColumn(table_name="b", column_name="z", ordinal_position=1),
        DbColumn(table_name="a", column_name="x", ordinal_position=1),
    ]
    assert [c.column_name for c in column_list(columns, "a")] == ["x", "y"]
    with pytest.raises(ValueError):
        column_list(columns, "")