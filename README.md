# adminkit

Building blocks for an admin backend service. Everything here is a plain
Python function or class that takes the values it needs and returns a
result; nothing is tied to a particular web framework.

## Modules

- **`adminkit.settings`**: the version string (`VERSION`), queue topic
  names (`LOGIN_LOG`, `OPERATE_LOG`, `API_CHECK`), the extension config
  (`Extend`, `AMap`, `EXT_CONFIG`) and the list of routes that skip role
  checks (`CASBIN_EXCLUDE`). `key_match2(path, pattern)` matches a path
  against a route pattern with `:param` and `/*` parts;
  `is_casbin_excluded(path, method)` tells whether a request skips the
  role check.
- **`adminkit.network`**: `get_client_ip(client_ip, remote_ip, headers)`
  picks the caller's address from the connection and the
  `X-Forwarded-For` / `X-Real-Ip` headers.
- **`adminkit.dto`**: `Pagination` with default page 1 and size 10,
  `paginate(page_size, page_index)` returning an offset/limit
  `PageWindow`, `order_dest(sort, desc)` for an `ORDER BY` term, the id
  requests `ObjectById`, `ObjectGetReq`, `ObjectDeleteReq`,
  `GeneralDelDto`, and the form-builder schema (`AutoForm`, `Field`,
  `FieldConfig`, `Slot`, `Option`, `Style`) with `to_dict()`.
- **`adminkit.middleware`**: `custom_error` turns a recovered failure
  into a JSON body, `demo_env` refuses writes in demo mode,
  `no_cache_headers`, `options_headers` and `secure_headers` build
  response headers, `ensure_request_id` assigns a request id,
  `auth_check_role` checks a role with a caller-supplied enforcer, and
  `build_operation_log` produces an operation-log record. Requests are
  described by the `Request` dataclass.
- **`adminkit.permission`**: `DataPermission`, `permission_scope`
  (the SQL `WHERE` fragment and parameters for a data scope) and
  `load_data_permission(conn, user_id)` reading from a DB-API
  connection; lookup failures raise `PermissionLookupError`.
- **`adminkit.dbinfo`**: `DbTable` and `DbColumn` built from
  `information_schema` rows, `table_page`, `get_db_table`,
  `column_list`, and `require_mysql`, which raises
  `UnsupportedDriverError` for other drivers.
- **`adminkit.gentables`**: `SysTable` and `SysColumn` generator
  metadata, `fk_table_class`, `resolve_foreign_keys`, and an in-memory
  `TableStore` with paging, lookup, tree listing, create, partial
  update, soft delete and batch delete.
- **`adminkit.tableimport`**: `camel_names`, `column_from_db`,
  `gen_table_init` (a generator table from a live table and its
  columns) and `split_table_names`.
- **`adminkit.monitor`**: `server_info()` returns a host snapshot
  (memory, CPU, disk, network, uptime) using `psutil`;
  `NetworkSpeedTracker` computes throughput between readings;
  `get_hour_differ` and `is_list_contains_str` are its helpers.

## Install

```
pip install .
```

## Example

```python
from adminkit.dto import Pagination, paginate
from adminkit.settings import is_casbin_excluded

page = Pagination(page_index=0, page_size=0)
assert page.get_page_index() == 1
assert page.get_page_size() == 10
offset, limit = paginate(10, 3)
assert (offset, limit) == (20, 10)

assert is_casbin_excluded("/api/v1/login", "POST")
```

## What it does not do

- There is no command-line program and no HTTP server: the middleware
  helpers return headers and JSON bodies for the caller's own framework
  to send.
- There is no database migration runner and no response/model base
  classes; `TableStore` keeps generator tables in memory only.
- It does not render or write generated source files.

## Tests

```
pip install .[test]
pytest
```