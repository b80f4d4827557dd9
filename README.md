# cosmoshelper

Small helpers that take the repetitive parts out of working with Azure Cosmos DB:
idempotent database and container setup, typed item and query helpers,
query-metrics parsing, a static token for the local emulator, and parsing of
the payload an Azure Functions Cosmos DB trigger hands to a custom handler.

The package has no runtime dependencies. It does not talk to the service
itself: every helper acts on client, database and container objects that you
pass in, and only needs them to offer the few methods listed below.

## Installation

```
pip install cosmoshelper
```

## Modules

### `cosmoshelper.errors`

- `ResponseError(status_code, error_code="", message="")` is an exception for
  an error response from the service.
- `get_error(err)` returns a `CosmosDBError` with `message` and `status`. It
  looks at the exception and at the exceptions it was raised from (`__cause__`
  and `__context__`) for a `ResponseError`, or for any exception with an
  integer `status_code`. On a match, `message` is `str(err)` and `status` is
  that status code. Otherwise, or when `err` is `None`, it returns an empty
  `CosmosDBError()` (`message=""`, `status=0`).

### `cosmoshelper.metrics`

- `parse_query_metrics(metrics)` reads a `key=value;key=value` string into a
  `QueryMetrics` dataclass. Examples of fields are
  `total_execution_time_in_ms`, `vm_execution_time_in_ms`,
  `instruction_count`, `output_document_count` and `index_utilization_ratio`.
  Unknown keys and pairs without `=` are skipped, and values that are not
  valid numbers become zero.
- `get_index_metrics(response)` base64-decodes `response.index_metrics`.
  It returns `""` when that attribute is `None` and raises `ValueError` when
  the value is not valid base64.

### `cosmoshelper.operations`

The container passed in must offer these methods:

- `create_item(partition_key, body, options)`
- `read_item(partition_key, item_id, options)`
- `replace_item(partition_key, item_id, body, options)`
- `query_items(query, partition_key, options)`

The first three return a response whose `value` holds JSON. `query_items`
yields pages, each with `items` (JSON documents), `query_metrics` (a metrics
string or `None`) and `request_charge`. Options are mappings.

- `insert_item_with_response(container, item, partition_key, options=None)`
  and `replace_item_with_response(container, item_id, partition_key, item, options=None)`
  set `enable_content_response_on_write` in the options they pass on. They send
  the item as JSON, using `dataclasses.asdict` for dataclass instances, and
  return the stored item. For a dataclass item the result is a copy of the
  item updated with the returned fields; otherwise it is the decoded JSON.
- `get_item(container, item_id, partition_key, options=None)` returns the
  decoded JSON of one item.
- `execute_query(container, query, partition_key, options=None)` returns the
  decoded items of every page as one list.
- `execute_query_with_metrics(container, query, partition_key, options=None)`
  sets `populate_index_metrics` in the options it passes on. It returns a
  `QueryResult` with `items`, `metrics` (one `QueryMetrics` for each page that
  reported metrics) and `request_charge` (the sum over all pages).

### `cosmoshelper.common`

The client passed in must offer `database(id)`,
`create_database(properties, options)` and `query_databases(query)`. A
database must offer `read()`, `container(id)`,
`create_container(properties, options)` and `query_containers(query)`. A
container must offer `read()`. The query methods yield pages with `databases`
or `containers`. Properties are a mapping or an object that carries an `id`.

- `create_database_if_not_exists(client, properties, options=None)` and
  `create_container_if_not_exists(database, properties, options=None)` read
  the resource and create it only when the read fails with status 404. A 409
  conflict during creation counts as success. Any other failure raises
  `RuntimeError` (for example `failed to read database: ...`), chained to the
  original exception. A missing `id` in the properties raises `ValueError`.
- `get_all_databases(client)` and `get_all_containers(database)` run
  `select * from c` and gather the results of every page into one list. A
  failure raises `RuntimeError`.

### `cosmoshelper.auth`

You supply factories that build clients and credentials:
`client_factory(endpoint, credential, options)` and
`default_credential_factory()`.

- `get_cosmosdb_client(endpoint, is_emulator, client_factory, default_credential_factory=None, options=None)`
  builds a client with an `EmulatorTokenCredential` when `is_emulator` is
  true. Otherwise it uses the credential returned by
  `default_credential_factory`, and raises `ValueError` when no factory is
  given.
- `get_emulator_client_with_azure_ad_auth(endpoint, client_factory, options=None)`
  and
  `get_client_with_default_azure_credential(endpoint, client_factory, default_credential_factory, options=None)`
  are older shortcuts for the two cases.
- `emulator_access_token(now=None)` builds the JWT-shaped token the emulator
  accepts. It is valid for two hours from `now`, which may be a `datetime`,
  Unix seconds, or `None` for the current time. The result is an
  `AccessToken` with `token` and `expires_on` (UTC).
- `EmulatorTokenCredential(token).get_token(...)` always returns the same
  `AccessToken`.

### `cosmoshelper.trigger`

- `parse_to_raw_string(payload)` takes the trigger payload as `bytes` or
  `str` and returns the JSON text of its documents. The payload's
  `Data.documents` field holds that text encoded once more as a JSON string.
- `parse_to_data_map(payload)` returns the documents as a list of
  dictionaries.
- `CosmosDBTriggerPayload.from_dict(raw)` builds the typed payload (`data`,
  `metadata.sys`). Keys are matched case-insensitively.
- `InvokeResponse(outputs, logs, return_value).to_dict()` gives the handler's
  JSON-ready response and leaves out `returnValue` when it is `None`.

## Examples

```python
from cosmoshelper.metrics import parse_query_metrics

qm = parse_query_metrics("totalExecutionTimeInMs=12.5;outputDocumentCount=3;")
print(qm.total_execution_time_in_ms, qm.output_document_count)  # 12.5 3
```

```python
from cosmoshelper.trigger import parse_to_data_map

for document in parse_to_data_map(request_body):
    print(document["id"])
```

```python
from cosmoshelper.errors import get_error

try:
    database.read()
except Exception as exc:
    info = get_error(exc)
    if info.status == 404:
        print("not found:", info.message)
```

## What it does not do

The package has no command-line tool and no network or HTTP code of its own.
It does not create clients, send requests or handle retries and paging
tokens. Those come from the client objects and factories you pass in.

## Running the tests

```
pip install -e ".[test]"
pytest
```