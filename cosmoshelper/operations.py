"""Typed item and query helpers for Cosmos DB containers.

The container is any object offering the usual container operations:

* ``create_item(partition_key, body, options)``
* ``read_item(partition_key, item_id, options)``
* ``replace_item(partition_key, item_id, body, options)``

Each of these returns a response whose ``value`` holds the item's JSON.

* ``query_items(query, partition_key, options)``

This one yields pages. Each page has ``items`` (JSON documents),
``query_metrics`` (a metrics string or ``None``) and ``request_charge``.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Protocol

from .metrics import QueryMetrics, parse_query_metrics


class QueryPage(Protocol):
    """One page of query results."""

    items: Iterable[bytes | str]
    query_metrics: str | None
    request_charge: float


class Container(Protocol):
    """The container operations these helpers rely on."""

    def create_item(self, partition_key: Any, body: bytes, options: Mapping[str, Any]) -> Any: ...

    def read_item(self, partition_key: Any, item_id: str, options: Mapping[str, Any] | None) -> Any: ...

    def replace_item(
        self, partition_key: Any, item_id: str, body: bytes, options: Mapping[str, Any]
    ) -> Any: ...

    def query_items(
        self, query: str, partition_key: Any, options: Mapping[str, Any] | None
    ) -> Iterable[QueryPage]: ...


@dataclass
class QueryResult:
    """Items of a query together with per-page metrics and the total charge."""

    items: list[Any] = field(default_factory=list)
    metrics: list[QueryMetrics] = field(default_factory=list)
    request_charge: float = 0.0


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _encode(item: Any) -> bytes:
    document = dataclasses.asdict(item) if _is_dataclass_instance(item) else item
    return json.dumps(document).encode("utf-8")


def _decode_into(item: Any, raw: bytes | str) -> Any:
    """Decode a response body, shaping it like ``item`` where that is a dataclass."""
    decoded = json.loads(raw)
    if not _is_dataclass_instance(item):
        return decoded
    if decoded is None:
        return item
    if not isinstance(decoded, dict):
        raise ValueError(f"expected a JSON object for {type(item).__name__}")
    names = {f.name for f in dataclasses.fields(item) if f.init}
    return dataclasses.replace(item, **{k: v for k, v in decoded.items() if k in names})


def _with_flag(options: Mapping[str, Any] | None, flag: str) -> dict[str, Any]:
    merged = dict(options or {})
    merged[flag] = True
    return merged


def insert_item_with_response(
    container: Container,
    item: Any,
    partition_key: Any,
    options: Mapping[str, Any] | None = None,
) -> Any:
    """Create ``item`` in the container and return the item as the service stored it."""
    opts = _with_flag(options, "enable_content_response_on_write")
    response = container.create_item(partition_key, _encode(item), opts)
    return _decode_into(item, response.value)


def get_item(
    container: Container,
    item_id: str,
    partition_key: Any,
    options: Mapping[str, Any] | None = None,
) -> Any:
    """Read one item and return its decoded JSON."""
    response = container.read_item(partition_key, item_id, options)
    return json.loads(response.value)


def _decoded_items(page: QueryPage) -> Iterator[Any]:
    for raw in page.items:
        yield json.loads(raw)


def execute_query(
    container: Container,
    query: str,
    partition_key: Any,
    options: Mapping[str, Any] | None = None,
) -> list[Any]:
    """Run a SQL query over every page and return all decoded items."""
    items: list[Any] = []
    for page in container.query_items(query, partition_key, options):
        items.extend(_decoded_items(page))
    return items


def execute_query_with_metrics(
    container: Container,
    query: str,
    partition_key: Any,
    options: Mapping[str, Any] | None = None,
) -> QueryResult:
    """Run a SQL query and collect items, per-page metrics and the total request charge."""
    opts = _with_flag(options, "populate_index_metrics")
    result = QueryResult()
    for page in container.query_items(query, partition_key, opts):
        result.items.extend(_decoded_items(page))
        if page.query_metrics is not None:
            result.metrics.append(parse_query_metrics(page.query_metrics))
        result.request_charge += float(page.request_charge)
    return result


def replace_item_with_response(
    container: Container,
    item_id: str,
    partition_key: Any,
    item: Any,
    options: Mapping[str, Any] | None = None,
) -> Any:
    """Replace an item and return it as the service stored it."""
    opts = _with_flag(options, "enable_content_response_on_write")
    response = container.replace_item(partition_key, item_id, _encode(item), opts)
    return _decode_into(item, response.value)