"""Parsing of query metrics and index metrics returned with query pages."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class QueryMetrics:
    """Server-side metrics reported for one page of query results."""

    total_execution_time_in_ms: float = 0.0
    query_compile_time_in_ms: float = 0.0
    query_logical_plan_build_time_in_ms: float = 0.0
    query_physical_plan_build_time_in_ms: float = 0.0
    query_optimization_time_in_ms: float = 0.0
    vm_execution_time_in_ms: float = 0.0
    index_lookup_time_in_ms: float = 0.0
    instruction_count: int = 0
    document_load_time_in_ms: float = 0.0
    system_function_execute_time_in_ms: float = 0.0
    user_function_execute_time_in_ms: float = 0.0
    retrieved_document_count: int = 0
    retrieved_document_size: int = 0
    output_document_count: int = 0
    output_document_size: int = 0
    write_output_time_in_ms: float = 0.0
    index_utilization_ratio: float = 0.0


def _to_float(value: str) -> float:
    if not value or value != value.strip() or "_" in value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _to_int(value: str) -> int:
    if not value or value != value.strip() or "_" in value:
        return 0
    try:
        return int(value, 10)
    except ValueError:
        return 0


_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "totalExecutionTimeInMs": ("total_execution_time_in_ms", _to_float),
    "queryCompileTimeInMs": ("query_compile_time_in_ms", _to_float),
    "queryLogicalPlanBuildTimeInMs": ("query_logical_plan_build_time_in_ms", _to_float),
    "queryPhysicalPlanBuildTimeInMs": ("query_physical_plan_build_time_in_ms", _to_float),
    "queryOptimizationTimeInMs": ("query_optimization_time_in_ms", _to_float),
    "VMExecutionTimeInMs": ("vm_execution_time_in_ms", _to_float),
    "indexLookupTimeInMs": ("index_lookup_time_in_ms", _to_float),
    "instructionCount": ("instruction_count", _to_int),
    "documentLoadTimeInMs": ("document_load_time_in_ms", _to_float),
    "systemFunctionExecuteTimeInMs": ("system_function_execute_time_in_ms", _to_float),
    "userFunctionExecuteTimeInMs": ("user_function_execute_time_in_ms", _to_float),
    "retrievedDocumentCount": ("retrieved_document_count", _to_int),
    "retrievedDocumentSize": ("retrieved_document_size", _to_int),
    "outputDocumentCount": ("output_document_count", _to_int),
    "outputDocumentSize": ("output_document_size", _to_int),
    "writeOutputTimeInMs": ("write_output_time_in_ms", _to_float),
    "indexUtilizationRatio": ("index_utilization_ratio", _to_float),
}


def parse_query_metrics(metrics: str) -> QueryMetrics:
    """Parse a ``key=value;key=value`` metrics string.

    Unknown keys and malformed pairs are ignored; values that are not valid
    numbers become zero.
    """
    values: dict[str, Any] = {}
    for pair in metrics.split(";"):
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        field = _FIELDS.get(key)
        if field is None:
            continue
        name, convert = field
        values[name] = convert(value)
    return QueryMetrics(**values)


def get_index_metrics(response: Any) -> str:
    """Decode the base64 index metrics carried by a query response.

    Returns an empty string when the response has no index metrics and
    raises ``ValueError`` when they are not valid base64.
    """
    encoded = getattr(response, "index_metrics", None)
    if encoded is None:
        return ""
    try:
        decoded = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 index metrics: {exc}") from exc
    return decoded.decode("utf-8", errors="replace")