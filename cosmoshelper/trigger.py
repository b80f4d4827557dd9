"""Parsing of Cosmos DB trigger payloads delivered to function handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    """Find a key exactly, falling back to a case-insensitive match."""
    if name in raw:
        return raw[name]
    lowered = name.lower()
    for key, value in raw.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _object(raw: Any, what: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(raw).__name__}")
    return raw


def _string(raw: Any, what: str) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise ValueError(f"{what} must be a JSON string, got {type(raw).__name__}")
    return raw


@dataclass
class SysMetadata:
    """System metadata attached to a trigger invocation."""

    method_name: str = ""
    utc_now: str = ""
    rand_guid: str = ""

    @classmethod
    def _from_raw(cls, raw: Any) -> "SysMetadata":
        obj = _object(raw, "sys")
        return cls(
            method_name=_string(_lookup(obj, "MethodName"), "MethodName"),
            utc_now=_string(_lookup(obj, "UtcNow"), "UtcNow"),
            rand_guid=_string(_lookup(obj, "RandGuid"), "RandGuid"),
        )


@dataclass
class Metadata:
    """The metadata section of a trigger payload."""

    sys: SysMetadata = field(default_factory=SysMetadata)

    @classmethod
    def _from_raw(cls, raw: Any) -> "Metadata":
        obj = _object(raw, "Metadata")
        return cls(sys=SysMetadata._from_raw(_lookup(obj, "sys")))


@dataclass
class Data:
    """The data section of a trigger payload; documents is JSON text."""

    documents: str = ""

    @classmethod
    def _from_raw(cls, raw: Any) -> "Data":
        obj = _object(raw, "Data")
        return cls(documents=_string(_lookup(obj, "documents"), "documents"))


@dataclass
class CosmosDBTriggerPayload:
    """The payload a Cosmos DB trigger delivers to a function handler."""

    data: Data = field(default_factory=Data)
    metadata: Metadata = field(default_factory=Metadata)

    @classmethod
    def from_dict(cls, raw: Any) -> "CosmosDBTriggerPayload":
        """Build a payload from decoded JSON, matching keys case-insensitively."""
        obj = _object(raw, "payload")
        return cls(
            data=Data._from_raw(_lookup(obj, "Data")),
            metadata=Metadata._from_raw(_lookup(obj, "Metadata")),
        )


@dataclass
class InvokeResponse:
    """The response a function handler returns."""

    outputs: dict[str, Any] = field(default_factory=dict)
    logs: list[str] = field(default_factory=list)
    return_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form, leaving out an absent return value."""
        result: dict[str, Any] = {"outputs": self.outputs, "logs": self.logs}
        if self.return_value is not None:
            result["returnValue"] = self.return_value
        return result


def parse_to_raw_string(payload: bytes | str) -> str:
    """Return the documents of a trigger payload as raw JSON text.

    The payload's documents field holds a JSON-encoded string which in turn
    holds the documents' JSON; this unwraps that one level of encoding.
    """
    trigger_payload = CosmosDBTriggerPayload.from_dict(json.loads(payload))
    documents = json.loads(trigger_payload.data.documents)
    return _string(documents, "documents")


def parse_to_data_map(payload: bytes | str) -> list[dict[str, Any]]:
    """Return the documents of a trigger payload as a list of dictionaries."""
    decoded = json.loads(parse_to_raw_string(payload))
    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise ValueError(f"documents must be a JSON array, got {type(decoded).__name__}")
    documents: list[dict[str, Any]] = []
    for item in decoded:
        if item is None:
            documents.append({})
        elif isinstance(item, dict):
            documents.append(item)
        else:
            raise ValueError(f"document must be a JSON object, got {type(item).__name__}")
    return documents