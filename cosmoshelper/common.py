"""Idempotent database and container setup and account enumeration.

The client is any object offering ``database(id)``,
``create_database(properties, options)`` and ``query_databases(query)``.
A database client offers ``id``, ``read()``, ``container(id)``,
``create_container(properties, options)`` and ``query_containers(query)``.
A container client offers ``read()``. The query methods yield pages with
``databases`` or ``containers`` respectively.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Callable, Mapping

from .errors import get_error

_LIST_ALL = "select * from c"


def _resource_id(properties: Any) -> str:
    if isinstance(properties, Mapping):
        resource_id = properties.get("id")
    else:
        resource_id = getattr(properties, "id", None)
    if not resource_id:
        raise ValueError("properties must carry an id")
    return resource_id


def _ensure(kind: str, open_resource: Callable[[], Any], create: Callable[[], Any]) -> Any:
    try:
        resource = open_resource()
    except Exception as exc:
        raise RuntimeError(f"failed to create {kind} client: {exc}") from exc

    try:
        resource.read()
    except Exception as exc:
        if get_error(exc).status != HTTPStatus.NOT_FOUND:
            raise RuntimeError(f"failed to read {kind}: {exc}") from exc
    else:
        return resource

    try:
        create()
    except Exception as exc:
        # Created concurrently by someone else: that is still success.
        if get_error(exc).status != HTTPStatus.CONFLICT:
            raise RuntimeError(f"failed to create {kind}: {exc}") from exc
    return open_resource()


def create_database_if_not_exists(client: Any, properties: Any, options: Any = None) -> Any:
    """Return a client for the database, creating the database when it is missing."""
    database_id = _resource_id(properties)
    return _ensure(
        "database",
        lambda: client.database(database_id),
        lambda: client.create_database(properties, options),
    )


def create_container_if_not_exists(database: Any, properties: Any, options: Any = None) -> Any:
    """Return a client for the container, creating the container when it is missing."""
    container_id = _resource_id(properties)
    return _ensure(
        "container",
        lambda: database.container(container_id),
        lambda: database.create_container(properties, options),
    )


def get_all_databases(client: Any) -> list[Any]:
    """Return the properties of every database in the account."""
    databases: list[Any] = []
    try:
        for page in client.query_databases(_LIST_ALL):
            databases.extend(page.databases)
    except Exception as exc:
        raise RuntimeError(f"failed to get databases: {exc}") from exc
    return databases


def get_all_containers(database: Any) -> list[Any]:
    """Return the properties of every container in the database."""
    containers: list[Any] = []
    try:
        for page in database.query_containers(_LIST_ALL):
            containers.extend(page.containers)
    except Exception as exc:
        raise RuntimeError(f"failed to get containers: {exc}") from exc
    return containers