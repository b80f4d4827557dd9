"""Structured view of errors returned by the Cosmos DB service."""

from __future__ import annotations

from dataclasses import dataclass


class ResponseError(Exception):
    """An error response received from the service, carrying its HTTP status."""

    def __init__(self, status_code: int, error_code: str = "", message: str = "") -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"RESPONSE {self.status_code}"
        if self.error_code:
            text += f"\nERROR CODE: {self.error_code}"
        if self.message:
            text += f"\n{self.message}"
        return text


@dataclass(frozen=True)
class CosmosDBError:
    """The message and HTTP status of a Cosmos DB error."""

    message: str = ""
    status: int = 0


def _is_response_error(err: BaseException) -> bool:
    if isinstance(err, ResponseError):
        return True
    status = getattr(err, "status_code", None)
    return isinstance(status, int) and not isinstance(status, bool)


def _find_response_error(err: BaseException) -> BaseException | None:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if _is_response_error(current):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def get_error(err: BaseException | None) -> CosmosDBError:
    """Extract a CosmosDBError from an exception.

    The exception itself and the exceptions it was raised from are searched
    for a service response error. An empty CosmosDBError is returned when
    there is none.
    """
    if err is None:
        return CosmosDBError()
    response_error = _find_response_error(err)
    if response_error is None:
        return CosmosDBError()
    return CosmosDBError(message=str(err), status=response_error.status_code)