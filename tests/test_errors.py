import pytest

from cosmoshelper.errors import CosmosDBError, ResponseError, get_error


def test_get_error_with_response_error():
    err = ResponseError(status_code=404, error_code="NotFound")
    result = get_error(err)
    assert result.message == str(err)
    assert result.status == err.status_code
    assert result.status == 404


def test_get_error_with_non_response_error():
    result = get_error(RuntimeError("some error"))
    assert result.status == 0
    assert result.message == ""
    assert result == CosmosDBError()


def test_get_error_with_none():
    assert get_error(None) == CosmosDBError()


def _raise_wrapped(inner):
    try:
        raise inner
    except ResponseError as exc:
        raise RuntimeError("failed to create database") from exc


def test_get_error_finds_cause():
    inner = ResponseError(status_code=409, error_code="Conflict")
    with pytest.raises(RuntimeError) as info:
        _raise_wrapped(inner)
    result = get_error(info.value)
    assert result.status == 409
    assert result.message == "failed to create database"


class _ServiceError(Exception):
    def __init__(self):
        super().__init__("service said no")
        self.status_code = 503


def test_get_error_accepts_status_code_attribute():
    result = get_error(_ServiceError())
    assert result == CosmosDBError(message="service said no", status=503)


def test_response_error_text_contains_status_and_code():
    err = ResponseError(status_code=404, error_code="NotFound", message="missing")
    text = str(err)
    assert "404" in text
    assert "NotFound" in text
    assert "missing" in text


def test_raised_response_error_is_recognised():
    with pytest.raises(ResponseError) as info:
        raise ResponseError(status_code=500, error_code="InternalServerError")
    result = get_error(info.value)
    assert result.status == 500
    assert result.message == str(info.value)
    assert "InternalServerError" in result.message