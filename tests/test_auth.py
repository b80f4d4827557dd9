import base64
import json
from datetime import datetime, timezone

import pytest

from cosmoshelper.auth import (
    AccessToken,
    EmulatorTokenCredential,
    emulator_access_token,
    get_client_with_default_azure_credential,
    get_cosmosdb_client,
    get_emulator_client_with_azure_ad_auth,
)

NOW = 1_700_000_000
EMULATOR_ENDPOINT = "http://localhost:8081"
ACCOUNT_ENDPOINT = "https://account.documents.example.com:443"


def decode_part(part):
    return base64.urlsafe_b64decode(part + "=" * (-len(part) % 4))


def recording_factory(calls):
    def factory(endpoint, credential, options):
        calls.append((endpoint, credential, options))
        return {"endpoint": endpoint, "credential": credential}

    return factory


def test_token_has_three_unpadded_parts():
    token = emulator_access_token(NOW).token
    parts = token.split(".")
    assert len(parts) == 3
    assert "=" not in token


def test_token_header_fields():
    header = json.loads(decode_part(emulator_access_token(NOW).token.split(".")[0]))
    assert header == {
        "typ": "JWT",
        "alg": "RS256",
        "x5t": "CosmosEmulatorPrimaryMaster",
        "kid": "CosmosEmulatorPrimaryMaster",
    }


def test_token_payload_times():
    payload = json.loads(decode_part(emulator_access_token(NOW).token.split(".")[1]))
    assert payload["nbf"] == NOW
    assert payload["iat"] == NOW
    assert payload["exp"] == NOW + 7200
    assert payload["tid"] == "EmulatorFederation"
    assert payload["scp"] == "user_impersonation"
    assert len(payload["groups"]) == 5


def test_token_signature_part_is_master_key():
    signature = decode_part(emulator_access_token(NOW).token.split(".")[2]).decode()
    assert signature == (
        "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="
    )


def test_token_expiry():
    access = emulator_access_token(NOW)
    assert access.expires_on == datetime.fromtimestamp(NOW + 7200, tz=timezone.utc)


def test_token_accepts_datetime():
    moment = datetime.fromtimestamp(NOW, tz=timezone.utc)
    assert emulator_access_token(moment) == emulator_access_token(NOW)


def test_credential_returns_static_token():
    access = AccessToken(token="token", expires_on=datetime(2030, 1, 1, tzinfo=timezone.utc))
    credential = EmulatorTokenCredential(access)
    assert credential.get_token() is access
    assert credential.get_token("scope", claims="x") is access


def test_emulator_client_uses_static_credential():
    calls = []
    options = {"retries": 3}

    def must_not_be_called():
        raise AssertionError("default credential used for emulator")

    client = get_cosmosdb_client(
        EMULATOR_ENDPOINT, True, recording_factory(calls), must_not_be_called, options
    )
    endpoint, credential, passed_options = calls[0]
    assert endpoint == EMULATOR_ENDPOINT
    assert passed_options is options
    assert isinstance(credential, EmulatorTokenCredential)
    assert client["credential"] is credential
    payload = json.loads(decode_part(credential.get_token().token.split(".")[1]))
    assert payload["exp"] - payload["iat"] == 7200


def test_default_credential_is_used_outside_emulator():
    calls = []
    sentinel = object()
    client = get_cosmosdb_client(ACCOUNT_ENDPOINT, False, recording_factory(calls), lambda: sentinel)
    assert calls == [(ACCOUNT_ENDPOINT, sentinel, None)]
    assert client["credential"] is sentinel


def test_default_credential_failure_propagates():
    def failing():
        raise RuntimeError("no credential available")

    with pytest.raises(RuntimeError, match="no credential available"):
        get_cosmosdb_client(ACCOUNT_ENDPOINT, False, recording_factory([]), failing)


def test_missing_default_factory_raises():
    with pytest.raises(ValueError):
        get_cosmosdb_client(ACCOUNT_ENDPOINT, False, recording_factory([]))


def test_client_factory_failure_propagates():
    def failing_factory(endpoint, credential, options):
        raise ValueError("bad endpoint")

    with pytest.raises(ValueError, match="bad endpoint"):
        get_cosmosdb_client(EMULATOR_ENDPOINT, True, failing_factory)


def test_deprecated_emulator_helper():
    calls = []
    get_emulator_client_with_azure_ad_auth(EMULATOR_ENDPOINT, recording_factory(calls))
    assert calls[0][0] == EMULATOR_ENDPOINT
    assert isinstance(calls[0][1], EmulatorTokenCredential)


def test_deprecated_default_credential_helper():
    calls = []
    sentinel = object()
    get_client_with_default_azure_credential(
        ACCOUNT_ENDPOINT, recording_factory(calls), lambda: sentinel, {"a": 1}
    )
    assert calls == [(ACCOUNT_ENDPOINT, sentinel, {"a": 1})]