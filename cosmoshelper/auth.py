"""Client construction with either the emulator's static token or a default credential.

Clients and credentials are built by factories supplied by the caller:
``client_factory(endpoint, credential, options)`` returns a client and
``default_credential_factory()`` returns the production credential.
"""

from __future__ import annotations

import base64
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

EMULATOR_TOKEN_LIFETIME_SECONDS = 7200

_EMULATOR_HEADER = {
    "typ": "JWT",
    "alg": "RS256",
    "x5t": "CosmosEmulatorPrimaryMaster",
    "kid": "CosmosEmulatorPrimaryMaster",
}

_EMULATOR_GROUPS = [
    "7ce1d003-4cb3-4879-b7c5-74062a35c66e",
    "e99ff30c-c229-4c67-ab29-30a6aebc3e58",
    "5549bb62-c77b-4305-bda9-9ec66b85d9e4",
    "c44fd685-5c58-452c-aaf7-13ce75184f65",
    "be895215-eab5-43b7-9536-9ef8fe130330",
]

# The emulator's well-known, publicly documented master key.
_EMULATOR_MASTER_KEY = "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="

ClientFactory = Callable[[str, Any, Any], Any]
CredentialFactory = Callable[[], Any]


@dataclass(frozen=True)
class AccessToken:
    """A bearer token and the moment it expires."""

    token: str
    expires_on: datetime


@dataclass(frozen=True)
class EmulatorTokenCredential:
    """A credential that always hands out the same emulator token."""

    token: AccessToken

    def get_token(self, *args: Any, **kwargs: Any) -> AccessToken:
        """Return the static token, whatever scopes are asked for."""
        return self.token


def _raw_urlsafe_b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _unix_seconds(now: datetime | float | int | None) -> int:
    if now is None:
        return int(time.time())
    if isinstance(now, datetime):
        return int(now.timestamp())
    return int(now)


def emulator_access_token(now: datetime | float | int | None = None) -> AccessToken:
    """Build the Azure AD-style token the emulator accepts, valid for two hours from ``now``."""
    issued = _unix_seconds(now)
    expiration = issued + EMULATOR_TOKEN_LIFETIME_SECONDS
    payload = {
        "appid": "localhost",
        "aio": "",
        "appidacr": "1",
        "idp": "https://localhost:8081/",
        "oid": "96313034-4739-43cb-93cd-74193adbe5b6",
        "rh": "",
        "sub": "localhost",
        "tid": "EmulatorFederation",
        "uti": "",
        "ver": "1.0",
        "scp": "user_impersonation",
        "groups": _EMULATOR_GROUPS,
        "nbf": issued,
        "exp": expiration,
        "iat": issued,
        "iss": "https://sts.fake-issuer.net/7b1999a1-dfd7-440e-8204-00170979b984",
        "aud": "https://localhost.localhost",
    }
    parts = (
        json.dumps(_EMULATOR_HEADER, separators=(",", ":")),
        json.dumps(payload),
        _EMULATOR_MASTER_KEY,
    )
    token = ".".join(_raw_urlsafe_b64(part.encode("utf-8")) for part in parts)
    return AccessToken(
        token=token,
        expires_on=datetime.fromtimestamp(expiration, tz=timezone.utc),
    )


def get_cosmosdb_client(
    endpoint: str,
    is_emulator: bool,
    client_factory: ClientFactory,
    default_credential_factory: CredentialFactory | None = None,
    options: Any = None,
) -> Any:
    """Create a client, using the static emulator token or the default credential."""
    if is_emulator:
        credential: Any = EmulatorTokenCredential(emulator_access_token())
    else:
        if default_credential_factory is None:
            raise ValueError("a default credential factory is required outside the emulator")
        credential = default_credential_factory()
    return client_factory(endpoint, credential, options)


def get_emulator_client_with_azure_ad_auth(
    endpoint: str,
    client_factory: ClientFactory,
    options: Any = None,
) -> Any:
    """Create a client for the local emulator using its static token (deprecated)."""
    return get_cosmosdb_client(endpoint, True, client_factory, None, options)


def get_client_with_default_azure_credential(
    endpoint: str,
    client_factory: ClientFactory,
    default_credential_factory: CredentialFactory,
    options: Any = None,
) -> Any:
    """Create a client using the default credential (deprecated)."""
    return get_cosmosdb_client(endpoint, False, client_factory, default_credential_factory, options)