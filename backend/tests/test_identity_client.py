import json

import httpx
import pytest
from tenacity import wait_none

from backend.app.errors import IdentityProviderError, InvalidTokenError
from backend.app.integrations.identity import IdentityClient


def _client(handler, api_key="key-1"):
    return IdentityClient(api_key, transport=httpx.MockTransport(handler))


def test_verify_id_token_returns_claims():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200, json={"users": [{"localId": "uid-1", "email": "owner@kashpages.in", "displayName": "Owner"}]}
        )

    claims = _client(handler).verify_id_token("tok")
    assert claims.uid == "uid-1"
    assert claims.email == "owner@kashpages.in"
    assert claims.display_name == "Owner"
    assert seen[0].url.path == "/v1/accounts:lookup"
    assert seen[0].url.params["key"] == "key-1"
    assert json.loads(seen[0].content) == {"idToken": "tok"}


@pytest.mark.parametrize(
    "status,body",
    [
        (400, {"error": {"message": "INVALID_ID_TOKEN"}}),
        (400, {"error": {"message": "TOKEN_EXPIRED"}}),
        (200, {"users": []}),
    ],
)
def test_rejected_tokens(status, body):
    client = _client(lambda request: httpx.Response(status, json=body))
    with pytest.raises(InvalidTokenError):
        client.verify_id_token("tok")


def test_empty_token_never_hits_provider():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(InvalidTokenError):
        _client(handler).verify_id_token("")


def test_provider_failure_is_server_error():
    client = _client(lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(IdentityProviderError):
        client.verify_id_token("tok")


def test_missing_api_key():
    with pytest.raises(IdentityProviderError):
        _client(lambda request: httpx.Response(200), api_key=None).verify_id_token("tok")


def test_transport_errors_are_retried(monkeypatch):
    monkeypatch.setattr(IdentityClient._post.retry, "wait", wait_none())
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(IdentityProviderError):
        _client(handler).verify_id_token("tok")
    assert len(calls) == 3


def test_sign_in_with_password():
    def handler(request):
        assert request.url.path == "/v1/accounts:signInWithPassword"
        body = json.loads(request.content)
        if body["password"] != "s3cret":
            return httpx.Response(400, json={"error": {"message": "INVALID_LOGIN_CREDENTIALS"}})
        return httpx.Response(200, json={"idToken": "tok-123", "localId": "uid-1"})

    client = _client(handler)
    assert client.sign_in_with_password("owner@kashpages.in", "s3cret") == "tok-123"
    with pytest.raises(InvalidTokenError):
        client.sign_in_with_password("owner@kashpages.in", "nope")
