from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...errors import IdentityProviderError, InvalidTokenError

logger = logging.getLogger(__name__)

RetryableError = httpx.TransportError

# provider error codes that mean "the credential is bad", not "we are down"
_REJECTED_CODES = (
    "INVALID_ID_TOKEN",
    "TOKEN_EXPIRED",
    "USER_NOT_FOUND",
    "USER_DISABLED",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_PASSWORD",
    "EMAIL_NOT_FOUND",
    "INVALID_EMAIL",
    "MISSING_PASSWORD",
)


def _retryable():
    return retry(
        retry=retry_if_exception_type(RetryableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )


@dataclass(frozen=True)
class IdentityClaims:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IdentityClient:
    """
    Thin wrapper around the identity toolkit REST API.

    Token verification is delegated to the provider (``accounts:lookup``):
    a token it accepts is signed, unexpired and belongs to an existing user.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://identitytoolkit.googleapis.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    @_retryable()
    def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        return self.client.post(path, params={"key": self.api_key}, json=payload)

    def _call(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            logger.error("identity_not_configured path=%s", path)
            raise IdentityProviderError("Identity provider is not configured")
        try:
            resp = self._post(path, payload)
        except httpx.TransportError as exc:
            logger.error("identity_unreachable path=%s err=%s", path, exc)
            raise IdentityProviderError() from exc
        if resp.status_code == 200:
            return resp.json()
        code = _error_code(resp)
        if resp.status_code in (400, 401, 403) and (code is None or code.startswith(_REJECTED_CODES)):
            raise InvalidTokenError()
        logger.error("identity_error path=%s status=%s code=%s", path, resp.status_code, code)
        raise IdentityProviderError()

    def verify_id_token(self, token: str) -> IdentityClaims:
        if not token:
            raise InvalidTokenError()
        data = self._call("/v1/accounts:lookup", {"idToken": token})
        users = data.get("users") or []
        if not users or not users[0].get("localId"):
            raise InvalidTokenError()
        user = users[0]
        return IdentityClaims(
            uid=user["localId"],
            email=user.get("email"),
            display_name=user.get("displayName"),
        )

    def sign_in_with_password(self, email: str, password: str) -> str:
        data = self._call(
            "/v1/accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        token = data.get("idToken")
        if not token:
            raise InvalidTokenError()
        return token


def _error_code(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    return None


__all__ = ["IdentityClient", "IdentityClaims", "RetryableError"]
