"""OAuth2 authorization code exchange for kubeoidc.

Redeems an authorization code at the provider's token endpoint using
Authlib's AsyncOAuth2Client and normalizes the token response. Fields the
OAuth2 core spec does not define (``id_token`` among them) are kept as
opaque extras for the caller to interpret.
"""

import time
from typing import Any, Optional

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client
from pydantic import Field

from kubeoidc.models.base import KubeOIDCBaseModel
from kubeoidc.models.params import OAuth2ClientConfig
from kubeoidc.observability import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

_STANDARD_TOKEN_FIELDS = frozenset(
    {"access_token", "token_type", "refresh_token", "expires_in", "expires_at", "scope"}
)


class TokenResponse(KubeOIDCBaseModel):
    """Token set returned by an authorization code exchange.

    Attributes:
        access_token: The opaque access token string.
        token_type: Token type, typically "Bearer".
        refresh_token: Refresh token, empty when the provider issued none.
        expires_at: Unix timestamp when the access token expires, if known.
        scope: Granted scopes, if the provider echoed them.
        extra: Every other field of the response (e.g. ``id_token``).
    """

    access_token: str = Field(..., repr=False)
    token_type: str = Field(default="Bearer")
    refresh_token: str = Field(default="", repr=False)
    expires_at: Optional[int] = None
    scope: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict, repr=False)

    def extra_field(self, name: str) -> Any:
        """Return an opaque response field by name, or None when absent."""
        return self.extra.get(name)


def _as_int(raw_token: dict[str, Any], name: str) -> int:
    try:
        return int(raw_token[name])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Token response field '{name}' is not a number") from exc


def _parse_token_response(raw_token: dict[str, Any]) -> TokenResponse:
    """Convert Authlib's raw token dict into a TokenResponse.

    Raises:
        ValueError: If the response carries no access token, or a lifetime
            field is not numeric.
    """
    access_token = raw_token.get("access_token")
    if not access_token or not isinstance(access_token, str):
        raise ValueError("Token response missing required 'access_token'")

    if raw_token.get("expires_at") is not None:
        expires_at: Optional[int] = _as_int(raw_token, "expires_at")
    elif raw_token.get("expires_in") is not None:
        expires_at = int(time.time()) + _as_int(raw_token, "expires_in")
    else:
        expires_at = None

    scope = raw_token.get("scope")
    if isinstance(scope, list):
        scope = " ".join(str(s) for s in scope)

    return TokenResponse(
        access_token=access_token,
        token_type=raw_token.get("token_type") or "Bearer",
        refresh_token=raw_token.get("refresh_token") or "",
        expires_at=expires_at,
        scope=scope,
        extra={k: v for k, v in raw_token.items() if k not in _STANDARD_TOKEN_FIELDS},
    )


async def exchange_code(
    config: OAuth2ClientConfig,
    code: str,
    *,
    code_verifier: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> TokenResponse:
    """Exchange an authorization code for a token set.

    Args:
        config: OAuth2 client settings (credentials, token endpoint, redirect URI).
        code: Authorization code from the provider's authorization endpoint.
        code_verifier: PKCE code verifier, when the authorization request
            carried a code challenge.
        transport: Optional httpx transport (e.g. MockTransport in tests).
        timeout: Request timeout in seconds.

    Returns:
        TokenResponse with access/refresh tokens and opaque extras.

    Raises:
        authlib.integrations.base_client.errors.OAuthError: Provider rejected
            the code or the client credentials.
        httpx.HTTPError: Network or transport error.
        ValueError: The token response was malformed.
    """
    kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout)}
    if transport is not None:
        kwargs["transport"] = transport

    fetch_kwargs: dict[str, Any] = {}
    if code_verifier is not None:
        fetch_kwargs["code_verifier"] = code_verifier

    async with AsyncOAuth2Client(
        client_id=config.client_id,
        client_secret=config.client_secret,
        token_endpoint_auth_method=config.token_endpoint_auth_method,
        scope=config.scope,
        redirect_uri=config.redirect_uri,
        **kwargs,
    ) as client:
        raw_token: dict[str, Any] = await client.fetch_token(
            url=config.token_url,
            grant_type="authorization_code",
            code=code,
            **fetch_kwargs,
        )

    token = _parse_token_response(dict(raw_token))
    logger.info(
        "kubeoidc.oauth2.code_exchanged",
        token_endpoint=config.token_url,
        has_refresh_token=bool(token.refresh_token),
        extra_fields=sorted(token.extra),
    )
    return token
