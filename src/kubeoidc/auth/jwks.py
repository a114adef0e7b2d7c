"""JWKS loading for kubeoidc.

Fetches the JSON Web Key Set an OIDC issuer publishes and turns it into a
joserfc KeySet for ID token signature verification. Keys are not cached
here; callers wanting a cache load a KeySet once and hand it to the
verifier.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from joserfc import jwk

from kubeoidc.observability import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def fetch_keys(
    jwks_uri: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> jwk.KeySet:
    """Fetch JWKS from URI and return a joserfc KeySet.

    Args:
        jwks_uri: URL of the issuer's JWKS endpoint.
        transport: Optional httpx transport for testing.
        timeout: Request timeout in seconds.

    Returns:
        KeySet usable with joserfc's jwt.decode().

    Raises:
        httpx.HTTPError: On network or protocol errors.
        ValueError: If the response is not a valid JWKS document.
    """
    kwargs: dict[str, Any] = {"timeout": httpx.Timeout(timeout)}
    if transport is not None:
        kwargs["transport"] = transport

    async with httpx.AsyncClient(**kwargs) as client:
        resp = await client.get(jwks_uri, headers={"Accept": "application/json"})
        resp.raise_for_status()
        data = resp.json()

    if not isinstance(data, dict) or not isinstance(data.get("keys"), list):
        raise ValueError("JWKS response missing required 'keys' array")

    key_set = jwk.KeySet.import_key_set(data)
    logger.debug("kubeoidc.jwks.fetched", uri=jwks_uri, key_count=len(key_set.keys))
    return key_set
