"""ID token verification for kubeoidc.

``IDTokenVerifier`` is the contract the extractor depends on: given a raw
ID token it either returns a VerifiedIDToken or raises
IDTokenVerificationError. ``JWKSIDTokenVerifier`` is the default
implementation, bound to one issuer and one client ID, that checks the
token signature against the issuer's JWKS with joserfc and validates the
standard ``iss``, ``aud``, ``exp``, ``nbf`` and ``iat`` claims.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

import httpx
from joserfc import jwk
from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError

from kubeoidc.auth.jwks import DEFAULT_TIMEOUT_SECONDS, fetch_keys
from kubeoidc.errors import IDTokenVerificationError
from kubeoidc.models.claims import VerifiedIDToken
from kubeoidc.observability import get_logger

logger = get_logger(__name__)

DEFAULT_ALGORITHMS = ("RS256",)


class IDTokenVerifier(Protocol):
    """Verifies a raw ID token and returns its checked claims."""

    async def verify(
        self,
        raw_id_token: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> VerifiedIDToken:
        """Verify ``raw_id_token``.

        Raises:
            IDTokenVerificationError: Signature, issuer, audience or expiry
                checks failed, or key material could not be loaded.
        """
        ...


class JWKSIDTokenVerifier:
    """Verifies ID tokens against an issuer's JSON Web Key Set.

    Exactly one of ``jwks_uri`` or ``key_set`` must be given. With a URI the
    key set is fetched on every verification; with a pre-loaded KeySet no
    network call is made.

    Example:
        >>> verifier = JWKSIDTokenVerifier(
        ...     issuer="https://issuer.example",
        ...     client_id="kubernetes",
        ...     jwks_uri="https://issuer.example/keys",
        ... )
        >>> token = await verifier.verify(raw_id_token)
        >>> token.issuer
        'https://issuer.example'
    """

    def __init__(
        self,
        issuer: str,
        client_id: str,
        *,
        jwks_uri: Optional[str] = None,
        key_set: Optional[jwk.KeySet] = None,
        algorithms: Optional[Sequence[str]] = None,
        leeway: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the verifier.

        Args:
            issuer: Expected ``iss`` claim.
            client_id: Expected audience (the OAuth2 client ID).
            jwks_uri: URL of the issuer's JWKS endpoint.
            key_set: Pre-loaded KeySet, used instead of fetching.
            algorithms: Accepted signing algorithms (default RS256).
            leeway: Clock skew tolerance in seconds for time-based claims.
            transport: Default httpx transport for JWKS fetches.
            timeout: JWKS request timeout in seconds.

        Raises:
            ValueError: If neither or both of jwks_uri and key_set are given.
        """
        if (jwks_uri is None) == (key_set is None):
            raise ValueError("Exactly one of 'jwks_uri' or 'key_set' must be provided")
        self._issuer = issuer
        self._client_id = client_id
        self._jwks_uri = jwks_uri
        self._key_set = key_set
        self._algorithms = list(algorithms or DEFAULT_ALGORITHMS)
        self._leeway = leeway
        self._transport = transport
        self._timeout = timeout

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def client_id(self) -> str:
        return self._client_id

    async def _load_keys(self, transport: Optional[httpx.AsyncBaseTransport]) -> jwk.KeySet:
        if self._key_set is not None:
            return self._key_set
        jwks_uri = self._jwks_uri
        if jwks_uri is None:
            raise ValueError("No JWKS URI configured")
        return await fetch_keys(
            jwks_uri,
            transport=transport or self._transport,
            timeout=self._timeout,
        )

    def _claims_registry(self) -> jose_jwt.JWTClaimsRegistry:
        return jose_jwt.JWTClaimsRegistry(
            leeway=self._leeway,
            iss={"essential": True, "value": self._issuer},
            aud={"essential": True, "value": self._client_id},
            exp={"essential": True},
        )

    def _decode(self, raw_id_token: str, key_set: jwk.KeySet) -> dict[str, Any]:
        token = jose_jwt.decode(raw_id_token, key_set, algorithms=self._algorithms)
        claims = dict(token.claims)
        self._claims_registry().validate(claims)
        return claims

    async def verify(
        self,
        raw_id_token: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> VerifiedIDToken:
        """Verify signature and standard claims of ``raw_id_token``.

        Args:
            raw_id_token: Compact serialized JWT from the token response.
            transport: httpx transport for the JWKS fetch; overrides the one
                given at construction.

        Returns:
            VerifiedIDToken carrying the issuer and full claim set.

        Raises:
            IDTokenVerificationError: On bad signature, wrong issuer or
                audience, expired token, malformed token, or JWKS fetch failure.
        """
        try:
            key_set = await self._load_keys(transport)
            claims = self._decode(raw_id_token, key_set)
        except (JoseError, ValueError, httpx.HTTPError) as exc:
            logger.warning(
                "kubeoidc.oidc.verification_failed",
                issuer=self._issuer,
                error=type(exc).__name__,
            )
            raise IDTokenVerificationError(cause=exc, issuer=self._issuer) from exc

        return VerifiedIDToken.from_claims(raw_id_token, claims)
