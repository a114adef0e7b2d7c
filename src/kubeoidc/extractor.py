"""OIDC extractor for kubeoidc.

Performs OIDC validation, extracting the information required for
Kubernetes authentication along the way: the authorization code is
redeemed at the provider's token endpoint, the returned ID token is
verified, and the result is repackaged as OIDCAuthenticationParams.

Example:
    >>> verifier = JWKSIDTokenVerifier(
    ...     issuer="https://issuer.example",
    ...     client_id="kubernetes",
    ...     jwks_uri="https://issuer.example/keys",
    ... )
    >>> extractor = new_oidc_extractor(verifier)
    >>> params = await extractor.process(
    ...     OAuth2ClientConfig(
    ...         client_id="kubernetes",
    ...         client_secret="secret",
    ...         token_url="https://issuer.example/token",
    ...     ),
    ...     code,
    ... )
    >>> params.username
    'user@example.com'
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from authlib.integrations.base_client.errors import OAuthError
from pydantic import ConfigDict, Field, ValidationError

from kubeoidc.auth.oauth2 import DEFAULT_TIMEOUT_SECONDS, exchange_code
from kubeoidc.auth.verifier import IDTokenVerifier
from kubeoidc.errors import (
    ClaimsExtractionError,
    ExtractorOptionError,
    IDTokenVerificationError,
    MissingClaimError,
    MissingIDTokenError,
    TokenExchangeError,
)
from kubeoidc.models.base import KubeOIDCBaseModel
from kubeoidc.models.claims import IDTokenClaims
from kubeoidc.models.params import OAuth2ClientConfig, OIDCAuthenticationParams
from kubeoidc.observability import get_logger, sanitize_for_logging

logger = get_logger(__name__)

TOKEN_FIELD_ID_TOKEN = "id_token"
DEFAULT_USERNAME_CLAIM = "email"


class ExtractorOptions(KubeOIDCBaseModel):
    """Construction options for OIDCExtractor.

    Attributes:
        transport: httpx transport used for every outbound call (token
            exchange and JWKS fetch). None uses httpx's default transport.
        timeout: Per-request timeout in seconds.
        username_claim: ID token claim copied into ``username``.
        require_username: Fail when the username claim is missing or empty.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    transport: Optional[httpx.AsyncBaseTransport] = None
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    username_claim: str = Field(default=DEFAULT_USERNAME_CLAIM, min_length=1)
    require_username: bool = True


class OIDCExtractor:
    """Redeems authorization codes and extracts Kubernetes OIDC parameters.

    Holds no mutable state: one instance can serve concurrent ``process``
    calls.
    """

    def __init__(
        self,
        verifier: IDTokenVerifier,
        options: Optional[ExtractorOptions] = None,
    ) -> None:
        self._verifier = verifier
        self._options = options or ExtractorOptions()

    @property
    def verifier(self) -> IDTokenVerifier:
        return self._verifier

    @property
    def options(self) -> ExtractorOptions:
        return self._options

    async def process(
        self,
        config: OAuth2ClientConfig,
        code: str,
        *,
        code_verifier: Optional[str] = None,
    ) -> OIDCAuthenticationParams:
        """Exchange ``code`` for tokens and extract authentication parameters.

        Args:
            config: OAuth2 client settings; client ID and secret are echoed
                into the result.
            code: Authorization code from the provider's authorization endpoint.
            code_verifier: PKCE code verifier, if the authorization request
                used a code challenge.

        Returns:
            OIDCAuthenticationParams built from the verified ID token.

        Raises:
            TokenExchangeError: The code could not be redeemed.
            MissingIDTokenError: The token response carried no string ``id_token``.
            IDTokenVerificationError: The ID token failed verification.
            ClaimsExtractionError: The verified claims could not be decoded,
                or (MissingClaimError) the username claim is missing.
        """
        transport = self._options.transport

        try:
            token = await exchange_code(
                config,
                code,
                code_verifier=code_verifier,
                transport=transport,
                timeout=self._options.timeout,
            )
        except (OAuthError, httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning(
                "kubeoidc.extractor.exchange_failed",
                token_endpoint=config.token_url,
                error=type(exc).__name__,
            )
            raise TokenExchangeError(config.token_url, cause=exc) from exc

        logger.debug(
            "kubeoidc.extractor.exchanged",
            token_endpoint=config.token_url,
            has_refresh_token=bool(token.refresh_token),
        )

        raw_id_token = token.extra_field(TOKEN_FIELD_ID_TOKEN)
        if not isinstance(raw_id_token, str):
            logger.warning(
                "kubeoidc.extractor.missing_id_token",
                token_endpoint=config.token_url,
                scope=config.scope,
            )
            raise MissingIDTokenError(token_url=config.token_url)

        try:
            verified = await self._verifier.verify(raw_id_token, transport=transport)
        except IDTokenVerificationError:
            raise
        except Exception as exc:
            logger.warning("kubeoidc.extractor.verification_failed", error=type(exc).__name__)
            raise IDTokenVerificationError(cause=exc) from exc

        try:
            claims = IDTokenClaims.model_validate(verified.claims)
            username = claims.claim(self._options.username_claim) or ""
        except (ValidationError, TypeError) as exc:
            raise ClaimsExtractionError(cause=exc) from exc

        if not username and self._options.require_username:
            raise MissingClaimError(self._options.username_claim)

        params = OIDCAuthenticationParams(
            username=username,
            client_id=config.client_id,
            client_secret=config.client_secret,
            id_token=raw_id_token,
            refresh_token=token.refresh_token,
            issuer_url=verified.issuer,
        )
        logger.info(
            "kubeoidc.extractor.processed",
            **sanitize_for_logging(params.to_form()),
        )
        return params


def new_oidc_extractor(
    verifier: IDTokenVerifier,
    options: Optional[ExtractorOptions] = None,
    **overrides: Any,
) -> OIDCExtractor:
    """Create a new OIDC extractor.

    Args:
        verifier: ID token verifier bound to the issuer and expected audience.
        options: Base options; defaults to ExtractorOptions().
        **overrides: Individual option values applied on top of ``options``
            (e.g. ``transport=httpx.MockTransport(handler)``).

    Raises:
        ExtractorOptionError: If an option is unknown or invalid.
    """
    base = options or ExtractorOptions()
    if overrides:
        values = {name: getattr(base, name) for name in ExtractorOptions.model_fields}
        values.update(overrides)
        try:
            base = ExtractorOptions.model_validate(values)
        except ValidationError as exc:
            errors = exc.errors()
            option = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else None
            raise ExtractorOptionError(cause=exc, option=option) from exc
    return OIDCExtractor(verifier, base)
