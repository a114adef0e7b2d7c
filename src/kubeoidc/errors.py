"""kubeoidc Error Taxonomy.

This module defines the error hierarchy raised while turning an OAuth2
authorization code into Kubernetes OIDC authentication parameters. Each
stage of the extraction pipeline has its own error class so callers can
branch on the failing stage, and every error carries a code, a
human-readable message, and details describing the underlying cause.
"""
from __future__ import annotations

from typing import Any


class KubeOIDCError(Exception):
    """Base exception for all kubeoidc errors.

    Attributes:
        code: Error code following the kubeoidc:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


def _describe(stage: str, cause: BaseException | None) -> tuple[str, dict[str, Any]]:
    """Build a ``"<stage>: <cause>"`` message and the matching details."""
    if cause is None:
        return stage, {}
    return f"{stage}: {cause}", {"cause": type(cause).__name__}


class ExtractorOptionError(KubeOIDCError):
    """Raised when an extractor option cannot be applied at construction time.

    Attributes:
        option: Name of the offending option, if known
    """

    def __init__(
        self,
        cause: BaseException | None = None,
        option: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message, base_details = _describe("cannot apply OIDC option", cause)
        if option is not None:
            base_details["option"] = option
        super().__init__(
            code="kubeoidc:extractor/invalid_option",
            message=message,
            details={**base_details, **(details or {})},
        )
        self.option = option


class TokenExchangeError(KubeOIDCError):
    """Raised when the authorization code cannot be redeemed for tokens.

    Covers provider rejections (invalid or expired code, bad client
    credentials), network failures and malformed token responses.

    Attributes:
        token_url: Token endpoint the exchange was attempted against
    """

    def __init__(
        self,
        token_url: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message, base_details = _describe("cannot exchange code for token", cause)
        super().__init__(
            code="kubeoidc:oauth2/exchange_failed",
            message=message,
            details={"token_url": token_url, **base_details, **(details or {})},
        )
        self.token_url = token_url


class MissingIDTokenError(KubeOIDCError):
    """Raised when the token response does not contain an ``id_token``.

    The provider accepted the code but returned no ID token, which usually
    means the ``openid`` scope was not requested. Callers should check for
    this class specifically to give actionable guidance.
    """

    def __init__(self, token_url: str | None = None, details: dict[str, Any] | None = None) -> None:
        base_details: dict[str, Any] = {}
        if token_url is not None:
            base_details["token_url"] = token_url
        super().__init__(
            code="kubeoidc:oauth2/missing_id_token",
            message="response missing ID token",
            details={**base_details, **(details or {})},
        )
        self.token_url = token_url


class IDTokenVerificationError(KubeOIDCError):
    """Raised when the ID token fails signature, issuer, audience or expiry checks."""

    def __init__(
        self,
        cause: BaseException | None = None,
        issuer: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message, base_details = _describe("cannot verify ID token", cause)
        if issuer is not None:
            base_details["issuer"] = issuer
        super().__init__(
            code="kubeoidc:oidc/verification_failed",
            message=message,
            details={**base_details, **(details or {})},
        )
        self.issuer = issuer


class ClaimsExtractionError(KubeOIDCError):
    """Raised when a verified ID token's claims cannot be decoded."""

    def __init__(
        self,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
        *,
        code: str = "kubeoidc:oidc/claims_invalid",
        stage: str = "cannot extract claims from ID token",
    ) -> None:
        message, base_details = _describe(stage, cause)
        super().__init__(
            code=code,
            message=message,
            details={**base_details, **(details or {})},
        )


class MissingClaimError(ClaimsExtractionError):
    """Raised when a required claim is absent or empty in a verified ID token.

    Attributes:
        claim: Name of the missing claim
    """

    def __init__(self, claim: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            details={"claim": claim, **(details or {})},
            code="kubeoidc:oidc/missing_claim",
            stage=f"ID token missing required claim '{claim}'",
        )
        self.claim = claim
