"""kubeoidc: Kubernetes OIDC authentication parameters from an authorization code.

Redeems an OAuth2 authorization code, verifies the returned ID token and
packages the result as the parameters kubectl needs for OIDC
authentication.

Public exports:
    OIDCExtractor, new_oidc_extractor, ExtractorOptions: The extractor
    OAuth2ClientConfig, OIDCAuthenticationParams: Input and output models
    IDTokenVerifier, JWKSIDTokenVerifier: ID token verification
    KubeOIDCError and subclasses: Error taxonomy
"""

from kubeoidc.auth.verifier import IDTokenVerifier, JWKSIDTokenVerifier
from kubeoidc.errors import (
    ClaimsExtractionError,
    ExtractorOptionError,
    IDTokenVerificationError,
    KubeOIDCError,
    MissingClaimError,
    MissingIDTokenError,
    TokenExchangeError,
)
from kubeoidc.extractor import ExtractorOptions, OIDCExtractor, new_oidc_extractor
from kubeoidc.models import OAuth2ClientConfig, OIDCAuthenticationParams, VerifiedIDToken

__version__ = "0.1.0"

__all__ = [
    "ClaimsExtractionError",
    "ExtractorOptionError",
    "ExtractorOptions",
    "IDTokenVerificationError",
    "IDTokenVerifier",
    "JWKSIDTokenVerifier",
    "KubeOIDCError",
    "MissingClaimError",
    "MissingIDTokenError",
    "OAuth2ClientConfig",
    "OIDCAuthenticationParams",
    "OIDCExtractor",
    "TokenExchangeError",
    "VerifiedIDToken",
    "__version__",
    "new_oidc_extractor",
]
