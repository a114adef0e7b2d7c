"""kubeoidc OAuth2/OIDC collaborators.

Public exports:
    TokenResponse: Parsed token endpoint response
    exchange_code: Authorization code grant via Authlib
    fetch_keys: Load an issuer's JWKS as a joserfc KeySet
    IDTokenVerifier: Verifier contract used by the extractor
    JWKSIDTokenVerifier: joserfc-backed verifier bound to an issuer and client
"""

from kubeoidc.auth.jwks import fetch_keys
from kubeoidc.auth.oauth2 import TokenResponse, exchange_code
from kubeoidc.auth.verifier import IDTokenVerifier, JWKSIDTokenVerifier

__all__ = [
    "IDTokenVerifier",
    "JWKSIDTokenVerifier",
    "TokenResponse",
    "exchange_code",
    "fetch_keys",
]
