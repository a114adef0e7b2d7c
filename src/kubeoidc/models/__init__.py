"""Data models for kubeoidc.

Public exports:
    KubeOIDCBaseModel: Frozen pydantic base model
    OAuth2ClientConfig: OAuth2 client settings for the code exchange
    OIDCAuthenticationParams: Parameters handed to kubectl
    IDTokenClaims: Typed view of ID token claims
    VerifiedIDToken: ID token returned by a verifier
"""

from kubeoidc.models.base import KubeOIDCBaseModel
from kubeoidc.models.claims import IDTokenClaims, VerifiedIDToken
from kubeoidc.models.params import DEFAULT_SCOPES, OAuth2ClientConfig, OIDCAuthenticationParams

__all__ = [
    "DEFAULT_SCOPES",
    "IDTokenClaims",
    "KubeOIDCBaseModel",
    "OAuth2ClientConfig",
    "OIDCAuthenticationParams",
    "VerifiedIDToken",
]
