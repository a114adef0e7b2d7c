"""OAuth2 client configuration and Kubernetes OIDC authentication parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, Optional
from urllib.parse import parse_qsl, urlencode

from pydantic import Field

from kubeoidc.models.base import KubeOIDCBaseModel

DEFAULT_SCOPES = ("openid", "email")


class OAuth2ClientConfig(KubeOIDCBaseModel):
    """OAuth2 client settings used to redeem an authorization code.

    Attributes:
        client_id: OAuth2 client ID registered with the provider.
        client_secret: OAuth2 client secret registered with the provider.
        token_url: URL of the provider's token endpoint.
        redirect_uri: Redirect URI used in the authorization request, if any.
        scopes: Scopes requested during authorization.
        token_endpoint_auth_method: How client credentials are sent to the
            token endpoint.
    """

    client_id: str = Field(..., min_length=1, description="OAuth2 client ID")
    client_secret: str = Field(default="", repr=False, description="OAuth2 client secret")
    token_url: str = Field(..., min_length=1, description="OAuth2 token endpoint URL")
    redirect_uri: Optional[str] = Field(default=None, description="Registered redirect URI")
    scopes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCOPES),
        description="Requested OAuth2 scopes",
    )
    token_endpoint_auth_method: Literal["client_secret_basic", "client_secret_post"] = Field(
        default="client_secret_basic",
        description="Client authentication method at the token endpoint",
    )

    @property
    def scope(self) -> str:
        """Scopes as a space-separated string (RFC 6749)."""
        return " ".join(self.scopes)


class OIDCAuthenticationParams(KubeOIDCBaseModel):
    """Parameters required for kubectl to authenticate to Kubernetes via OIDC.

    Field aliases are the keys used both for JSON and for HTML form
    submissions: ``email``, ``clientID``, ``clientSecret``, ``idToken``,
    ``refreshToken`` and ``issuer``.
    """

    username: str = Field(default="", alias="email")
    client_id: str = Field(..., alias="clientID")
    client_secret: str = Field(default="", alias="clientSecret", repr=False)
    id_token: str = Field(..., alias="idToken", repr=False)
    refresh_token: str = Field(default="", alias="refreshToken", repr=False)
    issuer_url: str = Field(..., alias="issuer")

    def to_form(self) -> dict[str, str]:
        """Return the parameters as a flat form mapping keyed by alias."""
        return self.model_dump(by_alias=True)

    def to_form_encoded(self) -> str:
        """Return the parameters as an application/x-www-form-urlencoded body."""
        return urlencode(self.to_form())

    @classmethod
    def from_form(cls, form: Mapping[str, str] | str) -> OIDCAuthenticationParams:
        """Build parameters from a submitted form.

        Args:
            form: Either a mapping of form keys to values, or a urlencoded body.

        Raises:
            pydantic.ValidationError: If required keys are missing or unknown
                keys are present.
        """
        if isinstance(form, str):
            form = dict(parse_qsl(form, keep_blank_values=True))
        return cls.model_validate(dict(form))
