"""ID token claim models.

``IDTokenClaims`` is the typed view of the claims the extractor consumes;
``VerifiedIDToken`` is what an ID token verifier hands back once the
signature and standard claims have been checked.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ConfigDict, Field, StrictStr

from kubeoidc.models.base import KubeOIDCBaseModel


class IDTokenClaims(KubeOIDCBaseModel):
    """Claims read from a verified ID token.

    Only ``iss`` is a typed field. Every other claim is kept untouched in
    ``model_extra`` and type-checked only when read through ``claim()``, so
    claims the extractor never consumes (``email_verified`` sent as a
    string, say) cannot fail a login.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    iss: Optional[StrictStr] = None

    def claim(self, name: str) -> Optional[str]:
        """Return a string claim by name, or None when absent.

        Raises:
            TypeError: If the claim is present but is not a string.
        """
        if name in type(self).model_fields:
            value = getattr(self, name)
        else:
            value = (self.model_extra or {}).get(name)
        if value is not None and not isinstance(value, str):
            raise TypeError(f"claim '{name}' is not a string")
        return value


def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


class VerifiedIDToken(KubeOIDCBaseModel):
    """An ID token whose signature and standard claims have been verified.

    Attributes:
        raw: The compact serialized token as received from the provider.
        issuer: Verified ``iss`` claim.
        subject: ``sub`` claim.
        audience: ``aud`` claim normalized to a list.
        expiry: ``exp`` claim as an aware datetime.
        issued_at: ``iat`` claim as an aware datetime, if present.
        claims: The complete decoded claim set.
    """

    raw: str = Field(..., repr=False)
    issuer: str
    subject: str = ""
    audience: list[str] = Field(default_factory=list)
    expiry: Optional[datetime] = None
    issued_at: Optional[datetime] = None
    claims: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_claims(cls, raw: str, claims: dict[str, Any]) -> VerifiedIDToken:
        """Build from a decoded claim mapping already checked by a verifier."""
        aud = claims.get("aud")
        if isinstance(aud, str):
            audience = [aud]
        elif isinstance(aud, list):
            audience = [str(a) for a in aud]
        else:
            audience = []
        return cls(
            raw=raw,
            issuer=str(claims.get("iss", "")),
            subject=str(claims.get("sub", "")),
            audience=audience,
            expiry=_timestamp(claims.get("exp")),
            issued_at=_timestamp(claims.get("iat")),
            claims=dict(claims),
        )
