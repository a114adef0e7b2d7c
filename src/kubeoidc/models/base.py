"""Base Pydantic model configuration for kubeoidc models.

All kubeoidc models inherit from KubeOIDCBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so results can be shared between callers
- Strict validation (extra="forbid") to catch typos and invalid fields
- Flexible field naming (populate_by_name=True) for alias support
"""

from pydantic import BaseModel, ConfigDict


class KubeOIDCBaseModel(BaseModel):
    """Base model for all kubeoidc entities.

    Example:
        >>> class MyModel(KubeOIDCBaseModel):
        ...     name: str
        >>> obj = MyModel(name="test")
        >>> obj.name = "other"  # Raises ValidationError (frozen)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        # Immutability: prevents accidental mutations after creation
        frozen=True,
        # Strict validation: reject unknown fields to catch typos
        extra="forbid",
        # Allow populating fields by both name and alias
        populate_by_name=True,
        validate_default=True,
    )
