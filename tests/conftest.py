"""Shared pytest fixtures for kubeoidc tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest
from joserfc import jwk

from kubeoidc.models.params import OAuth2ClientConfig
from tests.factories import (
    CLIENT_ID,
    CLIENT_SECRET,
    TOKEN_URL,
    ProviderStub,
    generate_signing_key,
    make_id_token,
    make_jwks_response,
)


@pytest.fixture(scope="session")
def signing_key() -> jwk.RSAKey:
    return generate_signing_key()


@pytest.fixture(scope="session")
def key_set(signing_key: jwk.RSAKey) -> jwk.KeySet:
    return jwk.KeySet.import_key_set(make_jwks_response(signing_key))


@pytest.fixture
def id_token_factory(signing_key: jwk.RSAKey) -> Callable[..., str]:
    """Sign ID tokens with the session key; keyword arguments override claims."""

    def factory(**overrides: Any) -> str:
        return make_id_token(signing_key, **overrides)

    return factory


@pytest.fixture
def client_config() -> OAuth2ClientConfig:
    return OAuth2ClientConfig(
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        token_url=TOKEN_URL,
        redirect_uri="http://localhost:10003/ui",
    )


@pytest.fixture
def provider(signing_key: jwk.RSAKey) -> ProviderStub:
    """Provider stub issuing a valid token set with default claims."""
    return ProviderStub(
        token_response={
            "access_token": "access-1",
            "token_type": "Bearer",
            "expires_in": 3600,
            "refresh_token": "r1",
            "id_token": make_id_token(signing_key),
        },
        jwks=make_jwks_response(signing_key),
    )
