import uuid
from typing import Annotated
from unittest.mock import AsyncMock

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from src.core.dependencies.auth import (
    CurrentIdentity,
    extract_bearer_token,
    get_bearer_token,
    require_roles,
)
from src.core.exceptions import InvalidTokenError, StoreUnavailableError
from src.core.handlers import register_exception_handlers
from src.domain.services.auth.token import TokenValidationResult, TokenValidator
from src.domain.value_objects.identity import UserIdentity
from src.infrastructure.dependency_injection.auth_dependencies import get_token_validator
from tests.factories.token import bearer

USER_ID = uuid.uuid4()


@pytest.fixture
def validator():
    validator = AsyncMock(spec=TokenValidator)
    validator.validate.return_value = TokenValidationResult(
        valid=True, subject_id=str(USER_ID), username="alice", role="user"
    )
    return validator


@pytest.fixture
def client(validator):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/me")
    async def me(identity: CurrentIdentity, token: Annotated[str, Depends(get_bearer_token)]):
        return {"id": str(identity.id), "role": identity.role, "token": token}

    @app.get("/admin")
    async def admin_only(identity: Annotated[UserIdentity, Depends(require_roles("admin"))]):
        return {"id": str(identity.id)}

    app.dependency_overrides[get_token_validator] = lambda: validator
    return TestClient(app)


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("bearer abc", None),
        ("Basic abc", None),
        ("Bearer abc", "abc"),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_valid_token_yields_identity(client, validator):
    response = client.get("/me", headers=bearer("good-token"))

    assert response.status_code == 200
    assert response.json() == {"id": str(USER_ID), "role": "user", "token": "good-token"}
    validator.validate.assert_awaited_once()
    assert validator.validate.await_args.args[0] == "good-token"


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Token abc"}, {"Authorization": "Bearer "}])
def test_missing_or_malformed_header_is_401(client, validator, headers):
    response = client.get("/me", headers=headers)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["detail"] == "Authentication token missing or invalid format"
    validator.validate.assert_not_awaited()


def test_rejected_token_is_401_with_reason(client, validator):
    validator.validate.return_value = TokenValidationResult(
        valid=False, message="token has expired", error=InvalidTokenError("expired")
    )

    response = client.get("/me", headers=bearer("old"))

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token: token has expired"


def test_store_outage_is_500(client, validator):
    validator.validate.return_value = TokenValidationResult(
        valid=False, message="internal error", error=StoreUnavailableError()
    )

    response = client.get("/me", headers=bearer("whatever"))

    assert response.status_code == 500
    assert response.json()["detail"] == "internal error during token validation"


def test_role_gate_admits_allowed_role(client, validator):
    validator.validate.return_value = TokenValidationResult(
        valid=True, subject_id=str(USER_ID), username="root", role="admin"
    )

    assert client.get("/admin", headers=bearer("t")).status_code == 200


def test_role_gate_rejects_other_roles_with_403(client):
    response = client.get("/admin", headers=bearer("t"))

    assert response.status_code == 403


def test_role_gate_authenticates_first(client):
    assert client.get("/admin").status_code == 401
