import uuid

from tests.factories.token import bearer


def test_profile_returns_own_record(client, alice, login):
    tokens = login("alice")

    response = client.get("/api/v1/users/profile", headers=bearer(tokens["access_token"]))

    assert response.status_code == 200
    assert response.json()["id"] == str(alice.id)


def test_profile_of_deleted_user_is_404(client, users, alice, login):
    tokens = login("alice")
    users.users.pop(alice.id)

    response = client.get("/api/v1/users/profile", headers=bearer(tokens["access_token"]))

    assert response.status_code == 404


def test_admin_can_list_users(client, alice, admin, login):
    tokens = login("root")

    response = client.get("/api/v1/users", headers=bearer(tokens["access_token"]))

    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"alice", "root"}


def test_admin_can_fetch_a_user(client, alice, admin, login):
    tokens = login("root")

    response = client.get(f"/api/v1/users/{alice.id}", headers=bearer(tokens["access_token"]))

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_admin_fetching_unknown_user_is_404(client, admin, login):
    tokens = login("root")

    response = client.get(f"/api/v1/users/{uuid.uuid4()}", headers=bearer(tokens["access_token"]))

    assert response.status_code == 404


def test_regular_user_is_forbidden(client, alice, login):
    tokens = login("alice")

    response = client.get("/api/v1/users", headers=bearer(tokens["access_token"]))

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied"


def test_anonymous_caller_gets_401_not_403(client, alice):
    response = client.get("/api/v1/users")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
