import pytest


def _payload(username="newbie", **extra):
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "name": "New Person",
        "password": "secret123",
    }
    payload.update(extra)
    return payload


def test_self_registration_creates_client(client, memory_storage):
    response = client.post("/api/users", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "client"
    assert body["username"] == "newbie"
    assert "password" not in body
    assert "hashedPassword" not in body
    assert memory_storage.get_user_by_username("newbie").hashed_password != "secret123"


def test_anonymous_cannot_register_staff_role(client, memory_storage):
    response = client.post("/api/users", json=_payload(role="owner"))

    assert response.status_code == 403
    assert memory_storage.count_users() == 0


@pytest.mark.parametrize("actor_role", ["owner", "caretaker"])
def test_staff_can_create_staff_accounts(client, create_user, login, actor_role):
    login(create_user(role=actor_role))

    response = client.post("/api/users", json=_payload(role="handyman", phone="050-1234567"))

    assert response.status_code == 201
    assert response.json()["role"] == "handyman"
    assert response.json()["phone"] == "050-1234567"


def test_client_cannot_create_staff_accounts(client, create_user, login):
    login(create_user(role="client"))

    assert client.post("/api/users", json=_payload(role="caretaker")).status_code == 403


def test_duplicate_email_and_username_rejected(client, create_user, memory_storage):
    create_user(username="taken")

    same_email = client.post("/api/users", json=_payload("fresh", email="taken@example.com"))
    same_username = client.post("/api/users", json=_payload("taken", email="other@example.com"))

    assert same_email.status_code == 400
    assert same_email.json()["detail"] == "Email already in use"
    assert same_username.status_code == 400
    assert same_username.json()["detail"] == "Username already in use"
    assert memory_storage.count_users() == 1


def test_short_password_rejected(client):
    response = client.post("/api/users", json=_payload(password="123"))

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Validation failed")


def test_list_users_is_staff_only(client, create_user, login):
    assert client.get("/api/users").status_code == 401

    login(create_user(username="someclient", role="client"))
    assert client.get("/api/users").status_code == 403

    login(create_user(username="boss", role="owner"))
    response = client.get("/api/users")
    assert response.status_code == 200
    assert {user["username"] for user in response.json()} == {"someclient", "boss"}


def test_login_with_mixed_case_email_used_at_registration(client):
    registered = client.post("/api/users", json=_payload("alice", email="Alice@Example.COM"))
    assert registered.status_code == 201

    response = client.post("/api/auth/login", json={"email": "Alice@Example.COM", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered.json()["id"]


def test_registration_rejects_email_differing_only_in_case(client, create_user, memory_storage):
    create_user(username="taken")

    response = client.post("/api/users", json=_payload("fresh", email="TAKEN@example.com"))

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already in use"
    assert memory_storage.count_users() == 1
