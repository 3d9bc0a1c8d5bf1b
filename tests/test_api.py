import json
from dataclasses import fields
from datetime import datetime, timedelta, timezone

from subtracker.application.services.subscription_service import SubscriptionService

from conftest import auth_header, days_ago, sign_up

SUBSCRIPTION = {
    "name": "Streaming Plus",
    "price": 12.5,
    "currency": "USD",
    "frequency": "monthly",
    "category": "entertainment",
    "payment_method": "Credit card",
}


def create_subscription(client, token, **overrides):
    payload = dict(SUBSCRIPTION)
    payload.setdefault("start_date", days_ago(3).isoformat())
    payload.update(overrides)
    return client.post("/api/v1/subscriptions", json=payload, headers=auth_header(token))


def test_root_and_health(client):
    assert client.get("/").text == "Welcome to subscription tracker"
    assert client.get("/health").json() == {"ok": True}


def test_sign_up_returns_token_and_redacted_user(client):
    response = sign_up(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully."
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["email"] == "alice@example.com"
    assert user["name"] == "Alice Doe"
    assert "password" not in user
    assert "password_hash" not in user


def test_sign_in_after_sign_up(client):
    created = sign_up(client).json()["data"]["user"]

    response = client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ALICE@example.com", "password": "s3cret-pass"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["user"]["id"] == created["id"]
    me = client.get("/api/v1/users/me", headers=auth_header(body["data"]["token"]))
    assert me.json()["data"]["id"] == created["id"]


def test_duplicate_sign_up_is_conflict(client):
    sign_up(client)

    response = sign_up(client, name="Someone Else")

    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "User already exists."}
    assert client.app.state.container.persistence.count_users() == 1


def test_sign_in_failures(client):
    sign_up(client)

    missing = client.post("/api/v1/auth/sign-in", json={"email": "bob@example.com", "password": "s3cret-pass"})
    wrong = client.post("/api/v1/auth/sign-in", json={"email": "alice@example.com", "password": "nope-nope"})

    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "User does not exist."}
    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "error": "Incorrect password."}


def test_sign_up_validation_error_shape(client):
    response = sign_up(client, name="Al", email="alice@example.com", password="s3cret-pass")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Username must be between 3 and 50 characters.",
    }


def test_malformed_body_uses_error_envelope(client):
    token = sign_up(client).json()["data"]["token"]
    response = client.post(
        "/api/v1/subscriptions",
        json={**SUBSCRIPTION, "price": "free", "start_date": days_ago(3).isoformat()},
        headers=auth_header(token),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("price:")


def test_sign_out(client):
    response = client.post("/api/v1/auth/sign-out")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User signed out successfully."}


def test_protected_routes_require_bearer_token(client):
    token = sign_up(client).json()["data"]["token"]

    for headers in ({}, {"Authorization": token}, {"Authorization": f"bearer {token}"}):
        response = client.get("/api/v1/users/me", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized."}


def test_deleted_account_token_is_unauthorized(client):
    body = sign_up(client).json()["data"]
    client.app.state.container.persistence.delete_user(body["user"]["id"])

    response = client.get("/api/v1/users/me", headers=auth_header(body["token"]))

    assert response.status_code == 401


def test_create_subscription_derives_renewal(client):
    token = sign_up(client).json()["data"]["token"]
    start = days_ago(3)

    response = create_subscription(client, token, start_date=start.isoformat())

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "active"
    assert data["is_active"] is True
    assert data["currency"] == "USD"
    assert data["renewal_date"].startswith((start + timedelta(days=30)).strftime("%Y-%m-%dT%H:%M:%S"))


def test_old_subscription_is_created_expired(client):
    token = sign_up(client).json()["data"]["token"]

    response = create_subscription(client, token, start_date="2024-01-01T00:00:00Z", status="active")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["renewal_date"].startswith("2024-01-31T00:00:00")
    assert data["status"] == "expired"


def test_currency_defaults_to_inr(client):
    token = sign_up(client).json()["data"]["token"]
    payload = {key: value for key, value in SUBSCRIPTION.items() if key != "currency"}

    response = client.post(
        "/api/v1/subscriptions",
        json={**payload, "start_date": days_ago(1).isoformat()},
        headers=auth_header(token),
    )

    assert response.json()["data"]["currency"] == "INR"


def test_subscription_date_rules(client):
    token = sign_up(client).json()["data"]["token"]
    start = days_ago(3)

    future = create_subscription(client, token, start_date=(start + timedelta(days=30)).isoformat())
    same_day = create_subscription(
        client, token, start_date=start.isoformat(), renewal_date=start.isoformat()
    )

    assert future.status_code == 400
    assert future.json()["error"] == "Start date must be before the current date."
    assert same_day.status_code == 400
    assert same_day.json()["error"] == "Renewal date must be after the start date."


def test_subscriptions_are_scoped_to_owner(client):
    alice = sign_up(client).json()["data"]
    bob = sign_up(client, name="Bob Smith", email="bob@example.com").json()["data"]
    created = create_subscription(client, alice["token"]).json()["data"]

    own = client.get(f"/api/v1/subscriptions/{created['id']}", headers=auth_header(alice["token"]))
    foreign = client.get(f"/api/v1/subscriptions/{created['id']}", headers=auth_header(bob["token"]))
    listed = client.get("/api/v1/subscriptions", headers=auth_header(alice["token"]))
    bob_listed = client.get("/api/v1/subscriptions", headers=auth_header(bob["token"]))

    assert own.status_code == 200
    assert own.json()["data"]["user_id"] == alice["user"]["id"]
    assert foreign.status_code == 404
    assert listed.json()["count"] == 1
    assert bob_listed.json()["count"] == 0


def test_user_subscription_listing_requires_ownership(client):
    alice = sign_up(client).json()["data"]
    bob = sign_up(client, name="Bob Smith", email="bob@example.com").json()["data"]
    create_subscription(client, alice["token"])

    own = client.get(f"/api/v1/subscriptions/user/{alice['user']['id']}", headers=auth_header(alice["token"]))
    other = client.get(f"/api/v1/subscriptions/user/{alice['user']['id']}", headers=auth_header(bob["token"]))

    assert own.status_code == 200
    assert own.json()["count"] == 1
    assert other.status_code == 401
    assert other.json() == {"success": False, "error": "You are not the owner of this account."}


def test_sign_up_with_subdomain_email(client):
    response = sign_up(client, email="alice@mail.example.co.uk")

    assert response.status_code == 201
    assert response.json()["data"]["user"]["email"] == "alice@mail.example.co.uk"


def test_extra_space_after_scheme_is_unauthorized(client):
    token = sign_up(client).json()["data"]["token"]

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer  {token}"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized."}


def test_nan_price_is_a_validation_error(client):
    token = sign_up(client).json()["data"]["token"]
    body = json.dumps({**SUBSCRIPTION, "price": float("nan"), "start_date": days_ago(3).isoformat()})

    response = client.post(
        "/api/v1/subscriptions",
        content=body,
        headers={**auth_header(token), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("price:")
    assert client.get("/api/v1/subscriptions", headers=auth_header(token)).json()["count"] == 0


def test_subscriptions_are_listed_newest_first(client):
    container = client.app.state.container
    base = datetime.now(timezone.utc)
    ticks = iter([base, base + timedelta(minutes=1), base + timedelta(minutes=2)])
    container.subscription_service = SubscriptionService(container.persistence, clock=lambda: next(ticks))
    token = sign_up(client).json()["data"]["token"]

    first = create_subscription(client, token, name="First plan").json()["data"]
    second = create_subscription(client, token, name="Second plan").json()["data"]
    third = create_subscription(client, token, name="Third plan").json()["data"]

    listed = client.get("/api/v1/subscriptions", headers=auth_header(token)).json()["data"]

    assert [item["id"] for item in listed] == [third["id"], second["id"], first["id"]]


def test_container_holds_only_what_routes_use(client):
    container = client.app.state.container

    assert [f.name for f in fields(container)] == [
        "persistence",
        "account_service",
        "auth_guard",
        "subscription_service",
    ]
