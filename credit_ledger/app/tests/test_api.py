from decimal import Decimal

from fastapi.testclient import TestClient

from .conftest import FailingMailer
from ..core.config import Settings, get_settings
from ..core.dependencies import get_mailer
from ..main import app


def _create(client: TestClient, email: str, balance: str = "0", merchant_code: str | None = None) -> dict:
    body = {"display_name": email.split("@")[0].title(), "email": email, "balance": balance}
    if merchant_code:
        body["merchant_code"] = merchant_code
    response = client.post("/accounts", json=body)
    assert response.status_code == 201
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_and_get_account(client: TestClient) -> None:
    account = _create(client, "alice@example.com", "1000", merchant_code="MC-1001")

    fetched = client.get(f"/accounts/{account['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["merchant_code"] == "MC-1001"
    assert Decimal(fetched.json()["balance"]) == Decimal("1000")


def test_get_unknown_account_returns_404(client: TestClient) -> None:
    response = client.get("/accounts/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Account not found"


def test_duplicate_email_returns_409(client: TestClient) -> None:
    _create(client, "dup@example.com")
    response = client.post(
        "/accounts", json={"display_name": "Again", "email": "dup@example.com"}
    )
    assert response.status_code == 409


def test_transfer_success(client: TestClient, mailer) -> None:
    sender = _create(client, "carol@example.com", "1000")
    recipient = _create(client, "dave@example.com")

    response = client.post(
        "/transfers",
        json={
            "sender_id": sender["id"],
            "recipient_identifier": "dave@example.com",
            "amount": "200",
            "note": "stock",
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["recipient_id"] == recipient["id"]
    assert Decimal(payload["data"]["new_sender_balance"]) == Decimal("800")
    assert payload["data"]["emails_sent"] is True
    assert len(mailer.sent) == 2

    recipient_view = client.get(f"/accounts/{recipient['id']}").json()
    assert Decimal(recipient_view["balance"]) == Decimal("200")


def test_transfer_failures_map_to_status_codes(client: TestClient) -> None:
    sender = _create(client, "erin@example.com", "50", merchant_code="MC-2002")
    _create(client, "frank@example.com")

    cases = [
        ({"recipient_identifier": "frank@example.com", "amount": "-5"}, 400, "invalid_argument"),
        ({"recipient_identifier": "nobody@example.com", "amount": "5"}, 404, "not_found"),
        ({"recipient_identifier": "MC-2002", "amount": "5"}, 400, "self_transfer_not_allowed"),
        ({"recipient_identifier": "frank@example.com", "amount": "100"}, 409, "insufficient_balance"),
    ]
    for body, status_code, kind in cases:
        response = client.post("/transfers", json={"sender_id": sender["id"], **body})
        assert response.status_code == status_code
        payload = response.json()
        assert payload["success"] is False
        assert payload["error_kind"] == kind
        assert payload["data"] is None

    snapshot = client.get(f"/accounts/{sender['id']}").json()
    assert Decimal(snapshot["balance"]) == Decimal("50")


def test_transfer_with_failing_mailer_still_succeeds(client: TestClient) -> None:
    app.dependency_overrides[get_mailer] = lambda: FailingMailer()
    sender = _create(client, "gina@example.com", "300")
    _create(client, "hank@example.com", merchant_code="MC-3003")

    response = client.post(
        "/transfers",
        json={"sender_id": sender["id"], "recipient_identifier": "MC-3003", "amount": "100"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["data"]["emails_sent"] is False


def test_find_recipient(client: TestClient) -> None:
    account = _create(client, "ivy@example.com", merchant_code="MC-4004")

    found = client.get("/transfers/recipients", params={"identifier": "MC-4004"})
    assert found.status_code == 200
    assert found.json()["id"] == account["id"]

    too_short = client.get("/transfers/recipients", params={"identifier": "MC"})
    assert too_short.status_code == 400

    missing = client.get("/transfers/recipients", params={"identifier": "MC-0000"})
    assert missing.status_code == 404


def test_transfer_history(client: TestClient) -> None:
    sender = _create(client, "jack@example.com", "500")
    recipient = _create(client, "kim@example.com")

    for amount in ("100", "50"):
        client.post(
            "/transfers",
            json={
                "sender_id": sender["id"],
                "recipient_identifier": "kim@example.com",
                "amount": amount,
                "send_email_notification": False,
            },
        )

    history = client.get(f"/accounts/{recipient['id']}/transfers", params={"limit": 5})
    assert history.status_code == 200
    items = history.json()["items"]
    assert [Decimal(item["amount"]) for item in items] == [Decimal("50"), Decimal("100")]
    assert all(item["is_incoming"] for item in items)
    assert items[0]["sender"]["name"] == "Jack"

    bad_limit = client.get(f"/accounts/{recipient['id']}/transfers", params={"limit": 0})
    assert bad_limit.status_code == 400


def test_transfer_history_defaults_to_configured_limit(client: TestClient) -> None:
    sender = _create(client, "lena@example.com", "500")
    recipient = _create(client, "milo@example.com")
    for amount in ("10", "20"):
        client.post(
            "/transfers",
            json={
                "sender_id": sender["id"],
                "recipient_identifier": "milo@example.com",
                "amount": amount,
                "send_email_notification": False,
            },
        )

    app.dependency_overrides[get_settings] = lambda: Settings(history_default_limit=1)
    history = client.get(f"/accounts/{recipient['id']}/transfers")

    assert history.status_code == 200
    assert len(history.json()["items"]) == 1
