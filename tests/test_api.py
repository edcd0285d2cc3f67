import inspect

import pytest
from fastapi.routing import APIRoute

BILL = {
    "participants": [
        {"id": "A", "name": "Alex"},
        {"id": "B", "name": "Jordan"},
    ],
    "items": [
        {"id": "i1", "name": "Pizza", "price": 100, "category": "food", "participants": ["A", "B"], "paid_by": {"A": 100}},
    ],
    "tax_percent": 10,
    "tip_percent": 0,
}


@pytest.fixture
def stored_bill():
    return {**BILL, "id": "bill_1", "created_at": "2025-01-01T00:00:00+00:00",
            "updated_at": "2025-01-01T00:00:00+00:00"}


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_calculate(client):
    res = client.post("/calculate", json=BILL)

    assert res.status_code == 200
    body = res.json()
    assert body["totals"]["grand_total"] == pytest.approx(110)
    assert body["display_totals"]["final_shares"] == {"A": 55.0, "B": 55.0}
    assert body["balances"] == {"A": 50.0, "B": -50.0}
    assert body["transactions"] == [{"from": "B", "to": "A", "amount": 50.0}]


def test_calculate_rejects_negative_price(client):
    bad = {**BILL, "items": [{"id": "i1", "price": -5}]}

    res = client.post("/calculate", json=bad)

    assert res.status_code == 422


def test_calculate_rejects_blank_participant_name(client):
    bad = {**BILL, "participants": [{"id": "A", "name": "   "}]}

    res = client.post("/calculate", json=bad)

    assert res.status_code == 422


def test_routes_run_in_threadpool():
    """Every route is a plain function, run in the threadpool."""
    import main

    routes = [route for route in main.app.routes if isinstance(route, APIRoute)]
    assert routes
    assert not [route.path for route in routes if inspect.iscoroutinefunction(route.endpoint)]


def test_calculate_rejects_duplicate_ids(client):
    bad = {**BILL, "participants": [{"id": "A", "name": "Alex"}, {"id": "A", "name": "Al"}]}

    res = client.post("/calculate", json=bad)

    assert res.status_code == 400
    assert "Duplicate participant ids" in res.json()["detail"]


def test_create_bill(client, mocker):
    save = mocker.patch("main.save_bill", side_effect=lambda data, bill_id=None: {**data, "id": "bill_new"})

    res = client.post("/bills", json=BILL)

    assert res.status_code == 201
    assert res.json()["id"] == "bill_new"
    saved = save.call_args.args[0]
    assert saved["items"][0]["paid_by"] == {"A": 100.0}
    assert saved["tax_percent"] == 10.0


def test_create_bill_store_unavailable(client, mocker):
    mocker.patch("main.save_bill", side_effect=RuntimeError("Firestore is not available"))

    res = client.post("/bills", json=BILL)

    assert res.status_code == 503


def test_list_and_current_bills(client, mocker, stored_bill):
    mocker.patch("main.list_bills", return_value=[stored_bill])
    mocker.patch("main.get_latest_bill", return_value=stored_bill)

    assert client.get("/bills").json() == [stored_bill]
    assert client.get("/bills/current").json()["id"] == "bill_1"


def test_get_missing_bill(client, mocker):
    mocker.patch("main.get_bill", return_value=None)

    res = client.get("/bills/nope")

    assert res.status_code == 404


def test_update_bill_keeps_created_at(client, mocker, stored_bill):
    mocker.patch("main.get_bill", return_value=stored_bill)
    save = mocker.patch("main.save_bill", side_effect=lambda data, bill_id=None: data)

    updated = {**BILL, "tax_percent": 0}
    res = client.put("/bills/bill_1", json=updated)

    assert res.status_code == 200
    body = res.json()
    assert body["id"] == "bill_1"
    assert body["tax_percent"] == 0
    assert body["created_at"] == stored_bill["created_at"]
    assert save.call_args.kwargs["bill_id"] == "bill_1"


def test_update_missing_bill(client, mocker):
    mocker.patch("main.get_bill", return_value=None)
    save = mocker.patch("main.save_bill")

    res = client.put("/bills/nope", json=BILL)

    assert res.status_code == 404
    save.assert_not_called()


def test_delete_bill(client, mocker):
    mocker.patch("main.delete_bill", side_effect=[True, False])

    assert client.delete("/bills/bill_1").status_code == 200
    assert client.delete("/bills/bill_1").status_code == 404


def test_bill_summary(client, mocker, stored_bill):
    mocker.patch("main.get_bill", return_value=stored_bill)

    res = client.get("/bills/bill_1/summary")

    assert res.status_code == 200
    body = res.json()
    assert body["bill"]["id"] == "bill_1"
    assert body["transactions"] == [{"from": "B", "to": "A", "amount": 50.0}]
    assert body["analytics"]["category_breakdown"] == {"food": 100.0}
    assert body["warnings"] == []
    assert [e["participant_id"] for e in body["explanations"]] == ["A", "B"]
    assert body["explanations"][0]["final_share"] == 55.0
