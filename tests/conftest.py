import pytest
from unittest.mock import MagicMock

from bill import Bill
from participants import add_participant


@pytest.fixture
def people():
    """Three participants as plain dicts."""
    return [
        {"id": "A", "name": "Alex", "paid": False, "amount_paid": 0.0},
        {"id": "B", "name": "Jordan", "paid": False, "amount_paid": 0.0},
        {"id": "C", "name": "Taylor", "paid": False, "amount_paid": 0.0},
    ]


@pytest.fixture
def bill():
    """A bill with three participants (P001, P002, P003) and no items."""
    bill = Bill(tax_percent=0, tip_percent=0)
    for name in ("Alex", "Jordan", "Taylor"):
        add_participant(bill, name)
    return bill


@pytest.fixture
def mock_db(mocker):
    """Replaces the Firestore client used by the store with a MagicMock."""
    db = MagicMock()
    mocker.patch("firebase_store.get_db", return_value=db)
    return db


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
