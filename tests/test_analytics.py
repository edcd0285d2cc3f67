import pytest

from analytics import generate_analytics
from splitter import compute_totals
from utils import coerce_amount, explain_participant_share, explain_all_participants, format_currency, to_decimal


def test_category_breakdown_and_payer_totals(people):
    items = [
        {"id": "i1", "name": "Beer", "price": 120, "category": "alcohol",
         "participants": ["A", "B"], "paid_by": {"A": 120}},
        {"id": "i2", "name": "Tea", "price": 15, "category": "tea",
         "participants": ["C"], "paid_by": {"C": 15}},
        {"id": "i3", "name": "Wine", "price": 30, "category": "alcohol",
         "participants": ["C"], "paid_by": {"A": 30}},
    ]

    result = generate_analytics(people, items)

    assert result["analytics"]["category_breakdown"] == {"alcohol": 150.0, "tea": 15.0}
    assert result["analytics"]["payer_totals"] == {"A": 150.0, "C": 15.0}
    assert result["analytics"]["unassigned_items"] == []
    assert result["analytics"]["unpaid_items"] == []
    assert result["warnings"] == []


def test_warnings_for_incomplete_bill(people):
    items = [
        {"id": "i1", "name": "Bread", "price": 5, "category": "food", "participants": [], "paid_by": {}},
        {"id": "i2", "name": "Soup", "price": 12, "category": "food", "participants": ["A"], "paid_by": {}},
        {"id": "i3", "name": "Steak", "price": 40, "category": "food",
         "participants": ["B"], "paid_by": {"B": 30}},
        {"id": "i4", "name": "Cake", "price": 8, "category": "food",
         "participants": ["ghost"], "paid_by": {"C": 8}},
    ]

    result = generate_analytics(people, items)
    warnings = result["warnings"]

    assert result["analytics"]["unassigned_items"] == ["i1"]
    assert result["analytics"]["unpaid_items"] == ["i2"]
    assert len(warnings) == 4
    assert "'Bread'" in warnings[0] and "not shared by anyone" in warnings[0]
    assert "'Soup'" in warnings[1] and "left out of the settlement" in warnings[1]
    assert "'Steak'" in warnings[2] and "30.00" in warnings[2] and "40.00" in warnings[2]
    assert "'Cake'" in warnings[3] and "ghost" in warnings[3]


def test_participants_only_need_ids():
    items = [{"id": "i1", "name": "Tea", "price": 10, "category": "tea",
              "participants": ["A", "Z"], "paid_by": {"A": 10}}]

    result = generate_analytics([{"id": "A"}], items)

    assert result["analytics"]["payer_totals"] == {"A": 10.0}
    assert result["warnings"] == ["Warning: 'Tea' references unknown participants: Z"]


def test_explain_participant_share(people):
    items = [
        {"id": "i1", "name": "Platter", "price": 90, "category": "food", "participants": ["A", "B", "C"]},
        {"id": "i2", "name": "Tea", "price": 10, "category": "tea", "participants": ["A"]},
    ]
    totals = compute_totals(items, people, 10, 20)

    explanation = explain_participant_share("A", people, items, totals)

    assert explanation["name"] == "Alex"
    assert [c["item_id"] for c in explanation["item_contributions"]] == ["i1", "i2"]
    assert explanation["item_contributions"][0]["num_participants"] == 3
    assert explanation["item_contributions"][0]["participant_share"] == 30.0
    assert explanation["subtotal_share"] == 40.0
    assert explanation["tax_share"] == 4.0
    assert explanation["tip_share"] == 8.0
    assert explanation["final_share"] == 52.0


def test_explain_unknown_participant(people):
    totals = compute_totals([], people, 0, 0)

    explanation = explain_participant_share("ghost", people, [], totals)

    assert explanation["item_contributions"] == []
    assert "not found" in explanation["error"]


def test_explain_all_participants_keeps_order(people):
    totals = compute_totals([], people, 0, 0)

    explanations = explain_all_participants(people, [], totals)

    assert [e["participant_id"] for e in explanations] == ["A", "B", "C"]


def test_amount_coercion():
    assert to_decimal(None) == 0
    assert to_decimal("") == 0
    assert coerce_amount(" 12.5 ") == 12.5
    with pytest.raises(ValueError):
        coerce_amount("-1")
    with pytest.raises(ValueError):
        to_decimal("abc")
    with pytest.raises(ValueError):
        to_decimal(float("nan"))
    with pytest.raises(ValueError):
        to_decimal(True)


def test_format_currency():
    assert format_currency(1234.5, symbol="$") == "$1,234.50"
