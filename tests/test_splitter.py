import copy

import pytest

from splitter import compute_totals, round_totals


def test_even_three_way_split(people):
    """One item shared by everyone, no tax or tip."""
    items = [{"id": "i1", "price": 90, "participants": ["A", "B", "C"]}]

    totals = compute_totals(items, people, 0, 0)

    assert totals["subtotal"] == 90
    assert totals["grand_total"] == 90
    assert totals["final_shares"] == {"A": 30, "B": 30, "C": 30}


def test_tax_redistributed_proportionally(people):
    """Each person pays tax in proportion to what they consumed."""
    two = people[:2]
    items = [
        {"id": "i1", "price": 100, "participants": ["A"]},
        {"id": "i2", "price": 100, "participants": ["B"]},
    ]

    totals = compute_totals(items, two, 10, 0)

    assert totals["subtotal"] == 200
    assert totals["tax_amount"] == 20
    assert totals["tip_amount"] == 0
    assert totals["final_shares"]["A"] == pytest.approx(110)
    assert totals["final_shares"]["B"] == pytest.approx(110)


def test_tax_and_tip_uneven_consumption(people):
    two = people[:2]
    items = [
        {"id": "i1", "price": 75, "participants": ["A"]},
        {"id": "i2", "price": 25, "participants": ["B"]},
    ]

    totals = compute_totals(items, two, 10, 20)

    assert totals["grand_total"] == pytest.approx(130)
    assert totals["final_shares"]["A"] == pytest.approx(97.5)
    assert totals["final_shares"]["B"] == pytest.approx(32.5)


def test_item_without_participants_counts_in_subtotal_only(people):
    items = [
        {"id": "i1", "price": 50, "participants": []},
        {"id": "i2", "price": 50, "participants": ["A"]},
    ]

    totals = compute_totals(items, people, 0, 0)

    assert totals["subtotal"] == 100
    assert totals["final_shares"] == {"A": 50, "B": 0, "C": 0}


def test_zero_subtotal_does_not_divide_by_zero(people):
    items = [{"id": "i1", "price": 0, "participants": ["A"]}]

    totals = compute_totals(items, people[:1], 10, 15)

    assert totals["subtotal"] == 0
    assert totals["grand_total"] == 0
    assert totals["final_shares"] == {"A": 0}


def test_dangling_participant_id_is_ignored(people):
    """Unknown ids get nothing but still count toward the per-person split."""
    items = [{"id": "i1", "price": 90, "participants": ["A", "ghost", "B"]}]

    totals = compute_totals(items, people, 0, 0)

    assert totals["final_shares"] == {"A": 30, "B": 30, "C": 0}
    assert "ghost" not in totals["final_shares"]


def test_duplicate_participant_ids_count_once(people):
    items = [{"id": "i1", "price": 10, "participants": ["A", "A", "B"]}]

    totals = compute_totals(items, people, 0, 0)

    assert totals["final_shares"]["A"] == 5
    assert totals["final_shares"]["B"] == 5


def test_empty_bill():
    totals = compute_totals([], [], 0, 0)

    assert totals == {
        "subtotal": 0,
        "tax_amount": 0,
        "tip_amount": 0,
        "grand_total": 0,
        "final_shares": {},
    }


def test_final_shares_add_up_to_grand_total(people):
    items = [
        {"id": "i1", "price": 100, "participants": ["A", "B", "C"]},
        {"id": "i2", "price": 10.01, "participants": ["A", "C"]},
        {"id": "i3", "price": 33.33, "participants": ["B"]},
        {"id": "i4", "price": 7, "participants": ["A", "B", "C"]},
    ]

    totals = compute_totals(items, people, 8.875, 18)

    assert sum(totals["final_shares"].values()) == pytest.approx(totals["grand_total"], rel=1e-9)


def test_numeric_strings_are_coerced(people):
    items = [{"id": "i1", "price": "12.50", "participants": ["A"]}]

    totals = compute_totals(items, people, "10", "0")

    assert totals["subtotal"] == 12.5
    assert totals["final_shares"]["A"] == pytest.approx(13.75)


def test_non_numeric_price_is_rejected(people):
    items = [{"id": "i1", "price": "twelve", "participants": ["A"]}]

    with pytest.raises(ValueError):
        compute_totals(items, people, 0, 0)


def test_idempotent_and_does_not_mutate_inputs(people):
    items = [
        {"id": "i1", "price": 100, "participants": ["A", "B", "C"]},
        {"id": "i2", "price": 15, "participants": ["C"]},
    ]
    items_before = copy.deepcopy(items)

    first = compute_totals(items, people, 10, 15)
    second = compute_totals(items, people, 10, 15)

    assert first == second
    assert round_totals(first) == round_totals(second)
    assert items == items_before


def test_round_totals_for_display(people):
    items = [{"id": "i1", "price": 100, "participants": ["A", "B", "C"]}]

    rounded = round_totals(compute_totals(items, people, 0, 0))

    assert rounded["final_shares"] == {"A": 33.33, "B": 33.33, "C": 33.33}
    assert rounded["grand_total"] == 100.0
