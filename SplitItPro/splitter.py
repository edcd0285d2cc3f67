"""
Splitter Module

This module handles the cost splitting logic for the bill splitting
application.

Features:
    - Equal splitting of each item among its participants
    - Proportional redistribution of tax and tip
    - Unrounded internal arithmetic, 2-decimal display rounding

Data Model:
    Input - items (list of dicts):
        - id: string
        - price: number (numeric strings are coerced)
        - participants: list of participant ids

    Input - participants (list of dicts):
        - id: string

    Output - totals (dict):
        - subtotal: float (sum of item prices)
        - tax_amount: float (subtotal * tax_percent / 100)
        - tip_amount: float (subtotal * tip_percent / 100)
        - grand_total: float (subtotal + tax_amount + tip_amount)
        - final_shares: dict keyed by participant id (float)

Functions:
    compute_totals: Calculate bill totals and per-participant final shares.
    round_totals: Round totals to 2 decimal places for display.
"""

from decimal import Decimal, ROUND_HALF_UP

from utils import to_decimal, unique_ids


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_totals(
    items: list[dict],
    participants: list[dict],
    tax_percent=0,
    tip_percent=0
) -> dict:
    """
    Calculate bill totals and each participant's final share.

    For each item:
        1. The item price is added to the subtotal
        2. Each listed participant's share increases by (price / num_participants)

    Tax and tip are then spread over participants in proportion to their
    share of the subtotal.

    Args:
        items: List of item dicts with price and participants.
        participants: List of participant dicts with id.
        tax_percent: Tax percentage applied to the subtotal.
        tip_percent: Tip percentage applied to the subtotal.

    Returns:
        dict: subtotal, tax_amount, tip_amount, grand_total and final_shares,
        all unrounded floats.

    Notes:
        - Items with no participants count toward the subtotal but nobody's share
        - Participant ids that are not in `participants` are ignored,
          but still count toward the item's divisor
        - A zero subtotal gives every participant a zero share
        - Does NOT modify its inputs
    """
    # Initialize shares for all participants using Decimal for precision
    person_shares = {p["id"]: Decimal("0") for p in participants}
    subtotal = Decimal("0")

    for item in items:
        price = to_decimal(item.get("price"), "price")
        subtotal += price

        consumers = unique_ids(item.get("participants"))
        if not consumers:
            continue

        per_person = price / Decimal(len(consumers))
        for participant_id in consumers:
            if participant_id in person_shares:
                person_shares[participant_id] += per_person

    tax_amount = subtotal * to_decimal(tax_percent, "tax_percent") / Decimal(100)
    tip_amount = subtotal * to_decimal(tip_percent, "tip_percent") / Decimal(100)
    grand_total = subtotal + tax_amount + tip_amount

    # Distribute tax and tip proportionally to each subtotal share
    final_shares = {}
    for participant_id, share in person_shares.items():
        share_ratio = share / subtotal if subtotal > 0 else Decimal("0")
        final = share + tax_amount * share_ratio + tip_amount * share_ratio
        final_shares[participant_id] = float(final)

    return {
        "subtotal": float(subtotal),
        "tax_amount": float(tax_amount),
        "tip_amount": float(tip_amount),
        "grand_total": float(grand_total),
        "final_shares": final_shares
    }


def round_totals(totals: dict) -> dict:
    """Return a copy of compute_totals() output rounded to 2 decimal places."""
    return {
        "subtotal": _round_decimal(to_decimal(totals["subtotal"])),
        "tax_amount": _round_decimal(to_decimal(totals["tax_amount"])),
        "tip_amount": _round_decimal(to_decimal(totals["tip_amount"])),
        "grand_total": _round_decimal(to_decimal(totals["grand_total"])),
        "final_shares": {
            participant_id: _round_decimal(to_decimal(share))
            for participant_id, share in totals["final_shares"].items()
        }
    }
