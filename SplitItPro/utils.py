"""
Utilities Module

This module provides utility functions and helpers for the bill splitting
application.

Features:
    - Numeric coercion of prices, percentages and payments
    - Transparency of how each participant's share was built
    - Currency formatting

Data Model:
    Input - participants: list of dicts with:
        - id: string
        - name: string

    Input - items: list of dicts with:
        - id: string
        - name: string
        - price: number (or numeric string)
        - category: string
        - participants: list of participant ids
        - paid_by: dict participant id -> amount

    Input - totals: dict from compute_totals() with:
        - subtotal, tax_amount, tip_amount, grand_total: float
        - final_shares: dict participant id -> float

Functions:
    to_decimal: Coerce a numeric value to Decimal.
    coerce_amount: Validate a non-negative monetary amount at the entry boundary.
    unique_ids: De-duplicate an id list keeping first-seen order.
    explain_participant_share: Get detailed breakdown for one participant.
    explain_all_participants: Get detailed breakdown for all participants.
    format_currency: Format amount with currency symbol.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from config.settings import CURRENCY_SYMBOL


def _round_decimal(value: Decimal) -> float:
    """Round a Decimal to 2 decimal places and convert to float."""
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_decimal(value, field_name: str = "value") -> Decimal:
    """
    Coerce a number or numeric string to Decimal.

    Empty values (None or "") count as zero, the way receipt prices that
    were never filled in are treated.

    Args:
        value: int, float, Decimal or numeric string.
        field_name: Name of the field for error messages.

    Returns:
        Decimal: The coerced value.

    Raises:
        ValueError: If the value is not coercible to a finite number.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number, got: {value!r}")

    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field_name} must be a number, got: {value!r}")

    if not result.is_finite():
        raise ValueError(f"{field_name} must be a finite number, got: {value!r}")
    return result


def coerce_amount(value, field_name: str = "amount") -> float:
    """
    Validate and convert a non-negative monetary amount or percentage.

    Args:
        value: Value to validate.
        field_name: Name of the field for error messages.

    Returns:
        float: The amount as a float.

    Raises:
        ValueError: If the value is not a number or is negative.
    """
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValueError(f"{field_name} must be non-negative, got: {value!r}")
    return float(amount)


def unique_ids(ids) -> list:
    """Return ids without duplicates, in first-seen order."""
    return list(dict.fromkeys(ids or []))


def explain_participant_share(
    participant_id: str,
    participants: list[dict],
    items: list[dict],
    totals: dict
) -> dict:
    """
    Generate detailed explanation of how a participant's share was calculated.

    For each item the participant consumes:
        - Shows item details (id, name, category, price)
        - Shows how many people split it
        - Shows the participant's slice (price / num_participants)

    Tax and tip slices are derived from the participant's fraction of the
    subtotal, matching compute_totals().

    Args:
        participant_id: ID of the participant to explain.
        participants: List of participant dicts.
        items: List of item dicts.
        totals: Output from compute_totals().

    Returns:
        dict: Explanation containing:
            - participant_id, name
            - item_contributions: list of dicts with item breakdown
            - subtotal_share, tax_share, tip_share, final_share: float
    """
    participant_map = {p["id"]: p for p in participants}

    if participant_id not in participant_map:
        return {
            "participant_id": participant_id,
            "name": None,
            "item_contributions": [],
            "subtotal_share": 0.0,
            "tax_share": 0.0,
            "tip_share": 0.0,
            "final_share": 0.0,
            "error": f"Participant {participant_id} not found"
        }

    item_contributions = []
    subtotal_share = Decimal("0")

    for item in items:
        consumers = unique_ids(item.get("participants"))
        if participant_id not in consumers:
            continue

        price = to_decimal(item.get("price"), "price")
        share = price / Decimal(len(consumers))
        subtotal_share += share

        item_contributions.append({
            "item_id": item.get("id", "N/A"),
            "name": item.get("name", ""),
            "category": item.get("category", "other"),
            "price": _round_decimal(price),
            "num_participants": len(consumers),
            "participant_share": _round_decimal(share)
        })

    subtotal = to_decimal(totals.get("subtotal"), "subtotal")
    ratio = subtotal_share / subtotal if subtotal > 0 else Decimal("0")
    tax_share = to_decimal(totals.get("tax_amount"), "tax_amount") * ratio
    tip_share = to_decimal(totals.get("tip_amount"), "tip_amount") * ratio

    return {
        "participant_id": participant_id,
        "name": participant_map[participant_id].get("name"),
        "item_contributions": item_contributions,
        "subtotal_share": _round_decimal(subtotal_share),
        "tax_share": _round_decimal(tax_share),
        "tip_share": _round_decimal(tip_share),
        "final_share": _round_decimal(
            to_decimal(totals.get("final_shares", {}).get(participant_id, 0))
        )
    }


def explain_all_participants(
    participants: list[dict],
    items: list[dict],
    totals: dict
) -> list[dict]:
    """
    Generate detailed explanations for all participants.

    Notes:
        - Includes all participants, even those who consumed nothing
        - Keeps the order of the participants list
    """
    return [
        explain_participant_share(p["id"], participants, items, totals)
        for p in participants
    ]


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Format a monetary amount with the appropriate currency symbol.

    Returns:
        str: Formatted string like "₼1,234.56".
    """
    return f"{symbol}{amount:,.2f}"
