"""
Analytics Module

This module provides analytics and reporting features for the bill
splitting application.

Features:
    - Category-wise item breakdown
    - Per-participant recorded payment totals
    - Items left out of cost sharing or settlement
    - Smart warnings for incomplete or inconsistent bills

Data Model:
    Input - participants: list of dicts with:
        - id: string
        - name: string (optional)

    Input - items: list of dicts with:
        - id, name: string
        - price: number
        - category: string
        - participants: list of participant ids
        - paid_by: dict participant id -> amount

    Output - dict containing:
        - analytics: dict with category_breakdown, payer_totals, etc.
        - warnings: list of warning strings

Functions:
    generate_analytics: Generate analytics and warnings from bill data.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from utils import format_currency, to_decimal, unique_ids

# Largest gap between recorded payments and price that is not reported
PAYMENT_TOLERANCE = Decimal("0.01")


def _round_decimal(value: Decimal) -> float:
    """Round a Decimal to 2 decimal places and convert to float."""
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def generate_analytics(participants: list[dict], items: list[dict]) -> dict:
    """
    Generate analytics and smart warnings from bill data.

    Analytics computed:
        - category_breakdown: Total price per category
        - payer_totals: Total recorded payments per participant
        - unassigned_items: Items nobody shares (cost attributed to nobody)
        - unpaid_items: Priced, shared items with no recorded payer
          (left out of settlement)

    Warnings generated (rule-based):
        - If an item has no participants
        - If an item has participants but nobody recorded as paying
        - If recorded payments differ from the item price by more than 0.01
        - If an item references a participant id that is not on the bill

    Args:
        participants: List of participant dicts with id (name optional).
        items: List of item dicts.

    Returns:
        dict: Contains two keys:
            - analytics: dict with category_breakdown, payer_totals,
                         unassigned_items, unpaid_items
            - warnings: list of warning strings
    """
    known_ids = {p["id"] for p in participants}

    category_totals = defaultdict(Decimal)
    payer_totals = defaultdict(Decimal)
    unassigned_items = []
    unpaid_items = []
    warnings = []

    for item in items:
        label = item.get("name") or item.get("id")
        price = to_decimal(item.get("price"), "price")
        consumers = unique_ids(item.get("participants"))
        paid_by = item.get("paid_by") or {}

        category_totals[item.get("category") or "other"] += price

        recorded = Decimal("0")
        for payer_id, amount in paid_by.items():
            amount = to_decimal(amount, "paid_by amount")
            recorded += amount
            if payer_id in known_ids:
                payer_totals[payer_id] += amount

        # Rule 1: nobody shares the item
        if not consumers:
            unassigned_items.append(item.get("id"))
            if price > 0:
                warnings.append(
                    f"Warning: '{label}' ({format_currency(_round_decimal(price))}) "
                    f"is not shared by anyone and is not part of any share"
                )
        # Rule 2: shared but nobody recorded as paying
        elif price > 0 and not paid_by:
            unpaid_items.append(item.get("id"))
            warnings.append(
                f"Warning: nobody is recorded as paying for '{label}', "
                f"so it is left out of the settlement"
            )

        # Rule 3: payments do not add up to the price
        if paid_by and abs(recorded - price) > PAYMENT_TOLERANCE:
            warnings.append(
                f"Warning: payments for '{label}' add up to "
                f"{format_currency(_round_decimal(recorded))} but it costs "
                f"{format_currency(_round_decimal(price))}"
            )

        # Rule 4: stale participant references
        unknown = [pid for pid in unique_ids(consumers + list(paid_by)) if pid not in known_ids]
        if unknown:
            warnings.append(
                f"Warning: '{label}' references unknown participants: {', '.join(unknown)}"
            )

    analytics = {
        "category_breakdown": {
            category: _round_decimal(amount)
            for category, amount in category_totals.items()
        },
        "payer_totals": {
            payer_id: _round_decimal(amount)
            for payer_id, amount in payer_totals.items()
        },
        "unassigned_items": unassigned_items,
        "unpaid_items": unpaid_items
    }

    return {
        "analytics": analytics,
        "warnings": warnings
    }
