"""
Settlement Module

This module handles the settlement calculations for the bill splitting
application.

Features:
    - Net balance per participant from recorded per-item payments
    - Minimize number of transactions using greedy algorithm
    - Handle rounding safely
    - Generate who-pays-whom transaction list

Data Model:
    Input - items (list of dicts):
        - price: number
        - participants: list of participant ids (consumers)
        - paid_by: dict participant id -> amount paid toward the item

    Input - participants (list of dicts):
        - id: string

    Output - balances (dict keyed by participant id):
        - float (positive = owed money, negative = owes money)

    Output - list of settlement transactions:
        - from: string (debtor who pays)
        - to: string (creditor who receives)
        - amount: float (rounded to 2 decimal places)

Functions:
    calculate_balances: Net balance per participant.
    optimize_settlements: Convert balances into minimal settlement transactions.
    compute_settlements: Balances and transactions in one call.
"""

from decimal import Decimal, ROUND_HALF_UP

from utils import to_decimal, unique_ids

# Threshold for ignoring tiny rounding differences
EPSILON = Decimal("0.01")


def _round_decimal(value: Decimal) -> float:
    """
    Round a Decimal to 2 decimal places and convert to float.

    Args:
        value: Decimal value to round.

    Returns:
        float: Rounded value as float.
    """
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _calculate_balances(items: list[dict], participants: list[dict]) -> dict:
    """Same as calculate_balances() but keeps Decimal values."""
    balances = {p["id"]: Decimal("0") for p in participants}

    for item in items:
        price = to_decimal(item.get("price"), "price")
        consumers = unique_ids(item.get("participants"))

        if price <= 0 or not consumers:
            continue

        # Items nobody is recorded as paying for are left out of settlement
        paid_by = item.get("paid_by") or {}
        if not paid_by:
            continue

        per_person = price / Decimal(len(consumers))

        for payer_id, amount in paid_by.items():
            if payer_id in balances:
                balances[payer_id] += to_decimal(amount, "paid_by amount")

        for participant_id in consumers:
            if participant_id in balances:
                balances[participant_id] -= per_person

    return balances


def calculate_balances(items: list[dict], participants: list[dict]) -> dict:
    """
    Calculate each participant's net balance from per-item payments.

    For each item with a positive price, at least one participant and at
    least one recorded payer:
        1. Each payer is credited the amount recorded in paid_by
        2. Each participant is debited (price / num_participants)

    A participant who both paid for and consumed an item gets both entries.

    Args:
        items: List of item dicts with price, participants and paid_by.
        participants: List of participant dicts with id.

    Returns:
        dict: participant id -> net balance (unrounded float)
            - Positive = participant is owed money
            - Negative = participant owes money

    Notes:
        - Items with an empty paid_by are skipped entirely
        - Ids not present in `participants` are ignored
        - Recorded payments are not checked against the item price
    """
    return {
        participant_id: float(balance)
        for participant_id, balance in _calculate_balances(items, participants).items()
    }


def optimize_settlements(balances: dict) -> list[dict]:
    """
    Convert net balances into minimal settlement transactions.

    Uses a greedy algorithm:
        1. Separate participants into debtors (balance < -0.01) and creditors (balance > 0.01)
        2. Sort debtors by most negative balance (largest debt first)
        3. Sort creditors by most positive balance (largest credit first)
        4. Iteratively match debtors with creditors:
           - Take the largest debtor and largest creditor
           - Settle the minimum of their absolute balances
           - Update remaining balances
           - Move past whichever side is settled (< 0.01 left)

    Args:
        balances: Dictionary keyed by participant id with a signed balance.

    Returns:
        list[dict]: List of settlement transactions, each containing:
            - from: string (debtor who pays)
            - to: string (creditor who receives)
            - amount: float (rounded to 2 decimal places)

    Notes:
        - Produces at most (creditors + debtors - 1) transactions
        - Does NOT modify input balances
    """
    debtors = []   # [participant_id, amount_owed] - amounts stored as positive
    creditors = [] # [participant_id, amount_due]

    for participant_id, balance in balances.items():
        net = to_decimal(balance, "balance")

        if net < -EPSILON:
            debtors.append([participant_id, abs(net)])
        elif net > EPSILON:
            creditors.append([participant_id, net])

    # sort() is stable, so ties keep the input order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    settlements = []

    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor_id, debt_amount = debtors[debtor_idx]
        creditor_id, credit_amount = creditors[creditor_idx]

        settlement_amount = min(debt_amount, credit_amount)

        if settlement_amount > EPSILON:
            settlements.append({
                "from": debtor_id,
                "to": creditor_id,
                "amount": _round_decimal(settlement_amount)
            })

        debtors[debtor_idx][1] = debt_amount - settlement_amount
        creditors[creditor_idx][1] = credit_amount - settlement_amount

        if debtors[debtor_idx][1] < EPSILON:
            debtor_idx += 1

        if creditors[creditor_idx][1] < EPSILON:
            creditor_idx += 1

    return settlements


def compute_settlements(items: list[dict], participants: list[dict]) -> dict:
    """
    Determine who must pay whom to balance recorded payments against consumption.

    Args:
        items: List of item dicts with price, participants and paid_by.
        participants: List of participant dicts with id.

    Returns:
        dict: Contains two keys:
            - balances: participant id -> unrounded float balance
            - transactions: list from optimize_settlements()
    """
    balances = _calculate_balances(items, participants)

    return {
        "balances": {pid: float(balance) for pid, balance in balances.items()},
        "transactions": optimize_settlements(balances)
    }
