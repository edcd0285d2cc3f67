"""
Items Module

This module handles all item-related operations for the bill splitting
application.

Features:
    - Add/duplicate/edit/delete items
    - Categorize items (food, alcohol, tea, other)
    - Track who shares each item and who paid toward it

Data Model:
    Item held in Bill.items
    Fields:
        - id: string (I001, I002, ... format)
        - name: string
        - price: float (must be >= 0)
        - category: string (food, alcohol, tea, other)
        - participants: list of participant ids sharing the item
        - paid_by: dict participant id -> amount paid toward the item

Functions:
    add_item: Add a new item to a bill.
    duplicate_item: Copy an item under a new id.
    update_item: Change an item's name, price or category.
    toggle_participation: Add or remove a participant from an item.
    record_payment: Set how much a participant paid toward an item.
    remove_item: Delete an item.
    clear_items: Delete all items.
    get_item: Look up an item by id.
"""

import copy
import logging
import re
from typing import Optional

from participants import _validate_non_empty_string, get_participant
from utils import coerce_amount, unique_ids

logger = logging.getLogger(__name__)


# Valid item categories
VALID_CATEGORIES = {"food", "alcohol", "tea", "other"}


class Item:
    """
    Represents a single line on the bill.

    Attributes:
        id (str): Unique identifier in I### format.
        name (str): Display name.
        price (float): Price of the item (>= 0).
        category (str): One of: food, alcohol, tea, other.
        participants (list[str]): Participant IDs who share the item.
        paid_by (dict[str, float]): Amount each participant paid toward it.
    """

    def __init__(
        self,
        item_id: str,
        name: str,
        price: float = 0.0,
        category: str = "food",
        participants: Optional[list[str]] = None,
        paid_by: Optional[dict] = None
    ):
        self.id = item_id
        self.name = name
        self.price = price
        self.category = category
        self.participants = unique_ids(participants)
        self.paid_by = dict(paid_by or {})

    def to_dict(self) -> dict:
        """Convert item to dictionary for storage and calculations."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "participants": list(self.participants),
            "paid_by": dict(self.paid_by)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        """Create an Item instance from a dictionary."""
        return cls(
            item_id=data.get("id"),
            name=data.get("name", ""),
            price=coerce_amount(data.get("price", 0.0), "price"),
            category=data.get("category") or "other",
            participants=data.get("participants", []),
            paid_by={
                pid: coerce_amount(amount, "paid_by amount")
                for pid, amount in (data.get("paid_by") or {}).items()
            }
        )

    def __repr__(self) -> str:
        return f"Item(id='{self.id}', name='{self.name}', price={self.price}, category='{self.category}')"


def _generate_next_item_id(bill) -> str:
    """
    Generate the next sequential item ID for a bill.

    Format: I001, I002, I003, ...
    """
    max_num = 0
    pattern = re.compile(r'^I(\d+)$')

    for item in bill.items:
        match = pattern.match(item.id or "")
        if match:
            max_num = max(max_num, int(match.group(1)))

    return f"I{max_num + 1:03d}"


def _validate_category(category: str) -> None:
    if category not in VALID_CATEGORIES:
        raise ValueError(f"category must be one of {sorted(VALID_CATEGORIES)}, got: {category}")


def get_item(bill, item_id: str) -> Item:
    """
    Look up an item on a bill.

    Raises:
        ValueError: If the item does not exist.
    """
    for item in bill.items:
        if item.id == item_id:
            return item
    raise ValueError(f"Item {item_id} not found")


def add_item(
    bill,
    name: str = "New Item",
    price=0.0,
    category: str = "food",
    participants: Optional[list[str]] = None
) -> Item:
    """
    Add a new item to a bill.

    Args:
        bill: The Bill to modify.
        name: Display name of the item.
        price: Price of the item (numeric strings are accepted).
        category: One of: food, alcohol, tea, other.
        participants: Participant IDs sharing the item. Defaults to
            everyone currently on the bill.

    Returns:
        Item: The created item object.

    Raises:
        ValueError: If price or category is invalid, or a listed
            participant does not exist.
    """
    _validate_category(category)

    if participants is None:
        participants = [p.id for p in bill.participants]
    else:
        for participant_id in participants:
            get_participant(bill, participant_id)

    item = Item(
        item_id=_generate_next_item_id(bill),
        name=name.strip() if isinstance(name, str) else "",
        price=coerce_amount(price, "price"),
        category=category,
        participants=participants
    )
    bill.items.append(item)
    bill.touch()

    logger.debug("Added item %s (%s, %.2f)", item.id, item.name, item.price)
    return item


def duplicate_item(bill, item_id: str) -> Item:
    """
    Copy an item, including participants and payments, under a new id.

    The copy's name gets a " (Copy)" suffix.
    """
    original = get_item(bill, item_id)

    item = copy.deepcopy(original)
    item.id = _generate_next_item_id(bill)
    item.name = f"{original.name} (Copy)"

    bill.items.append(item)
    bill.touch()
    return item


def update_item(
    bill,
    item_id: str,
    name: Optional[str] = None,
    price=None,
    category: Optional[str] = None
) -> Item:
    """
    Change an item's name, price or category. Arguments left as None are kept.

    Raises:
        ValueError: If the item does not exist or a value is invalid.
    """
    item = get_item(bill, item_id)

    if name is not None:
        _validate_non_empty_string(name, "name")
    if category is not None:
        _validate_category(category)
    if price is not None:
        price = coerce_amount(price, "price")

    if name is not None:
        item.name = name.strip()
    if category is not None:
        item.category = category
    if price is not None:
        item.price = price

    bill.touch()
    return item


def toggle_participation(bill, item_id: str, participant_id: str) -> Item:
    """
    Add a participant to an item, or remove them if already sharing it.

    Raises:
        ValueError: If the item or participant does not exist.
    """
    item = get_item(bill, item_id)
    get_participant(bill, participant_id)

    if participant_id in item.participants:
        item.participants.remove(participant_id)
    else:
        item.participants.append(participant_id)

    bill.touch()
    return item


def record_payment(bill, item_id: str, participant_id: str, amount) -> Item:
    """
    Set how much a participant paid toward an item.

    An amount of zero removes the participant from the item's payers.
    Payments are not checked against the item price.

    Raises:
        ValueError: If the item or participant does not exist, or the
            amount is not a non-negative number.
    """
    item = get_item(bill, item_id)
    get_participant(bill, participant_id)
    amount = coerce_amount(amount, "amount")

    if amount == 0:
        item.paid_by.pop(participant_id, None)
    else:
        item.paid_by[participant_id] = amount

    bill.touch()
    return item


def remove_item(bill, item_id: str) -> Item:
    """
    Delete an item from a bill.

    Raises:
        ValueError: If the item does not exist.
    """
    item = get_item(bill, item_id)
    bill.items.remove(item)
    bill.touch()

    logger.info("Removed item %s", item_id)
    return item


def clear_items(bill) -> None:
    """Delete all items from a bill."""
    bill.items = []
    bill.touch()
