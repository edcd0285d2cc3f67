"""
Bill Module

The Bill is the externally-owned state object: participants, items and the
tax/tip modifiers. Callers mutate it through participants.py and items.py
and recompute results from scratch after every change.

Functions:
    Bill.calculate: Totals and settlements for the current state.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from config.settings import DEFAULT_TAX_PERCENT, DEFAULT_TIP_PERCENT
from items import Item
from participants import Participant
from settlement import compute_settlements
from splitter import compute_totals
from utils import coerce_amount

logger = logging.getLogger(__name__)


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


class Bill:
    """
    A bill being split.

    Attributes:
        id (str | None): Store identifier, None until first saved.
        participants (list[Participant]): People on the bill.
        items (list[Item]): Lines on the bill.
        tax_percent (float): Tax percentage applied to the subtotal.
        tip_percent (float): Tip percentage applied to the subtotal.
        created_at (str | None): ISO timestamp of creation.
        updated_at (str | None): ISO timestamp of the last change.
    """

    def __init__(
        self,
        bill_id: Optional[str] = None,
        participants: Optional[list[Participant]] = None,
        items: Optional[list[Item]] = None,
        tax_percent: float = DEFAULT_TAX_PERCENT,
        tip_percent: float = DEFAULT_TIP_PERCENT,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None
    ):
        self.id = bill_id
        self.participants = participants or []
        self.items = items or []
        self.tax_percent = coerce_amount(tax_percent, "tax_percent")
        self.tip_percent = coerce_amount(tip_percent, "tip_percent")
        self.created_at = created_at or _get_timestamp()
        self.updated_at = updated_at or self.created_at

    def touch(self) -> None:
        """Mark the bill as changed."""
        self.updated_at = _get_timestamp()

    def set_tax_and_tip(self, tax_percent=None, tip_percent=None) -> None:
        """
        Set tax and tip percentages. Arguments left as None are kept.

        Raises:
            ValueError: If a percentage is not a non-negative number.
        """
        if tax_percent is not None:
            self.tax_percent = coerce_amount(tax_percent, "tax_percent")
        if tip_percent is not None:
            self.tip_percent = coerce_amount(tip_percent, "tip_percent")
        self.touch()

    def participant_dicts(self) -> list[dict]:
        return [p.to_dict() for p in self.participants]

    def item_dicts(self) -> list[dict]:
        return [i.to_dict() for i in self.items]

    def calculate(self) -> dict:
        """
        Compute totals and settlements for the current state.

        Returns:
            dict: Contains two keys:
                - totals: output of compute_totals()
                - settlements: output of compute_settlements()
        """
        participants = self.participant_dicts()
        items = self.item_dicts()

        return {
            "totals": compute_totals(items, participants, self.tax_percent, self.tip_percent),
            "settlements": compute_settlements(items, participants)
        }

    def reset(self) -> None:
        """Clear everything and restore the default tax and tip."""
        self.id = None
        self.participants = []
        self.items = []
        self.tax_percent = DEFAULT_TAX_PERCENT
        self.tip_percent = DEFAULT_TIP_PERCENT
        self.touch()
        logger.info("Bill reset")

    def to_dict(self) -> dict:
        """Convert bill to dictionary for Firestore storage."""
        return {
            "id": self.id,
            "participants": self.participant_dicts(),
            "items": self.item_dicts(),
            "tax_percent": self.tax_percent,
            "tip_percent": self.tip_percent,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Bill":
        """
        Create a Bill instance from a dictionary.

        Raises:
            ValueError: If a numeric field is not coercible, or two
                participants (or two items) share an id.
        """
        participants = [Participant.from_dict(p) for p in data.get("participants") or []]
        items = [Item.from_dict(i) for i in data.get("items") or []]

        for kind, records in (("participant", participants), ("item", items)):
            ids = [r.id for r in records]
            duplicates = sorted({i for i in ids if ids.count(i) > 1}, key=str)
            if duplicates:
                raise ValueError(f"Duplicate {kind} ids: {', '.join(map(str, duplicates))}")

        return cls(
            bill_id=data.get("id"),
            participants=participants,
            items=items,
            tax_percent=data.get("tax_percent", DEFAULT_TAX_PERCENT),
            tip_percent=data.get("tip_percent", DEFAULT_TIP_PERCENT),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at")
        )

    def __repr__(self) -> str:
        return (
            f"Bill(id={self.id!r}, participants={len(self.participants)}, "
            f"items={len(self.items)}, tax={self.tax_percent}, tip={self.tip_percent})"
        )
