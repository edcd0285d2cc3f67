"""
Participants Module

This module handles all participant-related operations for the bill
splitting application.

Features:
    - Add/remove participants on a bill
    - Bulk import participant names from CSV text
    - Track manual paid status and amount paid
    - Cascade removals into item participation and payments

Data Model:
    Participant held in Bill.participants
    Fields:
        - id: string (P001, P002, ... format)
        - name: string
        - paid: bool (manually toggled, independent of settlement)
        - amount_paid: float (manually entered, informational only)

Functions:
    add_participant: Add a new participant to a bill.
    import_participants_csv: Add participants from comma separated names.
    remove_participant: Delete a participant and every reference to them.
    clear_participants: Delete all participants and their item references.
    toggle_paid: Flip a participant's paid flag.
    set_amount_paid: Record the amount a participant says they paid.
    get_participant: Look up a participant by id.
"""

import logging
import re
from typing import Optional

from utils import coerce_amount

logger = logging.getLogger(__name__)


def _generate_next_participant_id(bill) -> str:
    """
    Generate the next sequential participant ID for a bill.

    Format: P001, P002, P003, ...

    IDs that do not follow the P### format (e.g. imported from elsewhere)
    are skipped when looking for the highest number.
    """
    max_num = 0
    pattern = re.compile(r'^P(\d+)$')

    for participant in bill.participants:
        match = pattern.match(participant.id or "")
        if match:
            max_num = max(max_num, int(match.group(1)))

    return f"P{max_num + 1:03d}"


class Participant:
    """
    Represents a participant on a bill.

    Attributes:
        id (str): Unique identifier for the participant.
        name (str): Display name of the participant.
        paid (bool): Whether the participant is marked as having paid.
        amount_paid (float): Amount the participant reports having paid.
    """

    def __init__(
        self,
        name: str,
        participant_id: Optional[str] = None,
        paid: bool = False,
        amount_paid: float = 0.0
    ):
        self.id = participant_id
        self.name = name
        self.paid = paid
        self.amount_paid = amount_paid

    def to_dict(self) -> dict:
        """Convert participant to dictionary for storage and calculations."""
        return {
            "id": self.id,
            "name": self.name,
            "paid": self.paid,
            "amount_paid": self.amount_paid
        }

    def __repr__(self) -> str:
        return f"Participant(id='{self.id}', name='{self.name}', paid={self.paid})"

    @classmethod
    def from_dict(cls, data: dict) -> "Participant":
        """
        Create a Participant instance from a dictionary.

        Raises:
            ValueError: If the name is empty or amount_paid is invalid.
        """
        _validate_non_empty_string(data.get("name"), "name")
        return cls(
            participant_id=data.get("id"),
            name=data.get("name"),
            paid=bool(data.get("paid", False)),
            amount_paid=coerce_amount(data.get("amount_paid", 0.0), "amount_paid")
        )


def _validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Raises:
        ValueError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return True


def get_participant(bill, participant_id: str) -> Participant:
    """
    Look up a participant on a bill.

    Raises:
        ValueError: If the participant does not exist.
    """
    for participant in bill.participants:
        if participant.id == participant_id:
            return participant
    raise ValueError(f"Participant {participant_id} not found")


def add_participant(bill, name: str) -> Participant:
    """
    Add a new participant to a bill.

    Args:
        bill: The Bill to modify.
        name: Name of the participant.

    Returns:
        Participant: The created participant object.

    Raises:
        ValueError: If the name is empty.
    """
    _validate_non_empty_string(name, "name")

    participant = Participant(
        name=name.strip(),
        participant_id=_generate_next_participant_id(bill)
    )
    bill.participants.append(participant)
    bill.touch()

    logger.debug("Added participant %s (%s)", participant.id, participant.name)
    return participant


def import_participants_csv(bill, csv_text: str) -> list[Participant]:
    """
    Add participants from comma separated names.

    Names are trimmed and compared case-insensitively; a name that matches
    an existing participant, or one already seen in the same import, is
    skipped. Line breaks are treated like commas, and quote characters
    are kept as part of a name.

    Args:
        bill: The Bill to modify.
        csv_text: Text such as "Alex, Jordan, Taylor".

    Returns:
        list[Participant]: The participants that were actually added.
    """
    if not isinstance(csv_text, str) or not csv_text.strip():
        return []

    seen = {p.name.lower() for p in bill.participants if p.name}
    added = []

    for cell in re.split(r"[,\r\n]", csv_text):
        name = cell.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        added.append(add_participant(bill, name))

    logger.info("Imported %d participants", len(added))
    return added


def remove_participant(bill, participant_id: str) -> Participant:
    """
    Remove a participant from a bill.

    The participant's id is also removed from every item's participant list
    and payment map, so no item keeps a reference to them.

    Raises:
        ValueError: If the participant does not exist.
    """
    participant = get_participant(bill, participant_id)
    bill.participants.remove(participant)

    for item in bill.items:
        item.participants = [pid for pid in item.participants if pid != participant_id]
        item.paid_by.pop(participant_id, None)

    bill.touch()
    logger.info("Removed participant %s", participant_id)
    return participant


def clear_participants(bill) -> None:
    """Remove all participants along with all item participation and payments."""
    bill.participants = []
    for item in bill.items:
        item.participants = []
        item.paid_by = {}
    bill.touch()


def toggle_paid(bill, participant_id: str) -> Participant:
    """Flip the paid flag of a participant."""
    participant = get_participant(bill, participant_id)
    participant.paid = not participant.paid
    bill.touch()
    return participant


def set_amount_paid(bill, participant_id: str, amount) -> Participant:
    """
    Record the amount a participant says they have paid.

    This is tracking only; settlement is driven by item payments.

    Raises:
        ValueError: If the participant does not exist or amount is invalid.
    """
    participant = get_participant(bill, participant_id)
    participant.amount_paid = coerce_amount(amount, "amount_paid")
    bill.touch()
    return participant
