"""
Firebase Store Module

This module handles saving and loading bills in Firebase Firestore for the
bill splitting application.

Features:
    - Create and overwrite bills (idempotent saves)
    - Fetch one bill, all bills, or the most recent bill
    - Delete bills

Firestore Structure:
    bills/{bill_id}
        - id: string
        - participants: list of participant dicts
        - items: list of item dicts
        - tax_percent: float
        - tip_percent: float
        - created_at: timestamp
        - updated_at: timestamp

Functions:
    save_bill: Create or overwrite a bill document.
    get_bill: Fetch a bill by id.
    list_bills: Fetch all bills, newest first.
    get_latest_bill: Fetch the most recently created bill.
    delete_bill: Delete a bill document.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from firebase_admin import firestore

from config.firebase_config import get_db
from config.settings import BILLS_COLLECTION

logger = logging.getLogger(__name__)


def _get_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        str: ISO formatted timestamp.
    """
    return datetime.now(timezone.utc).isoformat()


def _generate_bill_id() -> str:
    """
    Generate a unique bill ID.

    Format: bill_{short_uuid}
    """
    return f"bill_{uuid.uuid4().hex[:8]}"


def _validate_bill_id(bill_id: str) -> None:
    """
    Validate that bill_id is a non-empty string.

    Raises:
        ValueError: If bill_id is invalid.
    """
    if not isinstance(bill_id, str) or not bill_id.strip():
        raise ValueError("bill_id must be a non-empty string")


def _bills():
    """
    Get the bills collection reference.

    Raises:
        RuntimeError: If Firestore is not available.
    """
    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")
    return db.collection(BILLS_COLLECTION)


def save_bill(bill_data: dict, bill_id: Optional[str] = None) -> dict:
    """
    Save a bill to Firestore.

    Stores the bill as a single document at:
        bills/{bill_id}

    Args:
        bill_data: Bill dict (see Bill.to_dict()).
        bill_id: Existing bill id to overwrite. When omitted, the id in
            bill_data is used, or a new one is generated.

    Returns:
        dict: The stored document, including id and timestamps.

    Raises:
        ValueError: If bill_id is invalid.
        RuntimeError: If Firestore is not available.

    Notes:
        - Overwrites an existing bill document (idempotent)
        - Keeps created_at when present, always refreshes updated_at
    """
    bill_id = bill_id or bill_data.get("id") or _generate_bill_id()
    _validate_bill_id(bill_id)

    bills = _bills()
    timestamp = _get_timestamp()

    doc_data = {
        **bill_data,
        "id": bill_id,
        "created_at": bill_data.get("created_at") or timestamp,
        "updated_at": timestamp
    }

    bills.document(bill_id).set(doc_data)
    logger.info("Saved bill %s", bill_id)

    return doc_data


def get_bill(bill_id: str) -> Optional[dict]:
    """
    Fetch a bill from Firestore.

    Returns:
        dict | None: The bill document, or None if it does not exist.

    Raises:
        ValueError: If bill_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    _validate_bill_id(bill_id)

    doc = _bills().document(bill_id).get()
    if not doc.exists:
        return None
    return doc.to_dict()


def list_bills() -> list[dict]:
    """
    Fetch all bills, most recently created first.

    Raises:
        RuntimeError: If Firestore is not available.
    """
    query = _bills().order_by("created_at", direction=firestore.Query.DESCENDING)
    return [doc.to_dict() for doc in query.stream()]


def get_latest_bill() -> Optional[dict]:
    """
    Fetch the most recently created bill.

    Only the newest document is read from Firestore.

    Returns:
        dict | None: The newest bill, or None if there are no bills.

    Raises:
        RuntimeError: If Firestore is not available.
    """
    query = (
        _bills()
        .order_by("created_at", direction=firestore.Query.DESCENDING)
        .limit(1)
    )
    for doc in query.stream():
        return doc.to_dict()
    return None


def delete_bill(bill_id: str) -> bool:
    """
    Delete a bill from Firestore.

    Returns:
        bool: True if the bill existed and was deleted, False otherwise.

    Raises:
        ValueError: If bill_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    _validate_bill_id(bill_id)

    doc_ref = _bills().document(bill_id)
    if not doc_ref.get().exists:
        return False

    doc_ref.delete()
    logger.info("Deleted bill %s", bill_id)
    return True
