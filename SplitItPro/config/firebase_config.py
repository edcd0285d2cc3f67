"""
Firebase Configuration Module

Lazily initializes the firebase_admin app and hands out a Firestore client.

Credentials:
    - SPLITIT_FIREBASE_CREDENTIALS: path to a service account JSON file
    - otherwise Google application default credentials are used

Functions:
    get_db: Return the shared Firestore client, or None if unavailable.
"""

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from config.settings import FIREBASE_CREDENTIALS, FIREBASE_PROJECT_ID

logger = logging.getLogger(__name__)

_db = None


def _get_or_init_app():
    """Return the default firebase_admin app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    return firebase_admin.initialize_app(cred, options)


def get_db():
    """
    Get the Firestore client.

    Returns:
        The Firestore client, or None when Firebase cannot be initialized
        (missing or invalid credentials). Callers raise RuntimeError on None.
    """
    global _db
    if _db is not None:
        return _db

    try:
        _db = firestore.client(_get_or_init_app())
    except Exception as e:
        logger.warning("Firestore is not available: %s", e)
        return None

    logger.info("Connected to Firestore")
    return _db
