"""
Centralized configuration for SplitIt Pro, read from the environment.
"""

import os

# Bill defaults
DEFAULT_TAX_PERCENT = float(os.getenv("SPLITIT_DEFAULT_TAX_PERCENT", "10"))
DEFAULT_TIP_PERCENT = float(os.getenv("SPLITIT_DEFAULT_TIP_PERCENT", "15"))
CURRENCY_SYMBOL = os.getenv("SPLITIT_CURRENCY_SYMBOL", "₼")

# Runtime settings
LOG_LEVEL = os.getenv("SPLITIT_LOG_LEVEL", "INFO").upper()

# Firestore
FIREBASE_CREDENTIALS = os.getenv("SPLITIT_FIREBASE_CREDENTIALS")
FIREBASE_PROJECT_ID = os.getenv("SPLITIT_FIREBASE_PROJECT_ID")
BILLS_COLLECTION = os.getenv("SPLITIT_BILLS_COLLECTION", "bills")
