"""
SplitIt Pro - FastAPI Web Backend

This module serves as the main entry point for the bill splitting API.

Features:
    - RESTful API for storing and loading bills
    - Integration with Firebase Firestore backend
    - Cost splitting and settlement calculations
    - Analytics and transparency reports

Endpoints:
    POST   /bills                  - Create a bill
    GET    /bills                  - List bills, newest first
    GET    /bills/current          - Get the most recent bill
    GET    /bills/{bill_id}        - Get a bill
    PUT    /bills/{bill_id}        - Replace a bill
    DELETE /bills/{bill_id}        - Delete a bill
    GET    /bills/{bill_id}/summary - Calculate results for a stored bill
    POST   /calculate              - Calculate results for a posted bill
    GET    /health                 - Health check

Usage:
    uvicorn main:app --reload
"""

import logging
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, NonNegativeFloat, field_validator

from analytics import generate_analytics
from bill import Bill
from config.settings import DEFAULT_TAX_PERCENT, DEFAULT_TIP_PERCENT, LOG_LEVEL
from firebase_store import (
    delete_bill,
    get_bill,
    get_latest_bill,
    list_bills,
    save_bill
)
from splitter import round_totals
from utils import explain_all_participants

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class ParticipantModel(BaseModel):
    """A participant as sent by the client."""
    id: str = Field(..., min_length=1, description="Participant ID")
    name: str = Field(..., min_length=1, description="Participant name")
    paid: bool = Field(False, description="Manually toggled paid flag")
    amount_paid: NonNegativeFloat = Field(0.0, description="Amount the participant reports having paid")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must be a non-empty string")
        return value


class ItemModel(BaseModel):
    """An item as sent by the client."""
    id: str = Field(..., min_length=1, description="Item ID")
    name: str = Field("New Item", description="Item name")
    price: NonNegativeFloat = Field(0.0, description="Item price")
    category: Literal["food", "alcohol", "tea", "other"] = Field("food", description="Item category")
    participants: list[str] = Field(default_factory=list, description="IDs of participants sharing the item")
    paid_by: dict[str, NonNegativeFloat] = Field(default_factory=dict, description="Amount each participant paid toward the item")


class BillModel(BaseModel):
    """Request model for creating, replacing or calculating a bill."""
    participants: list[ParticipantModel] = Field(default_factory=list)
    items: list[ItemModel] = Field(default_factory=list)
    tax_percent: NonNegativeFloat = Field(DEFAULT_TAX_PERCENT, description="Tax percentage")
    tip_percent: NonNegativeFloat = Field(DEFAULT_TIP_PERCENT, description="Tip percentage")


class CalculateResponse(BaseModel):
    """Response model for calculation results."""
    totals: dict
    display_totals: dict
    balances: dict
    transactions: list


class SummaryResponse(CalculateResponse):
    """Response model for a stored bill's full summary."""
    bill: dict
    analytics: dict
    warnings: list
    explanations: list


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="SplitIt Pro",
    description="Bill splitting API with proportional tax/tip and minimal settlements",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _to_bill(bill_data: BillModel, bill_id: Optional[str] = None) -> Bill:
    """Convert a validated request body into a Bill."""
    data = bill_data.model_dump()
    data["id"] = bill_id
    return Bill.from_dict(data)


def _calculate(bill: Bill) -> dict:
    """Run both computations for a bill."""
    results = bill.calculate()
    return {
        "totals": results["totals"],
        "display_totals": round_totals(results["totals"]),
        "balances": results["settlements"]["balances"],
        "transactions": results["settlements"]["transactions"]
    }


def _load_bill(bill_id: str) -> dict:
    """Fetch a stored bill or raise 404."""
    stored = get_bill(bill_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Bill {bill_id} not found")
    return stored


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/bills", status_code=201)
def create_bill(bill_data: BillModel):
    """
    Create a new bill.

    Request flow:
        1. Validate input using Pydantic model
        2. Build a Bill (checks id uniqueness)
        3. Store it with a freshly generated id
    """
    try:
        bill = _to_bill(bill_data)
        return save_bill(bill.to_dict())

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create bill")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/bills")
def get_all_bills():
    """Get all bills, most recent first."""
    try:
        return list_bills()

    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Failed to read bills")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/bills/current")
def get_current_bill():
    """Get the most recently created bill, or null when there is none."""
    try:
        return get_latest_bill()

    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Failed to read current bill")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/bills/{bill_id}")
def get_one_bill(bill_id: str):
    """Get a specific bill by ID."""
    try:
        return _load_bill(bill_id)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to read bill %s", bill_id)
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/bills/{bill_id}")
def update_bill(bill_id: str, bill_data: BillModel):
    """
    Replace an existing bill.

    Request flow:
        1. Make sure the bill exists
        2. Build the new Bill state, keeping the original created_at
        3. Overwrite the stored document
    """
    try:
        existing = _load_bill(bill_id)

        bill = _to_bill(bill_data, bill_id=bill_id)
        bill.created_at = existing.get("created_at") or bill.created_at

        return save_bill(bill.to_dict(), bill_id=bill_id)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update bill %s", bill_id)
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/bills/{bill_id}")
def remove_bill(bill_id: str):
    """Delete a bill."""
    try:
        if not delete_bill(bill_id):
            raise HTTPException(status_code=404, detail=f"Bill {bill_id} not found")
        return {"message": "Bill deleted successfully"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to delete bill %s", bill_id)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/calculate", response_model=CalculateResponse)
def calculate_bill(bill_data: BillModel):
    """
    Calculate totals and settlements for a posted bill without storing it.
    """
    try:
        return CalculateResponse(**_calculate(_to_bill(bill_data)))

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to calculate bill")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/bills/{bill_id}/summary", response_model=SummaryResponse)
def get_bill_summary(bill_id: str):
    """
    Calculate all results for a stored bill.

    Request flow:
        1. Fetch the bill from Firestore
        2. Calculate totals (splitter.py) and settlements (settlement.py)
        3. Generate analytics (analytics.py)
        4. Generate explanations (utils.py)
        5. Return complete results
    """
    try:
        bill = Bill.from_dict(_load_bill(bill_id))
        results = _calculate(bill)

        participants = bill.participant_dicts()
        items = bill.item_dicts()
        analytics_result = generate_analytics(participants, items)

        return SummaryResponse(
            bill=bill.to_dict(),
            analytics=analytics_result["analytics"],
            warnings=analytics_result["warnings"],
            explanations=explain_all_participants(participants, items, results["totals"]),
            **results
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to summarize bill %s", bill_id)
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "SplitIt Pro"}


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
