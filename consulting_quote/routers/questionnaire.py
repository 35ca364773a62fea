"""
Business Health Check submissions.

POST /api/questionnaire: validate, quote, and acknowledge a submission.

Email delivery happens downstream: the response carries the quote and a
mail-ready summary, nothing is sent from here.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..calculators.quote_calculator import QuoteCalculator, UnknownEntityTypeError
from ..formatting import quote_summary
from ..models import profile_from_fields
from ..validation import validate_questionnaire
from .quotes import get_calculator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questionnaire", tags=["questionnaire"])

SUCCESS_MESSAGE = (
    "Your Business Health Check has been submitted successfully. We will analyze "
    "your responses and contact you within 24 hours with customized recommendations."
)


def _quote_submission(calculator: QuoteCalculator, form: dict):
    """Server-side quote for a validated submission; None if the tables can't price it."""
    try:
        quote = calculator.calculate(profile_from_fields(form)).to_dict()
    except UnknownEntityTypeError as e:
        # entityType passed validation, so the active tables lack it
        logger.error("Pricing tables %s have no entry: %s", calculator.tables.version, e)
        return None

    logger.info(
        "Quote calculated for %s: %s (%d factors)",
        form["companyName"], quote["quote"], len(quote["complexityFactors"]),
    )

    # The browser preview never replaces the server figure
    preview = form.get("quoteDetails")
    if preview and preview["quote"] != quote["quote"]:
        logger.warning(
            "Client quote preview for %s differs from server quote: %s != %s (tables %s)",
            form["companyName"], preview["quote"], quote["quote"], calculator.tables.version,
        )
    return quote


@router.post("")
def submit_questionnaire(
    payload: Any = Body(...),
    calculator: QuoteCalculator = Depends(get_calculator),
):
    validation = validate_questionnaire(payload)
    if not validation.is_valid:
        return JSONResponse(status_code=400, content={
            "success": False,
            "error": "Validation failed",
            "details": [e.to_dict() for e in validation.errors],
        })

    form = validation.data
    quote = _quote_submission(calculator, form)

    now = datetime.now(timezone.utc)
    logger.info(
        "Business Health Check submission: company=%s entity=%s goal=%s quote=%s",
        form["companyName"], form["entityType"], form["primaryGoal"],
        quote["quote"] if quote else "none",
    )

    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "data": {
            "companyName": form["companyName"],
            "primaryGoal": form["primaryGoal"],
            "submissionId": f"BHC-{int(time.time() * 1000)}",
            "timestamp": now.isoformat(),
            "quote": quote["quote"] if quote else None,
            "summary": quote_summary(quote, form, now=now),
        },
    }
