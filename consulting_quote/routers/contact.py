"""
Contact form submissions.

POST /api/contact: validate and acknowledge a message. Delivery to the
practice inbox happens downstream.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from ..validation import validate_contact

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])

SUCCESS_MESSAGE = "Your message has been sent successfully. We will respond within 24 hours."


@router.post("")
def submit_contact(payload: Any = Body(...)):
    validation = validate_contact(payload)
    if not validation.is_valid:
        return JSONResponse(status_code=400, content={
            "success": False,
            "error": "Validation failed",
            "details": [e.to_dict() for e in validation.errors],
        })

    form = validation.data
    request_id = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    logger.info(
        "Contact form submission: name=%s email=%s subject=%s request=%s",
        form["name"], form["email"], form["subject"], request_id,
    )

    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "timestamp": now.isoformat(),
        "requestId": request_id,
    }
