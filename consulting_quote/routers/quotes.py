"""
Quote API: authoritative pricing for the website and any other caller.

POST /api/quote         : Quote a business profile
GET  /api/quote/pricing : Active pricing tables (drives the browser preview)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..calculators.pricing_tables import get_pricing_tables, pricing_tables_as_dict
from ..calculators.quote_calculator import QuoteCalculator, UnknownEntityTypeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quote", tags=["quotes"])


def get_calculator() -> QuoteCalculator:
    """Calculator over the process-wide tables. Overridden in tests."""
    return QuoteCalculator(get_pricing_tables())


@router.post("", response_model=schemas.QuoteOut)
def create_quote(request: schemas.QuoteRequest,
                 calculator: QuoteCalculator = Depends(get_calculator)):
    try:
        result = calculator.calculate(request.to_profile())
    except UnknownEntityTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


@router.get("/pricing")
def get_pricing(calculator: QuoteCalculator = Depends(get_calculator)):
    return pricing_tables_as_dict(calculator.tables)
