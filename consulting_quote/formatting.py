"""
Presentation helpers for a calculated quote (the QuoteResult.to_dict() shape).

Used by the questionnaire endpoint to attach a summary for the mailer and by
the CLI. Monthly fees are shown whole; annual is 12 x monthly.
"""

from datetime import datetime, timezone
from numbers import Number
from typing import Optional, Union

from .config import settings

REQUIRED_NUMERIC_FIELDS = ("quote", "basePrice", "payrollCost", "revenueModifier", "complexityModifier")


def format_currency(amount, symbol: Optional[str] = None) -> str:
    """R12,345 style, no decimals."""
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{round(amount):,}"


def is_valid_quote(quote) -> bool:
    """True when every required field is a non-negative number."""
    if not isinstance(quote, dict):
        return False
    for key in REQUIRED_NUMERIC_FIELDS:
        value = quote.get(key)
        if isinstance(value, bool) or not isinstance(value, Number) or value < 0:
            return False
    return True


def _services(quote: dict) -> list:
    base_services = quote.get("baseServices")
    if not isinstance(base_services, dict) or not isinstance(base_services.get("services"), list):
        return []
    return base_services["services"]


def format_quote(quote: dict, symbol: Optional[str] = None) -> Union[dict, str]:
    if not is_valid_quote(quote):
        return "Quote calculation error"

    return {
        "monthly": format_currency(quote["quote"], symbol),
        "annual": format_currency(quote["quote"] * 12, symbol),
        "breakdown": quote.get("breakdown", {}),
        "services": _services(quote),
        "complexityFactors": quote.get("complexityFactors", []),
    }


def quote_summary(quote: dict, form: dict, now: Optional[datetime] = None) -> Union[dict, str]:
    """Short summary for the notification email: top five services, fees, flags."""
    if not is_valid_quote(quote):
        return "Quote calculation pending"

    now = now or datetime.now(timezone.utc)
    return {
        "monthlyFee": quote["quote"],
        "annualFee": quote["quote"] * 12,
        "entityType": form.get("entityType"),
        "companyName": form.get("companyName"),
        "primaryServices": _services(quote)[:5],
        "complexityFactors": quote.get("complexityFactors", []),
        "payrollIncluded": quote["payrollCost"] > 0,
        "calculationDate": now.isoformat(),
    }
