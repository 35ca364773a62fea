"""
Business Health Check quote calculator.

Pure math over read-only pricing tables. No I/O, no shared mutable state:
safe to call from any number of request handlers at once.

Input: BusinessProfile (or PrivateCompanyProfile)
Output: QuoteResult

    adjusted        = base_price * revenue_modifier
    with_complexity = adjusted * complexity_modifier
    with_industry   = with_complexity * industry_modifier
    final_quote     = max(round(with_industry) + payroll_cost, minimum_quote)
"""

import logging
import math
from typing import List, Optional

from ..config import settings
from ..models import (
    AuditRequirement,
    BusinessProfile,
    ComplexityFactor,
    EntityType,
    PrivateCompanyProfile,
    QuoteBreakdown,
    QuoteResult,
    RegulatoryReporting,
    TaxComplexity,
)
from .pricing_tables import PricingTables, get_pricing_tables

logger = logging.getLogger(__name__)


class UnknownEntityTypeError(ValueError):
    """The entity type has no base price. The one input a quote cannot survive."""

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(f"Unknown entity type: {entity_type}")


def round_half_up(value: float) -> int:
    """Round .5 up, like the browser's Math.round for the non-negative amounts quoted here."""
    return int(math.floor(value + 0.5))


def _tables(tables: Optional[PricingTables]) -> PricingTables:
    return tables if tables is not None else get_pricing_tables()


# --- Lookups ---

def get_base_price(entity_type: str, tables: Optional[PricingTables] = None) -> int:
    """Base monthly price for an entity type. Raises UnknownEntityTypeError."""
    entry = _tables(tables).base_services.get(entity_type)
    if entry is None:
        raise UnknownEntityTypeError(entity_type)
    return entry.base_price


def get_revenue_modifier(annual_revenue: str, tables: Optional[PricingTables] = None) -> float:
    """Multiplier for a revenue band. Unknown bands are neutral (1.0)."""
    modifier = _tables(tables).revenue_modifiers.get(annual_revenue)
    if modifier is None:
        logger.warning("Unknown revenue band %r, using modifier 1.0", annual_revenue)
        return 1.0
    return modifier


def get_industry_modifier(industry: str, tables: Optional[PricingTables] = None) -> float:
    """Multiplier for an industry. Unknown industries are neutral (1.0)."""
    modifier = _tables(tables).industry_modifiers.get(industry)
    if modifier is None:
        logger.warning("Unknown industry %r, using modifier 1.0", industry)
        return 1.0
    return modifier


def get_payroll_cost(profile: BusinessProfile, tables: Optional[PricingTables] = None) -> int:
    """Flat payroll fee for the employee band; 0 without employees or a known band."""
    if not profile.has_employees or not profile.employee_count:
        return 0
    return _tables(tables).payroll_pricing.get(profile.employee_count, 0)


def get_complexity_factors(profile: BusinessProfile) -> List[str]:
    """
    Factors that apply to this business, in evaluation order.

    Corporate Compliance applies to every Pty Ltd. The three compliance
    sub-factors only exist on PrivateCompanyProfile; a missing answer
    leaves its factor untriggered.
    """
    factors = []

    if profile.has_employees:
        factors.append(ComplexityFactor.PAYROLL.value)
    if profile.manages_stock:
        factors.append(ComplexityFactor.INVENTORY.value)
    if profile.deals_foreign_currency:
        factors.append(ComplexityFactor.FOREIGN_CURRENCY.value)

    if profile.entity_type == EntityType.PRIVATE_COMPANY:
        factors.append(ComplexityFactor.CORPORATE_COMPLIANCE.value)

        if isinstance(profile, PrivateCompanyProfile):
            if profile.audit_requirements == AuditRequirement.REQUIRED:
                factors.append(ComplexityFactor.AUDIT.value)
            if profile.tax_complexity == TaxComplexity.COMPLEX:
                factors.append(ComplexityFactor.COMPLEX_TAX.value)
            if profile.regulatory_reporting == RegulatoryReporting.EXTENSIVE:
                factors.append(ComplexityFactor.REGULATORY_REPORTING.value)

    return factors


def calculate_complexity_modifier(factors, tables: Optional[PricingTables] = None) -> float:
    """Product of the per-factor multipliers; 1.0 when no factor applies."""
    modifiers = _tables(tables).complexity_modifiers
    modifier = 1.0
    for factor in factors:
        modifier *= modifiers.get(factor, 1.0)
    return modifier


def build_service_list(entity_type: str, payroll_cost: int, factors,
                       tables: Optional[PricingTables] = None) -> List[str]:
    """Base services, then payroll services, then per-factor services in factor order."""
    t = _tables(tables)
    entry = t.base_services.get(entity_type)
    if entry is None:
        raise UnknownEntityTypeError(entity_type)

    services = list(entry.services)
    if payroll_cost > 0:
        services.extend(t.payroll_services)
    for factor in factors:
        services.extend(t.factor_services.get(factor, ()))
    return services


# --- Calculator ---

class QuoteCalculator:
    """
    Computes a QuoteResult for one BusinessProfile.

    Holds only its injected PricingTables, which are immutable, so a single
    instance can serve every request.
    """

    def __init__(self, tables: Optional[PricingTables] = None,
                 currency_symbol: Optional[str] = None):
        self.tables = _tables(tables)
        self.currency_symbol = (
            currency_symbol if currency_symbol is not None else settings.CURRENCY_SYMBOL
        )

    def calculate(self, profile: BusinessProfile) -> QuoteResult:
        t = self.tables

        # Fails before any other work: no partial quote for an unknown entity
        base_price = get_base_price(profile.entity_type, t)

        revenue_modifier = get_revenue_modifier(profile.annual_revenue, t)
        payroll_cost = get_payroll_cost(profile, t)
        factors = get_complexity_factors(profile)
        complexity_modifier = calculate_complexity_modifier(factors, t)
        industry_modifier = get_industry_modifier(profile.industry, t)

        # Full-precision stages; every delta below comes from these, never
        # from an already-rounded stage
        adjusted = base_price * revenue_modifier
        with_complexity = adjusted * complexity_modifier
        with_industry = with_complexity * industry_modifier

        raw_total = round_half_up(with_industry) + payroll_cost
        final_quote = max(raw_total, t.minimum_quote)

        breakdown = QuoteBreakdown(
            base_price=base_price,
            revenue_adjustment=round_half_up(adjusted - base_price),
            complexity_adjustment=round_half_up(with_complexity - adjusted),
            payroll_cost=payroll_cost,
            industry_adjustment=round_half_up(with_industry - with_complexity),
            total=final_quote,
        )

        services = build_service_list(profile.entity_type, payroll_cost, factors, t)
        steps = self._calculation_steps(
            profile, base_price, adjusted, revenue_modifier, with_complexity,
            complexity_modifier, industry_modifier, payroll_cost, final_quote,
        )

        logger.debug(
            "Quote for %s: base=%d rev=%.2f cx=%.4f ind=%.2f payroll=%d -> %d (%d factors)",
            profile.entity_type, base_price, revenue_modifier, complexity_modifier,
            industry_modifier, payroll_cost, final_quote, len(factors),
        )

        return QuoteResult(
            entity_type=str(profile.entity_type),
            final_quote=final_quote,
            base_price=base_price,
            payroll_cost=payroll_cost,
            revenue_modifier=revenue_modifier,
            complexity_modifier=complexity_modifier,
            industry_modifier=industry_modifier,
            breakdown=breakdown,
            complexity_factors=tuple(factors),
            service_list=tuple(services),
            calculation_steps=steps,
        )

    def _calculation_steps(self, profile, base_price, adjusted, revenue_modifier,
                           with_complexity, complexity_modifier, industry_modifier,
                           payroll_cost, final_quote) -> tuple:
        """Human-readable trace of the calculation, one line per stage."""
        r = self.currency_symbol
        return (
            f"Base price for {profile.entity_type}: {r}{base_price}",
            f"Revenue adjustment ({profile.annual_revenue}): "
            f"{r}{round_half_up(adjusted)} ({revenue_modifier}x)",
            f"Complexity adjustment: {r}{round_half_up(with_complexity)} "
            f"({complexity_modifier:.2f}x)",
            f"Industry adjustment ({profile.industry}): {industry_modifier}x",
            f"Payroll processing: {r}{payroll_cost}",
            f"Final quote: {r}{final_quote}",
        )


def calculate_quote(profile: BusinessProfile,
                    tables: Optional[PricingTables] = None) -> QuoteResult:
    """Quote a profile against the given tables (default: the process-wide tables)."""
    return QuoteCalculator(tables).calculate(profile)
