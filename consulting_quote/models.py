"""
Domain models for the Business Health Check quote.

BusinessProfile is the calculator input, QuoteResult its output. Both are
frozen: a profile and its quote live for one calculation and are never
mutated after construction.
"""

from dataclasses import dataclass, field
from typing import Optional
import enum


# --- Vocabularies ---
# Values are the labels the questionnaire submits, so a str enum member
# compares equal to the raw form value.

class EntityType(str, enum.Enum):
    SOLE_PROPRIETOR = "Sole Proprietor"
    PARTNERSHIP = "Partnership"
    CLOSE_CORPORATION = "Close Corporation (CC)"
    PRIVATE_COMPANY = "Private Company (Pty Ltd)"
    PUBLIC_COMPANY = "Public Company"
    TRUST = "Trust"
    NPO = "Non-Profit Organization (NPO)"
    OTHER = "Other"


class RevenueBand(str, enum.Enum):
    # Declaration order is band order (lowest first)
    UP_TO_100K = "R0 - R100,000"
    UP_TO_500K = "R100,001 - R500,000"
    UP_TO_1M = "R500,001 - R1,000,000"
    UP_TO_5M = "R1,000,001 - R5,000,000"
    UP_TO_20M = "R5,000,001 - R20,000,000"
    OVER_20M = "Over R20,000,000"


class EmployeeBand(str, enum.Enum):
    FROM_1_TO_5 = "1-5"
    FROM_6_TO_20 = "6-20"
    FROM_21_TO_50 = "21-50"
    FROM_51_TO_100 = "51-100"
    OVER_100 = "Over 100"


class Industry(str, enum.Enum):
    ACCOUNTING = "Accounting & Finance"
    AGRICULTURE = "Agriculture & Farming"
    AUTOMOTIVE = "Automotive"
    CONSTRUCTION = "Construction & Real Estate"
    CONSULTING = "Consulting & Professional Services"
    EDUCATION = "Education & Training"
    ENERGY = "Energy & Utilities"
    ENTERTAINMENT = "Entertainment & Media"
    FOOD = "Food & Beverage"
    HEALTHCARE = "Healthcare & Medical"
    HOSPITALITY = "Hospitality & Tourism"
    IT = "Information Technology"
    LEGAL = "Legal Services"
    MANUFACTURING = "Manufacturing"
    MARKETING = "Marketing & Advertising"
    NON_PROFIT = "Non-Profit"
    RETAIL = "Retail & E-commerce"
    TRANSPORT = "Transportation & Logistics"
    OTHER = "Other"


class TaxComplexity(str, enum.Enum):
    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"


class AuditRequirement(str, enum.Enum):
    REQUIRED = "Required"
    VOLUNTARY = "Voluntary"
    NOT_REQUIRED = "Not Required"


class RegulatoryReporting(str, enum.Enum):
    MINIMAL = "Minimal"
    STANDARD = "Standard"
    EXTENSIVE = "Extensive"


class ComplexityFactor(str, enum.Enum):
    # Declaration order is evaluation order
    PAYROLL = "Payroll Management"
    INVENTORY = "Inventory Management"
    FOREIGN_CURRENCY = "Foreign Currency Transactions"
    CORPORATE_COMPLIANCE = "Corporate Compliance"
    AUDIT = "Audit Requirements"
    COMPLEX_TAX = "Complex Tax Structure"
    REGULATORY_REPORTING = "Extensive Regulatory Reporting"


YES_NO = ("Yes", "No")


# --- Calculator input ---

@dataclass(frozen=True)
class BusinessProfile:
    """Attributes of a business that drive its monthly quote.

    Plain strings rather than enums: unknown revenue bands and industries
    must reach the calculator so they can fall back to a neutral modifier.
    """
    entity_type: str
    annual_revenue: str
    industry: str
    has_employees: bool = False
    employee_count: Optional[str] = None
    manages_stock: bool = False
    deals_foreign_currency: bool = False


@dataclass(frozen=True)
class PrivateCompanyProfile(BusinessProfile):
    """Pty Ltd variant carrying the compliance section.

    A missing compliance answer means "factor not triggered"; requiring the
    answers is the questionnaire validator's job.
    """
    tax_complexity: Optional[str] = None
    audit_requirements: Optional[str] = None
    regulatory_reporting: Optional[str] = None

    def __post_init__(self):
        if self.entity_type != EntityType.PRIVATE_COMPANY:
            raise ValueError(
                f"PrivateCompanyProfile requires entity_type "
                f"{EntityType.PRIVATE_COMPANY.value!r}, got {self.entity_type!r}"
            )


def _as_bool(value) -> bool:
    """Questionnaire answers arrive as "Yes"/"No"; API callers may send booleans."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("yes", "true")
    return False


def _as_str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def profile_from_fields(fields: dict) -> BusinessProfile:
    """
    Build the right profile variant from camelCase questionnaire fields.

    Args:
        fields: {"entityType": ..., "annualRevenue": ..., "industry": ...,
                 "hasEmployees": "Yes"|"No"|bool, "employeeCount": ...,
                 "managesStock": ..., "dealsForeignCurrency": ...,
                 "taxComplexity": ..., "auditRequirements": ...,
                 "regulatoryReporting": ...}

    Returns:
        PrivateCompanyProfile for Pty Ltd entities, BusinessProfile otherwise.
    """
    entity_type = _as_str(fields.get("entityType"))
    common = dict(
        entity_type=entity_type,
        annual_revenue=_as_str(fields.get("annualRevenue")),
        industry=_as_str(fields.get("industry")),
        has_employees=_as_bool(fields.get("hasEmployees")),
        employee_count=_as_str(fields.get("employeeCount")) or None,
        manages_stock=_as_bool(fields.get("managesStock")),
        deals_foreign_currency=_as_bool(fields.get("dealsForeignCurrency")),
    )
    if entity_type == EntityType.PRIVATE_COMPANY:
        return PrivateCompanyProfile(
            tax_complexity=_as_str(fields.get("taxComplexity")) or None,
            audit_requirements=_as_str(fields.get("auditRequirements")) or None,
            regulatory_reporting=_as_str(fields.get("regulatoryReporting")) or None,
            **common,
        )
    return BusinessProfile(**common)


# --- Calculator output ---

@dataclass(frozen=True)
class QuoteBreakdown:
    base_price: int
    revenue_adjustment: int
    complexity_adjustment: int
    payroll_cost: int
    industry_adjustment: int
    total: int

    def to_dict(self) -> dict:
        return {
            "basePrice": self.base_price,
            "revenueAdjustment": self.revenue_adjustment,
            "complexityAdjustment": self.complexity_adjustment,
            "payrollCost": self.payroll_cost,
            "industryAdjustment": self.industry_adjustment,
            "total": self.total,
        }


@dataclass(frozen=True)
class QuoteResult:
    entity_type: str
    final_quote: int
    base_price: int
    payroll_cost: int
    revenue_modifier: float
    complexity_modifier: float
    industry_modifier: float
    breakdown: QuoteBreakdown
    complexity_factors: tuple = field(default_factory=tuple)
    service_list: tuple = field(default_factory=tuple)
    calculation_steps: tuple = field(default_factory=tuple)

    @property
    def description(self) -> str:
        return f"Comprehensive accounting services for {self.entity_type}"

    def to_dict(self) -> dict:
        """JSON shape returned to API callers and handed to the mailer."""
        return {
            "quote": self.final_quote,
            "basePrice": self.base_price,
            "payrollCost": self.payroll_cost,
            "revenueModifier": self.revenue_modifier,
            "complexityModifier": self.complexity_modifier,
            "industryModifier": self.industry_modifier,
            "complexityFactors": list(self.complexity_factors),
            "baseServices": {
                "entityType": self.entity_type,
                "services": list(self.service_list),
                "description": self.description,
            },
            "breakdown": self.breakdown.to_dict(),
            "calculation": {
                f"step{i}": step
                for i, step in enumerate(self.calculation_steps, start=1)
            },
        }
