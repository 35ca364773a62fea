"""
Pricing tables for the Business Health Check quote, with a fallback chain:
1. JSON document at settings.PRICING_TABLE_PATH (versioned price updates)
2. DEFAULT_PRICING from this file

Tables are read-only once built: mappings are MappingProxyType, lists are
tuples. Calculators share one PricingTables across requests without locking.
All prices are monthly, in whole currency units.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from ..config import settings
from ..models import ComplexityFactor, EmployeeBand, EntityType, Industry, RevenueBand

logger = logging.getLogger(__name__)


class PricingTableError(ValueError):
    """A pricing document is missing a table or carries an invalid value."""


@dataclass(frozen=True)
class BaseService:
    base_price: int
    services: tuple


@dataclass(frozen=True)
class PricingTables:
    base_services: Mapping[str, BaseService]
    revenue_modifiers: Mapping[str, float]
    payroll_pricing: Mapping[str, int]
    payroll_services: tuple
    complexity_modifiers: Mapping[str, float]
    industry_modifiers: Mapping[str, float]
    factor_services: Mapping[str, tuple]
    minimum_quote: int = 500
    version: str = "default"


# --- Default tables ---
# Authoritative backend values. The browser preview reads the same numbers
# through GET /api/quote/pricing instead of keeping its own copy.

_BASE_SERVICES = {
    EntityType.SOLE_PROPRIETOR: (800, [
        "Monthly bookkeeping",
        "VAT returns (if applicable)",
        "Annual tax return",
        "Basic financial statements",
        "Tax planning advice",
    ]),
    EntityType.PARTNERSHIP: (1200, [
        "Monthly bookkeeping",
        "VAT returns",
        "Partnership tax returns",
        "Partner distribution statements",
        "Financial statements",
        "Tax planning advice",
    ]),
    EntityType.CLOSE_CORPORATION: (1500, [
        "Monthly bookkeeping",
        "VAT returns",
        "Corporate tax returns",
        "Annual financial statements",
        "CIPC annual returns",
        "Tax planning advice",
    ]),
    EntityType.PRIVATE_COMPANY: (2500, [
        "Monthly bookkeeping",
        "VAT returns",
        "Corporate tax returns",
        "Annual financial statements",
        "CIPC annual returns",
        "Directors' resolutions",
        "Compliance monitoring",
        "Tax planning advice",
    ]),
    EntityType.PUBLIC_COMPANY: (5000, [
        "Monthly bookkeeping",
        "VAT returns",
        "Corporate tax returns",
        "Audited financial statements",
        "CIPC annual returns",
        "JSE compliance (if listed)",
        "Advanced tax planning",
        "Regulatory compliance",
    ]),
    EntityType.TRUST: (1800, [
        "Monthly bookkeeping",
        "Trust tax returns",
        "Beneficiary statements",
        "Trust deed compliance",
        "Annual financial statements",
        "Tax planning advice",
    ]),
    EntityType.NPO: (1000, [
        "Monthly bookkeeping",
        "NPO annual returns",
        "Donor reporting",
        "Compliance monitoring",
        "Financial statements",
        "Tax exemption maintenance",
    ]),
    EntityType.OTHER: (1500, [
        "Monthly bookkeeping",
        "Applicable tax returns",
        "Financial statements",
        "Compliance advice",
        "Tax planning advice",
    ]),
}

_REVENUE_MODIFIERS = {
    RevenueBand.UP_TO_100K: 0.8,
    RevenueBand.UP_TO_500K: 1.0,
    RevenueBand.UP_TO_1M: 1.2,
    RevenueBand.UP_TO_5M: 1.5,
    RevenueBand.UP_TO_20M: 2.0,
    RevenueBand.OVER_20M: 2.5,
}

# Flat monthly payroll processing fee per band, not per head
_PAYROLL_PRICING = {
    EmployeeBand.FROM_1_TO_5: 300,
    EmployeeBand.FROM_6_TO_20: 800,
    EmployeeBand.FROM_21_TO_50: 1500,
    EmployeeBand.FROM_51_TO_100: 2500,
    EmployeeBand.OVER_100: 4000,
}

_PAYROLL_SERVICES = [
    "Monthly payroll processing",
    "UIF and SDL submissions",
    "Employee tax certificates",
]

_COMPLEXITY_MODIFIERS = {
    ComplexityFactor.PAYROLL: 1.15,
    ComplexityFactor.INVENTORY: 1.20,
    ComplexityFactor.FOREIGN_CURRENCY: 1.25,
    ComplexityFactor.CORPORATE_COMPLIANCE: 1.10,
    ComplexityFactor.AUDIT: 1.30,
    ComplexityFactor.COMPLEX_TAX: 1.20,
    ComplexityFactor.REGULATORY_REPORTING: 1.15,
}

_INDUSTRY_MODIFIERS = {
    Industry.ACCOUNTING: 1.0,
    Industry.AGRICULTURE: 1.1,
    Industry.AUTOMOTIVE: 1.15,
    Industry.CONSTRUCTION: 1.2,
    Industry.CONSULTING: 1.0,
    Industry.EDUCATION: 0.95,
    Industry.ENERGY: 1.25,
    Industry.ENTERTAINMENT: 1.1,
    Industry.FOOD: 1.15,
    Industry.HEALTHCARE: 1.2,
    Industry.HOSPITALITY: 1.1,
    Industry.IT: 1.05,
    Industry.LEGAL: 1.0,
    Industry.MANUFACTURING: 1.25,
    Industry.MARKETING: 1.05,
    Industry.NON_PROFIT: 0.9,
    Industry.RETAIL: 1.15,
    Industry.TRANSPORT: 1.2,
    Industry.OTHER: 1.0,
}

# Payroll and Corporate Compliance add no services here: payroll services
# follow the payroll fee, compliance monitoring is already in the Pty Ltd list.
_FACTOR_SERVICES = {
    ComplexityFactor.INVENTORY: [
        "Stock valuation and management",
        "Cost of goods sold calculations",
    ],
    ComplexityFactor.FOREIGN_CURRENCY: [
        "Foreign exchange accounting",
        "Currency conversion reporting",
    ],
    ComplexityFactor.AUDIT: [
        "Audit preparation and support",
        "Management letter responses",
    ],
    ComplexityFactor.COMPLEX_TAX: [
        "Advanced tax planning",
        "Tax optimization strategies",
    ],
    ComplexityFactor.REGULATORY_REPORTING: [
        "Regulatory compliance monitoring",
        "Specialized reporting requirements",
    ],
}

MINIMUM_QUOTE = 500


def _freeze(mapping: dict, convert=lambda v: v) -> Mapping:
    return MappingProxyType({
        (k.value if hasattr(k, "value") else k): convert(v)
        for k, v in mapping.items()
    })


DEFAULT_PRICING = PricingTables(
    base_services=_freeze(
        _BASE_SERVICES,
        lambda v: BaseService(base_price=v[0], services=tuple(v[1])),
    ),
    revenue_modifiers=_freeze(_REVENUE_MODIFIERS),
    payroll_pricing=_freeze(_PAYROLL_PRICING),
    payroll_services=tuple(_PAYROLL_SERVICES),
    complexity_modifiers=_freeze(_COMPLEXITY_MODIFIERS),
    industry_modifiers=_freeze(_INDUSTRY_MODIFIERS),
    factor_services=_freeze(_FACTOR_SERVICES, tuple),
    minimum_quote=MINIMUM_QUOTE,
    version="default",
)


# --- JSON documents ---

def _require(doc: dict, key: str):
    if key not in doc:
        raise PricingTableError(f"Pricing document is missing '{key}'")
    value = doc[key]
    if not isinstance(value, dict):
        raise PricingTableError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _price(value, where: str) -> int:
    # bool is an int subclass; a price of True is a typo, not a price
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise PricingTableError(f"{where} must be a non-negative integer, got {value!r}")
    return value


def _modifier(value, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise PricingTableError(f"{where} must be a positive number, got {value!r}")
    return float(value)


def _services(value, where: str) -> tuple:
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise PricingTableError(f"{where} must be a list of service names")
    return tuple(value)


def pricing_tables_from_dict(doc: dict) -> PricingTables:
    """
    Build PricingTables from a camelCase document (the shape of
    pricing_tables_as_dict). Raises PricingTableError on a bad document.

    factorServices and payrollServices are optional and default to the
    built-in lists. revenueModifiers must be listed lowest band first and
    may never decrease, so a bigger business never gets a cheaper quote.
    """
    if not isinstance(doc, dict):
        raise PricingTableError("Pricing document must be a JSON object")

    base_services = {}
    for entity_type, entry in _require(doc, "baseServices").items():
        if not isinstance(entry, dict):
            raise PricingTableError(f"baseServices[{entity_type!r}] must be an object")
        base_services[entity_type] = BaseService(
            base_price=_price(entry.get("basePrice"), f"baseServices[{entity_type!r}].basePrice"),
            services=_services(entry.get("services", []), f"baseServices[{entity_type!r}].services"),
        )
    if not base_services:
        raise PricingTableError("baseServices must list at least one entity type")

    revenue_modifiers = {
        band: _modifier(v, f"revenueModifiers[{band!r}]")
        for band, v in _require(doc, "revenueModifiers").items()
    }
    ordered = list(revenue_modifiers.values())
    for lower, higher in zip(ordered, ordered[1:]):
        if higher < lower:
            raise PricingTableError(
                "revenueModifiers must not decrease from one band to the next"
            )

    payroll_pricing = {
        band: _price(v, f"payrollPricing[{band!r}]")
        for band, v in _require(doc, "payrollPricing").items()
    }
    complexity_modifiers = {
        factor: _modifier(v, f"complexityModifiers[{factor!r}]")
        for factor, v in _require(doc, "complexityModifiers").items()
    }
    industry_modifiers = {
        industry: _modifier(v, f"industryModifiers[{industry!r}]")
        for industry, v in _require(doc, "industryModifiers").items()
    }

    if "factorServices" in doc:
        factor_services = {
            factor: _services(v, f"factorServices[{factor!r}]")
            for factor, v in _require(doc, "factorServices").items()
        }
    else:
        factor_services = dict(DEFAULT_PRICING.factor_services)

    payroll_services = (
        _services(doc["payrollServices"], "payrollServices")
        if "payrollServices" in doc else DEFAULT_PRICING.payroll_services
    )

    return PricingTables(
        base_services=MappingProxyType(base_services),
        revenue_modifiers=MappingProxyType(revenue_modifiers),
        payroll_pricing=MappingProxyType(payroll_pricing),
        payroll_services=payroll_services,
        complexity_modifiers=MappingProxyType(complexity_modifiers),
        industry_modifiers=MappingProxyType(industry_modifiers),
        factor_services=MappingProxyType(factor_services),
        minimum_quote=_price(doc.get("minimumQuote", MINIMUM_QUOTE), "minimumQuote"),
        version=str(doc.get("version", "custom")),
    )


def load_pricing_tables(path) -> PricingTables:
    """Load a pricing JSON document from disk."""
    try:
        with open(path) as f:
            doc = json.load(f)
    except json.JSONDecodeError as e:
        raise PricingTableError(f"Pricing file {path} is not valid JSON: {e}") from e
    tables = pricing_tables_from_dict(doc)
    logger.info(
        "Loaded pricing tables version %s from %s (%d entity types)",
        tables.version, path, len(tables.base_services),
    )
    return tables


@lru_cache(maxsize=1)
def get_pricing_tables() -> PricingTables:
    """Process-wide tables, loaded once."""
    if settings.PRICING_TABLE_PATH:
        return load_pricing_tables(settings.PRICING_TABLE_PATH)
    return DEFAULT_PRICING


def pricing_tables_as_dict(tables: PricingTables) -> dict:
    """JSON-serialisable copy; pricing_tables_from_dict accepts it back."""
    return {
        "version": tables.version,
        "minimumQuote": tables.minimum_quote,
        "baseServices": {
            entity_type: {
                "basePrice": entry.base_price,
                "services": list(entry.services),
            }
            for entity_type, entry in tables.base_services.items()
        },
        "revenueModifiers": dict(tables.revenue_modifiers),
        "payrollPricing": dict(tables.payroll_pricing),
        "payrollServices": list(tables.payroll_services),
        "complexityModifiers": dict(tables.complexity_modifiers),
        "industryModifiers": dict(tables.industry_modifiers),
        "factorServices": {
            factor: list(services)
            for factor, services in tables.factor_services.items()
        },
    }
