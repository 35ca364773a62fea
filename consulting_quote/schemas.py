from pydantic import BaseModel, Field
from typing import Optional, List, Union

from .models import BusinessProfile, profile_from_fields


class QuoteRequest(BaseModel):
    """Business profile as API callers send it (camelCase, questionnaire labels).

    Yes/No answers may be "Yes"/"No" strings or booleans. Revenue band and
    industry are free strings: unknown values quote at a neutral modifier.
    """
    entity_type: str = Field(alias="entityType")
    annual_revenue: str = Field("", alias="annualRevenue")
    industry: str = ""
    has_employees: Union[bool, str] = Field(False, alias="hasEmployees")
    employee_count: Optional[str] = Field(None, alias="employeeCount")
    manages_stock: Union[bool, str] = Field(False, alias="managesStock")
    deals_foreign_currency: Union[bool, str] = Field(False, alias="dealsForeignCurrency")
    tax_complexity: Optional[str] = Field(None, alias="taxComplexity")
    audit_requirements: Optional[str] = Field(None, alias="auditRequirements")
    regulatory_reporting: Optional[str] = Field(None, alias="regulatoryReporting")

    class Config:
        populate_by_name = True

    def to_profile(self) -> BusinessProfile:
        return profile_from_fields(self.model_dump(by_alias=True))


class QuoteBreakdownOut(BaseModel):
    basePrice: int
    revenueAdjustment: int
    complexityAdjustment: int
    payrollCost: int
    industryAdjustment: int
    total: int


class BaseServicesOut(BaseModel):
    entityType: str
    services: List[str]
    description: str


class QuoteOut(BaseModel):
    quote: int
    basePrice: int
    payrollCost: int
    revenueModifier: float
    complexityModifier: float
    industryModifier: float
    complexityFactors: List[str]
    breakdown: QuoteBreakdownOut
    baseServices: BaseServicesOut
    calculation: dict
