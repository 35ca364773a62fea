"""
Business Health Check questionnaire and contact form validation.

Checks a raw submission (camelCase fields from the four questionnaire steps),
collects every problem rather than stopping at the first, and returns the
cleaned fields the calculator and mailer consume.
"""

import re
from dataclasses import dataclass, field
from typing import List

from .models import (
    YES_NO,
    AuditRequirement,
    EmployeeBand,
    EntityType,
    Industry,
    RegulatoryReporting,
    RevenueBand,
    TaxComplexity,
)

PRIMARY_GOALS = (
    "Improve Financial Management",
    "Ensure Tax Compliance",
    "Reduce Accounting Costs",
    "Prepare for Growth/Investment",
    "Streamline Business Processes",
    "Get Strategic Business Advice",
    "Other",
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[+]?[0-9\s\-()]{7,20}$")

COMPANY_NAME_MAX = 200
CONTACT_NAME_MAX = 100
PHONE_MAX = 20
CHALLENGES_MIN = 10
CHALLENGES_MAX = 2000


@dataclass
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)
    data: dict = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str):
        self.errors.append(FieldError(field_name, message))


def _values(enum_cls) -> tuple:
    return tuple(m.value for m in enum_cls)


def is_valid_entity_type(entity_type) -> bool:
    return entity_type in _values(EntityType)


def requires_compliance_section(entity_type) -> bool:
    return entity_type == EntityType.PRIVATE_COMPANY


def _check_choice(result, data, name, options, required_msg, invalid_msg):
    value = data.get(name)
    if not value or not isinstance(value, str):
        result.add(name, required_msg)
    elif value not in options:
        result.add(name, invalid_msg)
    else:
        result.data[name] = value


def _check_text(result, data, name, required_msg, max_len, too_long_msg):
    value = data.get(name)
    if not value or not isinstance(value, str) or not value.strip():
        result.add(name, required_msg)
    elif len(value) > max_len:
        result.add(name, too_long_msg)
    else:
        result.data[name] = value.strip()


def _check_company(result, data):
    entity_type = data.get("entityType")
    if not entity_type or not isinstance(entity_type, str):
        result.add("entityType", "Entity type is required")
    elif not is_valid_entity_type(entity_type):
        result.add("entityType", "Please select a valid entity type")
    else:
        result.data["entityType"] = entity_type

    _check_choice(result, data, "annualRevenue", _values(RevenueBand),
                  "Annual revenue is required", "Please select a valid revenue range")
    _check_text(result, data, "companyName", "Company name is required",
                COMPANY_NAME_MAX,
                f"Company name must be less than {COMPANY_NAME_MAX} characters")
    _check_choice(result, data, "industry", _values(Industry),
                  "Industry is required", "Please select a valid industry")


def _check_operations(result, data):
    _check_choice(result, data, "hasEmployees", YES_NO,
                  "Please specify if you have employees",
                  "Please select Yes or No for employees")

    if data.get("hasEmployees") == "Yes":
        _check_choice(result, data, "employeeCount", _values(EmployeeBand),
                      "Employee count is required when you have employees",
                      "Please select a valid employee count range")
    else:
        result.data["employeeCount"] = ""

    _check_choice(result, data, "managesStock", YES_NO,
                  "Please specify if you manage stock/inventory",
                  "Please select Yes or No for stock management")
    _check_choice(result, data, "dealsForeignCurrency", YES_NO,
                  "Please specify if you deal in foreign currency",
                  "Please select Yes or No for foreign currency")


def _check_compliance(result, data):
    if not requires_compliance_section(data.get("entityType")):
        for name in ("taxComplexity", "auditRequirements", "regulatoryReporting"):
            result.data[name] = ""
        return

    _check_choice(result, data, "taxComplexity", _values(TaxComplexity),
                  "Tax complexity is required for Pty Ltd companies",
                  "Please select a valid tax complexity level")
    _check_choice(result, data, "auditRequirements", _values(AuditRequirement),
                  "Audit requirements are required for Pty Ltd companies",
                  "Please select a valid audit requirement option")
    _check_choice(result, data, "regulatoryReporting", _values(RegulatoryReporting),
                  "Regulatory reporting is required for Pty Ltd companies",
                  "Please select a valid regulatory reporting option")


def _check_contact(result, data):
    _check_choice(result, data, "primaryGoal", PRIMARY_GOALS,
                  "Primary goal is required", "Please select a valid primary goal")

    challenges = data.get("businessChallenges")
    if not challenges or not isinstance(challenges, str):
        result.add("businessChallenges", "Please provide details about your business challenges")
    elif len(challenges.strip()) < CHALLENGES_MIN:
        result.add("businessChallenges", "Please provide more details about your business challenges")
    elif len(challenges) > CHALLENGES_MAX:
        result.add("businessChallenges",
                   f"Business challenges description must be less than {CHALLENGES_MAX} characters")
    else:
        result.data["businessChallenges"] = challenges.strip()

    _check_text(result, data, "contactName", "Contact name is required",
                CONTACT_NAME_MAX,
                f"Contact name must be less than {CONTACT_NAME_MAX} characters")

    email = data.get("email")
    if not email or not isinstance(email, str) or not email.strip():
        result.add("email", "Email is required")
    else:
        email = email.strip().lower()
        if not EMAIL_RE.match(email):
            result.add("email", "Please provide a valid email address")
        else:
            result.data["email"] = email

    phone = data.get("phoneNumber")
    if not phone or not isinstance(phone, str) or not phone.strip():
        result.add("phoneNumber", "Phone number is required")
    elif len(phone) > PHONE_MAX:
        result.add("phoneNumber", f"Phone number must be less than {PHONE_MAX} characters")
    elif not PHONE_RE.match(phone):
        result.add("phoneNumber", "Please provide a valid phone number")
    else:
        result.data["phoneNumber"] = phone.strip()


def _clean_quote_details(result, data):
    """
    Keep the browser's quote preview only if it carries a usable amount.

    The preview is informational: the submission is always re-quoted
    server-side. Nested values of the wrong shape are dropped.
    """
    quote = data.get("quoteDetails")
    if not isinstance(quote, dict):
        return
    amount = quote.get("quote")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount < 0:
        return

    base_services = quote.get("baseServices")
    if isinstance(base_services, dict):
        services = base_services.get("services")
        base_services = {
            "entityType": base_services.get("entityType") if isinstance(base_services.get("entityType"), str) else "",
            "services": [s for s in services if isinstance(s, str)] if isinstance(services, list) else [],
        }
    else:
        base_services = {}

    result.data["quoteDetails"] = {
        "quote": amount,
        "basePrice": quote.get("basePrice") or 0,
        "payrollCost": quote.get("payrollCost") or 0,
        "revenueModifier": quote.get("revenueModifier") or 1,
        "complexityModifier": quote.get("complexityModifier") or 1,
        "complexityFactors": quote["complexityFactors"] if isinstance(quote.get("complexityFactors"), list) else [],
        "baseServices": base_services,
    }


def validate_questionnaire(data) -> ValidationResult:
    """
    Validate a questionnaire submission.

    Returns a ValidationResult; result.data holds only fields that passed,
    with text trimmed, email lower-cased and non-applicable conditional
    fields (employeeCount, compliance section) set to "".
    """
    result = ValidationResult()
    if not isinstance(data, dict):
        result.add("body", "Request body must be a JSON object")
        return result

    _check_company(result, data)
    _check_operations(result, data)
    _check_compliance(result, data)
    _check_contact(result, data)
    _clean_quote_details(result, data)

    # Cross-field rules
    clean = result.data
    if (clean.get("entityType") == EntityType.SOLE_PROPRIETOR
            and clean.get("annualRevenue") == RevenueBand.OVER_20M):
        result.add("annualRevenue", "Revenue range seems unusually high for a sole proprietor")

    return result


# --- Contact form ---

CONTACT_FORM_NAME_MAX = 100
SUBJECT_MAX = 200
MESSAGE_MIN = 10
MESSAGE_MAX = 2000
SPECIAL_CHAR_RATIO_MAX = 0.3

SPAM_PATTERNS = (
    re.compile(r"\b(viagra|cialis|casino|lottery|winner|congratulations)\b", re.IGNORECASE),
    re.compile(r"\b(click here|act now|limited time|urgent)\b", re.IGNORECASE),
    re.compile(r"(http://|https://|www\.).*\.(tk|ml|ga|cf)", re.IGNORECASE),
)
SPECIAL_CHAR_RE = re.compile(r"[^a-zA-Z0-9\s]")

DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.org",
    "10minutemail.com",
    "guerrillamail.com",
    "mailinator.com",
    "throwaway.email",
})


def contains_spam(text: str) -> bool:
    return any(pattern.search(text) for pattern in SPAM_PATTERNS)


def special_char_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(SPECIAL_CHAR_RE.findall(text)) / len(text)


def validate_contact(data) -> ValidationResult:
    """
    Validate a contact form submission (name, email, subject, message).

    Besides the field rules, rejects spam phrases in any text field, messages
    that are more than 30% punctuation and symbols, and disposable email
    domains.
    """
    result = ValidationResult()
    if not isinstance(data, dict):
        result.add("body", "Request body must be a JSON object")
        return result

    _check_text(result, data, "name", "Name is required", CONTACT_FORM_NAME_MAX,
                f"Name must be less than {CONTACT_FORM_NAME_MAX} characters")

    email = data.get("email")
    if not email or not isinstance(email, str) or not email.strip():
        result.add("email", "Email is required")
    else:
        email = email.strip().lower()
        if not EMAIL_RE.match(email):
            result.add("email", "Please provide a valid email address")
        else:
            result.data["email"] = email

    _check_text(result, data, "subject", "Subject is required", SUBJECT_MAX,
                f"Subject must be less than {SUBJECT_MAX} characters")

    message = data.get("message")
    if not message or not isinstance(message, str) or not message.strip():
        result.add("message", "Message is required")
    elif len(message.strip()) < MESSAGE_MIN:
        result.add("message", f"Message must be at least {MESSAGE_MIN} characters long")
    elif len(message) > MESSAGE_MAX:
        result.add("message", f"Message must be less than {MESSAGE_MAX} characters")
    else:
        result.data["message"] = message.strip()

    # Content rules run on whatever passed the field rules
    clean = result.data
    texts = [clean.get(name, "").lower() for name in ("message", "subject", "name")]
    if any(contains_spam(text) for text in texts):
        result.add("message", "Message contains prohibited content")

    if special_char_ratio(texts[0]) > SPECIAL_CHAR_RATIO_MAX:
        result.add("message", "Message contains too many special characters")

    if "email" in clean and clean["email"].split("@")[1] in DISPOSABLE_EMAIL_DOMAINS:
        result.add("email", "Please use a permanent email address")

    return result
