"""
Shared test fixtures: test client, calculator, sample profiles and submissions.
"""

import pytest
from fastapi.testclient import TestClient

from consulting_quote.calculators.pricing_tables import DEFAULT_PRICING
from consulting_quote.calculators.quote_calculator import QuoteCalculator
from consulting_quote.main import app
from consulting_quote.routers.quotes import get_calculator


def override_get_calculator():
    # Pin the built-in tables and currency so a local .env can't change results
    return QuoteCalculator(DEFAULT_PRICING, currency_symbol="R")


app.dependency_overrides[get_calculator] = override_get_calculator


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def calculator():
    return QuoteCalculator(DEFAULT_PRICING, currency_symbol="R")


@pytest.fixture
def submission():
    """Complete, valid questionnaire submission for a Close Corporation."""
    return {
        "entityType": "Close Corporation (CC)",
        "annualRevenue": "R500,001 - R1,000,000",
        "companyName": "  Karoo Bakery CC  ",
        "industry": "Food & Beverage",
        "hasEmployees": "Yes",
        "employeeCount": "1-5",
        "managesStock": "Yes",
        "dealsForeignCurrency": "No",
        "primaryGoal": "Reduce Accounting Costs",
        "businessChallenges": "Month-end reconciliations take far too long.",
        "contactName": "Thandi Mokoena",
        "email": "Thandi@KarooBakery.co.za",
        "phoneNumber": "+27 21 555 0101",
    }


@pytest.fixture
def pty_submission(submission):
    """Valid Pty Ltd submission including the compliance section."""
    data = dict(submission)
    data.update({
        "entityType": "Private Company (Pty Ltd)",
        "companyName": "Fynbos Logistics (Pty) Ltd",
        "industry": "Transportation & Logistics",
        "taxComplexity": "Complex",
        "auditRequirements": "Required",
        "regulatoryReporting": "Standard",
    })
    return data


@pytest.fixture
def contact_message():
    """Valid contact form submission."""
    return {
        "name": "  Sipho Dlamini ",
        "email": " Sipho@Example.co.za",
        "subject": "Switching accountants",
        "message": "We are a small design studio looking for monthly bookkeeping support.",
    }
