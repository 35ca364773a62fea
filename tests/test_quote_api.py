"""
API tests: /api/quote, /api/quote/pricing, /api/questionnaire, /api/contact, /health.
"""


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": "consulting-quote"}


# ============================================================
# POST /api/quote
# ============================================================

def test_quote_sole_proprietor(client):
    response = client.post("/api/quote", json={
        "entityType": "Sole Proprietor",
        "annualRevenue": "R0 - R100,000",
        "industry": "Other",
        "hasEmployees": "No",
        "managesStock": "No",
        "dealsForeignCurrency": "No",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["quote"] == 640
    assert data["basePrice"] == 800
    assert data["complexityFactors"] == []
    assert data["breakdown"]["total"] == 640
    assert data["baseServices"]["entityType"] == "Sole Proprietor"


def test_quote_accepts_booleans(client):
    response = client.post("/api/quote", json={
        "entityType": "Private Company (Pty Ltd)",
        "annualRevenue": "R1,000,001 - R5,000,000",
        "industry": "Asteroid Mining",
        "hasEmployees": True,
        "employeeCount": "6-20",
        "managesStock": True,
        "dealsForeignCurrency": True,
        "taxComplexity": "Complex",
        "auditRequirements": "Required",
        "regulatoryReporting": "Extensive",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["quote"] == 13565
    assert data["payrollCost"] == 800
    assert len(data["complexityFactors"]) == 7
    assert data["industryModifier"] == 1.0


def test_quote_unknown_entity_type(client):
    response = client.post("/api/quote", json={
        "entityType": "Cooperative",
        "annualRevenue": "R0 - R100,000",
        "industry": "Other",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown entity type: Cooperative"


def test_quote_requires_entity_type(client):
    response = client.post("/api/quote", json={"annualRevenue": "R0 - R100,000"})
    assert response.status_code == 422


def test_pricing_tables_endpoint(client):
    response = client.get("/api/quote/pricing")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "default"
    assert data["minimumQuote"] == 500
    assert data["baseServices"]["Trust"]["basePrice"] == 1800
    assert data["payrollPricing"]["Over 100"] == 4000
    assert data["complexityModifiers"]["Audit Requirements"] == 1.3


# ============================================================
# POST /api/questionnaire
# ============================================================

def test_questionnaire_success_computes_quote(client, submission):
    response = client.post("/api/questionnaire", json=submission)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["companyName"] == "Karoo Bakery CC"
    assert data["primaryGoal"] == "Reduce Accounting Costs"
    assert data["submissionId"].startswith("BHC-")
    assert data["quote"] == 3157
    assert data["summary"]["monthlyFee"] == 3157
    assert data["summary"]["annualFee"] == 3157 * 12
    assert data["summary"]["payrollIncluded"] is True


def test_questionnaire_pty_ltd(client, pty_submission):
    response = client.post("/api/questionnaire", json=pty_submission)
    assert response.status_code == 200
    summary = response.json()["data"]["summary"]
    assert response.json()["data"]["quote"] == 8825
    assert summary["complexityFactors"] == [
        "Payroll Management",
        "Inventory Management",
        "Corporate Compliance",
        "Audit Requirements",
        "Complex Tax Structure",
    ]


def test_questionnaire_server_quote_replaces_client_preview(client, submission):
    data = dict(submission, quoteDetails={
        "quote": 0, "basePrice": 0, "payrollCost": 0,
        "revenueModifier": 1, "complexityModifier": 1,
    })
    response = client.post("/api/questionnaire", json=data)
    assert response.status_code == 200
    body = response.json()["data"]
    assert body["quote"] == 3157
    assert body["summary"]["monthlyFee"] == 3157
    assert body["quote"] >= 500


def test_questionnaire_logs_preview_mismatch(client, submission, caplog):
    data = dict(submission, quoteDetails={"quote": 2999})
    with caplog.at_level("WARNING", logger="consulting_quote.routers.questionnaire"):
        response = client.post("/api/questionnaire", json=data)
    assert response.json()["data"]["quote"] == 3157
    assert "2999 != 3157" in caplog.text


def test_questionnaire_malformed_preview_services(client, submission):
    data = dict(submission, quoteDetails={"quote": 3000, "baseServices": "oops"})
    response = client.post("/api/questionnaire", json=data)
    assert response.status_code == 200
    summary = response.json()["data"]["summary"]
    assert summary["monthlyFee"] == 3157
    assert summary["primaryServices"] == [
        "Monthly bookkeeping",
        "VAT returns",
        "Corporate tax returns",
        "Annual financial statements",
        "CIPC annual returns",
    ]


def test_questionnaire_validation_failure(client, submission):
    data = dict(submission, email="nope", employeeCount="")
    response = client.post("/api/questionnaire", json=data)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert {"field": "email", "message": "Please provide a valid email address"} in body["details"]
    assert {
        "field": "employeeCount",
        "message": "Employee count is required when you have employees",
    } in body["details"]


def test_questionnaire_rejects_non_object(client):
    response = client.post("/api/questionnaire", json=["a", "b"])
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "body"


# ============================================================
# POST /api/contact
# ============================================================

def test_contact_success(client, contact_message):
    response = client.post("/api/contact", json=contact_message)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"].startswith("Your message has been sent successfully")
    assert body["requestId"]
    assert body["timestamp"]


def test_contact_validation_failure(client, contact_message):
    data = dict(contact_message, email="someone@mailinator.com", message="short")
    response = client.post("/api/contact", json=data)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert {"field": "email", "message": "Please use a permanent email address"} in body["details"]
    assert {
        "field": "message",
        "message": "Message must be at least 10 characters long",
    } in body["details"]


def test_contact_rejects_non_object(client):
    response = client.post("/api/contact", json="hello")
    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "body", "message": "Request body must be a JSON object"},
    ]
