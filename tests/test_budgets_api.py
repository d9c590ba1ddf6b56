def _budget(client, headers, month="2024-01", category="Food", amount=200):
    return client.post("/api/budgets", headers=headers, json={"month": month, "category": category, "amount": amount})


def _expense(client, headers, amount, category="Food", day="2024-01-10"):
    resp = client.post(
        "/api/expenses",
        headers=headers,
        json={"description": "x", "amount": amount, "category": category, "date": day},
    )
    assert resp.status_code == 201


def test_create_then_update_budget(client, auth_headers):
    first = _budget(client, auth_headers)
    assert first.status_code == 201
    second = _budget(client, auth_headers, amount=350)
    assert second.status_code == 200
    assert second.get_json()["id"] == first.get_json()["id"]
    assert second.get_json()["amount"] == 350

    rows = client.get("/api/budgets/2024-01", headers=auth_headers).get_json()
    assert len(rows) == 1
    assert rows[0]["amount"] == 350
    assert rows[0]["category_color"]


def test_budget_validation(client, auth_headers):
    resp = client.post("/api/budgets", headers=auth_headers, json={"month": "2024-01", "category": "Food"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide month, category and amount"
    assert _budget(client, auth_headers, month="2024-13").status_code == 400
    assert _budget(client, auth_headers, amount=-5).status_code == 400


def test_list_budgets_ordering(client, auth_headers):
    _budget(client, auth_headers, month="2024-01", category="Housing")
    _budget(client, auth_headers, month="2024-02", category="Food")
    _budget(client, auth_headers, month="2024-01", category="Food")
    rows = client.get("/api/budgets", headers=auth_headers).get_json()
    assert [(r["month"], r["category"]) for r in rows] == [
        ("2024-02", "Food"), ("2024-01", "Food"), ("2024-01", "Housing"),
    ]


def test_month_budgets_rejects_bad_month(client, auth_headers):
    assert client.get("/api/budgets/january", headers=auth_headers).status_code == 400


def test_delete_budget_scoped(client, auth_headers, other_headers):
    budget = _budget(client, auth_headers).get_json()
    assert client.delete(f"/api/budgets/{budget['id']}", headers=other_headers).status_code == 404
    resp = client.delete(f"/api/budgets/{budget['id']}", headers=auth_headers)
    assert resp.get_json() == {"message": "Budget deleted successfully"}
    assert client.get("/api/budgets", headers=auth_headers).get_json() == []


def test_budget_analysis(client, auth_headers):
    _budget(client, auth_headers, category="Food", amount=200)
    _budget(client, auth_headers, category="Entertainment", amount=50)
    _budget(client, auth_headers, category="Housing", amount=1000)
    _expense(client, auth_headers, 100)
    _expense(client, auth_headers, 80)
    _expense(client, auth_headers, 120, category="Entertainment")
    _expense(client, auth_headers, 30, category="Shopping")
    _expense(client, auth_headers, 500, day="2024-02-01")

    body = client.get("/api/budgets/analysis/2024-01", headers=auth_headers).get_json()
    assert body["month"] == "2024-01"
    assert body["categories"] == [
        {"category": "Food", "budgeted": 200, "spent": 180, "remaining": 20, "percentage": 90, "status": "warning"},
        {"category": "Entertainment", "budgeted": 50, "spent": 120, "remaining": -70, "percentage": 100, "status": "over"},
        {"category": "Housing", "budgeted": 1000, "spent": 0, "remaining": 1000, "percentage": 0, "status": "good"},
    ]
    assert body["summary"] == {"budgeted": 1250, "spent": 300, "remaining": 950, "percentage": 24}


def test_budget_analysis_without_budgets(client, auth_headers):
    _expense(client, auth_headers, 40)
    body = client.get("/api/budgets/analysis/2024-01", headers=auth_headers).get_json()
    assert body["categories"] == []
    assert body["summary"] == {"budgeted": 0, "spent": 0, "remaining": 0, "percentage": 0}


def test_budget_analysis_scoped_to_user(client, auth_headers, other_headers):
    _budget(client, auth_headers, amount=100)
    _expense(client, other_headers, 75)
    body = client.get("/api/budgets/analysis/2024-01", headers=auth_headers).get_json()
    assert body["categories"][0]["spent"] == 0


def test_budgets_require_auth(client):
    assert client.get("/api/budgets").status_code == 401


def test_month_with_trailing_newline_is_rejected(client, auth_headers):
    resp = _budget(client, auth_headers, month="2024-01\n")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid month, expected YYYY-MM"
    assert client.get("/api/budgets", headers=auth_headers).get_json() == []


def test_budget_category_must_be_text(client, auth_headers):
    resp = _budget(client, auth_headers, category=7)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "category must be a string"
