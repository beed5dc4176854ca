from decimal import Decimal

from conftest import BASE, auth, make_company, make_user
from venue_finance.models.enums import UserRole


def _money(value) -> Decimal:
    return Decimal(str(value))


def _post(client, user, amount, expense_type="MAINTENANCE", expense_date="2024-05-01", description="Cue tips"):
    return client.post(
        f"{BASE}/financial/expenses",
        json={
            "expense_type": expense_type,
            "amount": amount,
            "expense_date": expense_date,
            "description": description,
        },
        headers=auth(user),
    )


def test_post_expense_find_or_create(client, company, admin):
    r = _post(client, admin, "15.00")
    assert r.status_code == 201, r.text
    assert r.json()["created"] is True

    r = _post(client, admin, "25.00")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["created"] is False
    assert _money(body["report"]["maintenance_cost"]) == Decimal("40.00")
    assert _money(body["report"]["net_profit"]) == Decimal("-40.00")

    r = client.get(f"{BASE}/financial/expenses", headers=auth(admin))
    assert r.status_code == 200, r.text
    view = r.json()
    assert len(view["items"]) == 1
    assert _money(view["total_expense"]) == Decimal("40.00")


def test_post_expense_rejects_non_positive_amount(client, company, admin):
    assert _post(client, admin, "0").status_code == 422
    assert _post(client, admin, "-3.00").status_code == 422


def test_post_expense_rejects_unknown_type(client, company, admin):
    assert _post(client, admin, "5", expense_type="FOOD").status_code == 422


def test_post_expense_requires_description(client, company, admin):
    assert _post(client, admin, "5", description="   ").status_code == 422


def test_seller_cannot_post_expense(client, company, seller):
    assert _post(client, seller, "5").status_code == 403


def test_manual_expense_crud(client, company, admin):
    r = client.post(
        f"{BASE}/expenses",
        json={"expense_date": "2024-05-01", "category": "STAFF", "description": "Bar staff", "amount": "120.00"},
        headers=auth(admin),
    )
    assert r.status_code == 201, r.text
    exp = r.json()
    assert exp["company_id"] == str(company.id)

    r = client.get(f"{BASE}/expenses", params={"category": "STAFF"}, headers=auth(admin))
    assert r.json()["total"] == 1

    r = client.put(f"{BASE}/expenses/{exp['id']}", json={"amount": "90.00"}, headers=auth(admin))
    assert r.status_code == 200, r.text
    assert _money(r.json()["amount"]) == Decimal("90.00")

    assert client.delete(f"{BASE}/expenses/{exp['id']}", headers=auth(admin)).status_code == 204
    assert client.get(f"{BASE}/expenses/{exp['id']}", headers=auth(admin)).status_code == 404


def test_manual_expense_feeds_generated_report(client, company, admin):
    for category, amount in (("UTILITIES", "30.00"), ("RENT", "200.00")):
        r = client.post(
            f"{BASE}/expenses",
            json={"expense_date": "2024-05-01", "category": category, "description": category, "amount": amount},
            headers=auth(admin),
        )
        assert r.status_code == 201, r.text

    r = client.post(
        f"{BASE}/financial-reports/generate",
        json={"report_type": "DAILY", "start_date": "2024-05-01"},
        headers=auth(admin),
    )
    body = r.json()
    assert _money(body["utility_cost"]) == Decimal("30.00")
    assert _money(body["other_expenses"]) == Decimal("200.00")
    assert _money(body["total_expense"]) == Decimal("230.00")


def test_manual_expense_unknown_category(client, company, admin):
    r = client.post(
        f"{BASE}/expenses",
        json={"expense_date": "2024-05-01", "category": "PARTY", "description": "x", "amount": "1"},
        headers=auth(admin),
    )
    assert r.status_code == 422


def test_manual_expenses_are_company_scoped(client, db, company, admin):
    other = make_company(db, name="Other Hall")
    other_admin = make_user(db, other, UserRole.ADMIN)
    r = client.post(
        f"{BASE}/expenses",
        json={"expense_date": "2024-05-01", "category": "OTHER", "description": "x", "amount": "1"},
        headers=auth(other_admin),
    )
    exp_id = r.json()["id"]

    assert client.get(f"{BASE}/expenses/{exp_id}", headers=auth(admin)).status_code == 404
    assert client.get(f"{BASE}/expenses", params={"company_id": str(other.id)}, headers=auth(admin)).status_code == 403


def test_manual_expense_list_sums_amounts_and_filters_dates(client, company, admin):
    for day, amount in (("2024-05-01", "10.00"), ("2024-05-02", "2.50"), ("2024-05-03", "7.25")):
        client.post(
            f"{BASE}/expenses",
            json={"expense_date": day, "category": "SUPPLIES", "description": "Chalk", "amount": amount},
            headers=auth(admin),
        )

    r = client.get(f"{BASE}/expenses", params={"start": "2024-05-02", "end": "2024-05-03"}, headers=auth(admin))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 2
    assert _money(body["amount_total"]) == Decimal("9.75")
    assert [i["expense_date"] for i in body["items"]] == ["2024-05-03", "2024-05-02"]

    assert client.get(f"{BASE}/expenses", params={"start": "May 2"}, headers=auth(admin)).status_code == 400
