from decimal import Decimal

from conftest import BASE, auth


def _money(value) -> Decimal:
    return Decimal(str(value))


def _post_income(client, user, amount, income_type="OTHER", income_date="2024-05-01", description="Tournament fees"):
    return client.post(
        f"{BASE}/financial/income",
        json={
            "income_type": income_type,
            "amount": amount,
            "income_date": income_date,
            "description": description,
        },
        headers=auth(user),
    )


def test_post_income_find_or_create(client, company, admin):
    r = _post_income(client, admin, "30.00")
    assert r.status_code == 201, r.text
    assert r.json()["created"] is True

    r = _post_income(client, admin, "12.50", income_type="TABLE_RENT")
    assert r.status_code == 200, r.text
    report = r.json()["report"]
    assert _money(report["other_income"]) == Decimal("30.00")
    assert _money(report["table_rent_income"]) == Decimal("12.50")
    assert _money(report["total_income"]) == Decimal("42.50")
    assert _money(report["net_profit"]) == Decimal("42.50")
    assert report["source"] == "POSTED"

    r = client.get(f"{BASE}/financial/income", headers=auth(admin))
    assert r.status_code == 200, r.text
    view = r.json()
    assert len(view["items"]) == 1
    assert _money(view["total_income"]) == Decimal("42.50")


def test_income_and_expense_share_the_posted_report(client, company, admin):
    assert _post_income(client, admin, "100.00", income_type="SALES").status_code == 201
    r = client.post(
        f"{BASE}/financial/expenses",
        json={"expense_type": "STAFF", "amount": "35.00", "expense_date": "2024-05-01", "description": "Bar staff"},
        headers=auth(admin),
    )
    assert r.status_code == 200, r.text
    report = r.json()["report"]
    assert _money(report["sales_income"]) == Decimal("100.00")
    assert _money(report["staff_cost"]) == Decimal("35.00")
    assert _money(report["net_profit"]) == Decimal("65.00")


def test_post_income_validation(client, company, admin):
    assert _post_income(client, admin, "0").status_code == 422
    assert _post_income(client, admin, "5", income_type="TIPS").status_code == 422
    assert _post_income(client, admin, "5", description="").status_code == 422


def test_seller_cannot_post_income(client, company, seller):
    assert _post_income(client, seller, "5").status_code == 403
    assert client.get(f"{BASE}/financial/income", headers=auth(seller)).status_code == 403
