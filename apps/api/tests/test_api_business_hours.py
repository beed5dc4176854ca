import uuid
from decimal import Decimal

from conftest import BASE, auth, utc
from venue_finance.models.pos import PosOrderORM


def test_read_and_update_hours(client, company, admin):
    url = f"{BASE}/companies/{company.id}/business-hours"
    r = client.get(url, headers=auth(admin))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["business_hours_start"] == "09:00"
    assert body["operating_days"] == ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]

    r = client.put(
        url,
        json={
            "operating_days": ["SAT", "FRI"],
            "individual_day_hours": {"FRI": {"start": "20:00", "end": "02:00"}},
            "use_individual_hours": True,
        },
        headers=auth(admin),
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["operating_days"] == ["FRI", "SAT"]
    assert body["individual_day_hours"]["FRI"] == {"start": "20:00", "end": "02:00", "enabled": True}
    assert body["use_individual_hours"] is True


def test_invalid_hours_are_rejected(client, company, admin):
    url = f"{BASE}/companies/{company.id}/business-hours"
    assert client.put(url, json={"business_hours_start": "25:00"}, headers=auth(admin)).status_code == 422
    assert client.put(url, json={"operating_days": ["MONDAY"]}, headers=auth(admin)).status_code == 422
    assert client.put(url, json={"timezone": "Nowhere/Town"}, headers=auth(admin)).status_code == 422


def test_seller_cannot_change_hours(client, company, seller):
    r = client.put(
        f"{BASE}/companies/{company.id}/business-hours",
        json={"business_hours_start": "10:00"},
        headers=auth(seller),
    )
    assert r.status_code == 403


def test_resolve_shows_window(client, company, admin):
    client.put(
        f"{BASE}/companies/{company.id}/business-hours",
        json={"business_hours_start": "20:00", "business_hours_end": "02:00"},
        headers=auth(admin),
    )
    r = client.get(f"{BASE}/business-hours/resolve", params={"date": "2024-05-06"}, headers=auth(admin))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["weekday"] == "MON"
    assert body["configured"] is True
    assert body["open"] is True
    assert body["start"].startswith("2024-05-06T20:00:00")
    assert body["end"].startswith("2024-05-07T02:00:00.999")


def test_sales_summary_endpoint(client, db, company, admin):
    db.add(
        PosOrderORM(
            id=uuid.uuid4(),
            company_id=company.id,
            amount=Decimal("12.50"),
            payment_status="PAID",
            created_at=utc(2024, 5, 7, 12, 0),
        )
    )
    db.commit()

    r = client.get(
        f"{BASE}/reports/sales-summary",
        params={"days": 3, "end_date": "2024-05-07"},
        headers=auth(admin),
    )
    assert r.status_code == 200, r.text
    points = r.json()["points"]
    assert [p["date_label"] for p in points] == ["Sun 05/05", "Mon 06/05", "Tue 07/05"]
    assert Decimal(points[-1]["pos_amount"]) == Decimal("12.50")
    assert Decimal(points[0]["table_amount"]) == Decimal("0")


def test_sales_summary_days_bounded(client, company, admin):
    r = client.get(f"{BASE}/reports/sales-summary", params={"days": 10000}, headers=auth(admin))
    assert r.status_code == 400
