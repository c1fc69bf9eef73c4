from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.models.investment import Investment
from app.models.tenant import Tenant


def _create(client, payload, **overrides):
    response = client.post("/api/investments", json={**payload, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateInvestment:
    """Tests for POST /api/investments"""

    def test_create_investment(self, admin_client, investment_payload, db_session):
        response = admin_client.post("/api/investments", json=investment_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "Stocks"
        assert data["platform"] == "Avanza"
        assert Decimal(data["initial_amount"]) == Decimal("10000.50")
        assert Decimal(data["current_value"]) == Decimal("12500.25")
        assert data["last_updated"] is not None
        assert data["tenant_id"] == db_session.query(Tenant).one().id

    def test_amounts_kept_exact(self, admin_client, investment_payload):
        data = _create(admin_client, investment_payload, current_value="0.1", shares="12.34567891")

        assert Decimal(data["current_value"]) == Decimal("0.1")
        assert Decimal(data["shares"]) == Decimal("12.34567891")

    def test_amounts_beyond_four_places_and_float_precision(self, admin_client, investment_payload):
        created = _create(
            admin_client,
            investment_payload,
            initial_amount="123456789012345.6789",
            current_value="0.123456789",
        )

        fetched = admin_client.get(f"/api/investments/{created['id']}").json()

        for data in (created, fetched):
            assert Decimal(data["initial_amount"]) == Decimal("123456789012345.6789")
            assert Decimal(data["current_value"]) == Decimal("0.123456789")

    def test_codes_uppercased(self, admin_client, investment_payload):
        data = _create(admin_client, investment_payload, currency="inr", country="india")

        assert data["currency"] == "INR"
        assert data["country"] == "INDIA"

    def test_other_currency_accepted(self, admin_client, investment_payload):
        """Any currency is stored; only SEK and INR are totalled on the dashboard"""
        assert _create(admin_client, investment_payload, currency="USD")["currency"] == "USD"

    @pytest.mark.parametrize(
        "field,message",
        [
            ("platform", "Platform is required"),
            ("currency", "Currency is required"),
            ("initial_amount", "Initial amount is required"),
            ("current_value", "Current value is required"),
        ],
    )
    def test_blank_required_field_rejected(self, admin_client, investment_payload, field, message):
        response = admin_client.post("/api/investments", json={**investment_payload, field: ""})

        assert response.status_code == 400
        assert response.json()["detail"] == message

    def test_invalid_type_rejected(self, admin_client, investment_payload):
        response = admin_client.post("/api/investments", json={**investment_payload, "type": "Art"})
        assert response.status_code == 400
        assert response.json()["field"] == "type"

    def test_client_tenant_id_and_last_updated_ignored(self, admin_client, investment_payload):
        data = _create(
            admin_client,
            investment_payload,
            tenant_id="someone-else",
            last_updated="2001-01-01T00:00:00",
        )

        assert data["tenant_id"] != "someone-else"
        assert not data["last_updated"].startswith("2001")


class TestListInvestments:
    """Tests for GET /api/investments"""

    def test_newest_first(self, admin_client, investment_payload):
        _create(admin_client, investment_payload, platform="Avanza")
        _create(admin_client, investment_payload, platform="Nordnet")

        platforms = [i["platform"] for i in admin_client.get("/api/investments").json()]

        assert platforms == ["Nordnet", "Avanza"]

    def test_isolated_between_tenants(self, admin_client, member_client, other_tenant_client, investment_payload):
        _create(member_client, investment_payload)

        assert len(admin_client.get("/api/investments").json()) == 1
        assert other_tenant_client.get("/api/investments").json() == []


class TestGetInvestment:
    """Tests for GET /api/investments/{id}"""

    def test_get_investment(self, admin_client, investment_payload):
        created = _create(admin_client, investment_payload)

        response = admin_client.get(f"/api/investments/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_repeated_get_is_identical(self, admin_client, investment_payload):
        created = _create(admin_client, investment_payload, shares="3.5")

        first = admin_client.get(f"/api/investments/{created['id']}")
        second = admin_client.get(f"/api/investments/{created['id']}")

        assert first.json() == second.json()
        assert admin_client.get("/api/investments").json() == admin_client.get("/api/investments").json()

    def test_other_tenant_gets_not_found(self, admin_client, other_tenant_client, investment_payload):
        created = _create(admin_client, investment_payload)

        response = other_tenant_client.get(f"/api/investments/{created['id']}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Investment not found"


class TestUpdateInvestment:
    """Tests for PUT /api/investments/{id}"""

    def test_partial_update(self, admin_client, investment_payload):
        created = _create(admin_client, investment_payload)

        response = admin_client.put(
            f"/api/investments/{created['id']}", json={"current_value": "13000"}
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["current_value"]) == Decimal("13000")
        assert Decimal(data["initial_amount"]) == Decimal("10000.50")
        assert data["platform"] == "Avanza"

    def test_last_updated_advances(self, admin_client, investment_payload, db_session):
        created = _create(admin_client, investment_payload)
        investment = db_session.get(Investment, created["id"])
        investment.last_updated = investment.last_updated - timedelta(days=3)
        db_session.commit()
        stale = investment.last_updated

        response = admin_client.put(f"/api/investments/{created['id']}", json={"platform": "Nordnet"})

        assert datetime.fromisoformat(response.json()["last_updated"]) > stale

    def test_empty_update_still_stamps(self, admin_client, investment_payload, db_session):
        created = _create(admin_client, investment_payload)
        investment = db_session.get(Investment, created["id"])
        investment.last_updated = investment.last_updated - timedelta(hours=1)
        db_session.commit()
        stale = investment.last_updated

        response = admin_client.put(f"/api/investments/{created['id']}", json={})

        assert response.status_code == 200
        assert datetime.fromisoformat(response.json()["last_updated"]) > stale

    def test_last_updated_never_goes_backwards(self, admin_client, investment_payload, db_session):
        """A stored stamp ahead of the clock is kept"""
        created = _create(admin_client, investment_payload)
        investment = db_session.get(Investment, created["id"])
        ahead = investment.last_updated + timedelta(days=1)
        investment.last_updated = ahead
        db_session.commit()

        response = admin_client.put(f"/api/investments/{created['id']}", json={"platform": "Nordnet"})

        assert datetime.fromisoformat(response.json()["last_updated"]) == ahead

    def test_required_field_cannot_be_cleared(self, admin_client, investment_payload):
        created = _create(admin_client, investment_payload)

        response = admin_client.put(f"/api/investments/{created['id']}", json={"platform": ""})

        assert response.status_code == 400
        assert response.json()["detail"] == "Platform is required"

    def test_other_tenant_cannot_update(self, admin_client, other_tenant_client, investment_payload):
        created = _create(admin_client, investment_payload)

        response = other_tenant_client.patch(
            f"/api/investments/{created['id']}", json={"current_value": "1"}
        )

        assert response.status_code == 404


class TestDeleteInvestment:
    """Tests for DELETE /api/investments/{id}"""

    def test_delete_investment(self, admin_client, investment_payload, db_session):
        created = _create(admin_client, investment_payload)

        response = admin_client.delete(f"/api/investments/{created['id']}")

        assert response.status_code == 204
        assert db_session.query(Investment).count() == 0

    def test_other_tenant_cannot_delete(self, admin_client, other_tenant_client, investment_payload, db_session):
        created = _create(admin_client, investment_payload)

        assert other_tenant_client.delete(f"/api/investments/{created['id']}").status_code == 404
        assert db_session.query(Investment).count() == 1
