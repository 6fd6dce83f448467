"""
Tests for the livestock router and repository
Run with: pytest tests/test_livestock.py -v
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from farmledger.api.core.errors import NotFoundError, ValidationError
from farmledger.api.repositories.livestock import LivestockRepository, get_livestock_repository
from farmledger.api.repositories.sale import get_sale_repository


def animal_row(make_row, **overrides):
    fields = dict(
        id=1,
        flock_id=3,
        tag_id="GOAT-001",
        species="goat",
        breed="Boer",
        gender="female",
        date_of_birth=None,
        status="active",
        purchase_price=150.0,
        purchase_date=date(2024, 1, 10),
        sale_price=None,
        sale_date=None,
        sale_reason=None,
        weight_at_purchase=20.0,
        current_weight=24.5,
        notes=None,
        created_at=None,
        updated_at=None,
    )
    fields.update(overrides)
    return make_row(**fields)


def sale_row(make_row, **overrides):
    fields = dict(
        id=7,
        livestock_id=1,
        flock_id=3,
        sale_type="animal",
        sale_date=date(2024, 6, 1),
        description="Sale of goat GOAT-001",
        quantity=1,
        unit_price=300.0,
        total_amount=300.0,
        customer_name="Market",
        customer_contact=None,
        payment_method="cash",
        notes=None,
        created_at=None,
    )
    fields.update(overrides)
    return make_row(**fields)


@pytest.fixture
def livestock(override):
    repo = MagicMock()
    for name in ("list_all", "get", "create", "update", "delete", "update_weight", "financials"):
        setattr(repo, name, AsyncMock())
    return override(get_livestock_repository, repo)


@pytest.fixture
def sales(override):
    repo = MagicMock()
    repo.record = AsyncMock()
    return override(get_sale_repository, repo)


class TestLivestockRouter:

    def test_list_with_filters(self, client, auth_headers, livestock, make_row):
        livestock.list_all.return_value = [animal_row(make_row)]
        response = client.get(
            "/api/livestock/?status=active&flockId=3&q=goat", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["data"][0]["tag_id"] == "GOAT-001"
        livestock.list_all.assert_awaited_once_with(status="active", flock_id=3, q="goat")

    def test_unknown_status_rejected(self, client, auth_headers, livestock):
        response = client.get("/api/livestock/?status=missing", headers=auth_headers)
        assert response.status_code == 400
        livestock.list_all.assert_not_awaited()

    def test_get_missing(self, client, auth_headers, livestock):
        livestock.get.return_value = None
        response = client.get("/api/livestock/42", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Livestock not found"

    def test_create(self, client, auth_headers, livestock, make_row):
        livestock.create.return_value = animal_row(make_row)
        response = client.post(
            "/api/livestock/",
            json={"tag_id": "GOAT-001", "species": "goat", "flock_id": 3, "purchase_price": 150},
            headers=auth_headers,
        )
        assert response.status_code == 201
        values = livestock.create.call_args.args[0]
        assert values["gender"] == "unknown"
        assert values["status"] == "active"

    def test_create_cannot_start_sold(self, client, auth_headers, livestock):
        response = client.post(
            "/api/livestock/",
            json={"tag_id": "GOAT-003", "species": "goat", "status": "sold"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert "status" in response.json()["message"]
        livestock.create.assert_not_awaited()

    def test_create_duplicate_tag(self, client, auth_headers, livestock):
        livestock.create.side_effect = ValidationError("Tag ID GOAT-001 is already in use")
        response = client.post(
            "/api/livestock/",
            json={"tag_id": "GOAT-001", "species": "goat"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Tag ID GOAT-001 is already in use"

    def test_create_in_missing_flock(self, client, auth_headers, livestock):
        livestock.create.side_effect = NotFoundError("Flock")
        response = client.post(
            "/api/livestock/",
            json={"tag_id": "GOAT-002", "species": "goat", "flock_id": 99},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_update_cannot_mark_sold(self, client, auth_headers, livestock):
        response = client.put("/api/livestock/1", json={"status": "sold"}, headers=auth_headers)
        assert response.status_code == 400
        livestock.update.assert_not_awaited()

    def test_update_sends_only_given_fields(self, client, auth_headers, livestock, make_row):
        livestock.update.return_value = animal_row(make_row, notes="limping")
        response = client.put("/api/livestock/1", json={"notes": "limping"}, headers=auth_headers)
        assert response.status_code == 200
        livestock.update.assert_awaited_once_with(1, {"notes": "limping"})

    def test_delete_missing(self, client, auth_headers, livestock):
        livestock.delete.return_value = False
        response = client.delete("/api/livestock/5", headers=auth_headers)
        assert response.status_code == 404

    def test_sell(self, client, auth_headers, livestock, sales, make_row):
        livestock.get.return_value = animal_row(make_row)
        sales.record.return_value = sale_row(make_row)
        response = client.post(
            "/api/livestock/1/sale",
            json={
                "sale_price": 300,
                "sale_date": "2024-06-01",
                "sale_reason": "culling",
                "customer_name": "Market",
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["total_amount"] == 300.0

        sale, = sales.record.call_args.args
        assert sale.sale_type == "animal"
        assert sale.livestock_id == 1
        assert sale.flock_id == 3
        assert sale.quantity == 1
        assert sale.total_amount == 300.0
        assert sale.description == "Sale of goat GOAT-001"
        assert sales.record.call_args.kwargs == {"sale_reason": "culling"}

    def test_sell_missing_animal(self, client, auth_headers, livestock, sales):
        livestock.get.return_value = None
        response = client.post(
            "/api/livestock/9/sale",
            json={"sale_price": 300, "sale_date": "2024-06-01"},
            headers=auth_headers,
        )
        assert response.status_code == 404
        sales.record.assert_not_awaited()

    def test_sell_already_sold(self, client, auth_headers, livestock, sales, make_row):
        livestock.get.return_value = animal_row(make_row, status="sold")
        sales.record.side_effect = ValidationError("Livestock GOAT-001 is not active")
        response = client.post(
            "/api/livestock/1/sale",
            json={"sale_price": 300, "sale_date": "2024-06-01"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("weight", [0, -3, "heavy"])
    def test_weight_must_be_positive(self, client, auth_headers, livestock, weight):
        response = client.patch(
            "/api/livestock/1/weight", json={"current_weight": weight}, headers=auth_headers
        )
        assert response.status_code == 400
        livestock.update_weight.assert_not_awaited()

    def test_weight_update(self, client, auth_headers, livestock, make_row):
        livestock.update_weight.return_value = animal_row(make_row, current_weight=30.0)
        response = client.patch(
            "/api/livestock/1/weight", json={"current_weight": 30}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["current_weight"] == 30.0
        livestock.update_weight.assert_awaited_once_with(1, 30.0)

    def test_financials_missing(self, client, auth_headers, livestock):
        livestock.financials.return_value = None
        response = client.get("/api/livestock/1/financials", headers=auth_headers)
        assert response.status_code == 404


class TestLivestockRepository:

    def test_duplicate_tag_on_create(self, fake_session, make_row):
        session = fake_session([make_row(id=5, tag_id="GOAT-001")])
        with pytest.raises(ValidationError, match="already in use"):
            asyncio.run(LivestockRepository(session).create(
                {"tag_id": "GOAT-001", "species": "goat"}
            ))
        session.add.assert_not_called()

    def test_lost_insert_race_maps_to_validation_error(self, fake_session):
        session = fake_session([])
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        with pytest.raises(ValidationError):
            asyncio.run(LivestockRepository(session).create(
                {"tag_id": "GOAT-001", "species": "goat"}
            ))
        session.rollback.assert_awaited_once()

    def test_missing_flock_on_create(self, fake_session):
        session = fake_session([])
        with pytest.raises(NotFoundError):
            asyncio.run(LivestockRepository(session).create(
                {"tag_id": "GOAT-009", "species": "goat", "flock_id": 99}
            ))

    def test_update_keeps_own_tag(self, fake_session, make_row):
        animal = animal_row(make_row)
        session = fake_session([animal])
        session.get.return_value = animal
        updated = asyncio.run(LivestockRepository(session).update(
            1, {"tag_id": "GOAT-001", "notes": "ok"}
        ))
        assert updated.notes == "ok"
        session.commit.assert_awaited_once()

    def test_update_to_taken_tag(self, fake_session, make_row):
        session = fake_session([make_row(id=2, tag_id="GOAT-002")])
        session.get.return_value = animal_row(make_row)
        with pytest.raises(ValidationError):
            asyncio.run(LivestockRepository(session).update(1, {"tag_id": "GOAT-002"}))
        session.commit.assert_not_awaited()

    def test_update_missing(self, fake_session):
        session = fake_session()
        assert asyncio.run(LivestockRepository(session).update(1, {"notes": "x"})) is None

    def test_update_ignores_null_species(self, fake_session, make_row):
        animal = animal_row(make_row)
        session = fake_session()
        session.get.return_value = animal
        asyncio.run(LivestockRepository(session).update(1, {"species": None, "breed": None}))
        assert animal.species == "goat"
        assert animal.breed is None

    def test_financials_shaped(self, fake_session):
        session = fake_session([{
            "animal_id": 1,
            "tag_id": "GOAT-001",
            "purchase_price": 150,
            "net_profit_loss": None,
            "roi_percentage": None,
            "days_owned": 143,
        }])
        financials = asyncio.run(LivestockRepository(session).financials(1))
        assert financials["net_profit_loss"] == 0.0
        assert financials["days_owned"] == 143
        statement, params = session.execute.call_args.args
        assert params == {"animal_id": 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
