from sqlalchemy import select

from vesselbook.models import VatProfile


class TestVat:
    async def test_income_uses_default_vat_profile(self, create_transaction):
        data = await create_transaction("income", 10000)
        assert data["amount"] == 10000
        assert data["vat_amount"] == 2300
        assert data["total_amount"] == 12300
        assert data["formatted_total"] == "123,00 €"
        assert data["currency"] == "EUR"
        assert data["transaction_number"].startswith("TRX")
        assert data["reference"].startswith("REF")

    async def test_amount_including_vat_is_split(self, create_transaction):
        data = await create_transaction("income", 12300, amount_includes_vat=True)
        assert (data["amount"], data["vat_amount"], data["total_amount"]) == (10000, 2300, 12300)

    async def test_explicit_exempt_profile(self, session, create_transaction):
        exempt = (await session.execute(select(VatProfile).where(VatProfile.code == "ISENTO"))).scalars().first()
        data = await create_transaction("income", 10000, vat_profile_id=exempt.id)
        assert data["vat_amount"] == 0
        assert data["vat_profile_id"] == exempt.id

    async def test_expenses_carry_no_vat(self, create_transaction):
        data = await create_transaction("expense", 5000)
        assert data["vat_amount"] == 0
        assert data["vat_profile_id"] is None
        assert data["total_amount"] == 5000

    async def test_unknown_vat_profile(self, client, headers, vessel_url, categories):
        response = await client.post(f"{vessel_url}/transactions/", json={
            "type": "income",
            "category_id": categories["Fretamento"],
            "amount": 100,
            "vat_profile_id": 999,
            "transaction_date": "2026-03-01",
        }, headers=headers)
        assert response.status_code == 400


class TestTransactions:
    async def test_amount_from_units(self, create_transaction):
        data = await create_transaction("expense", None, amount_per_unit=250, quantity="4.5")
        assert data["amount"] == 1125
        assert data["quantity"] == 4.5

    async def test_amount_is_required(self, client, headers, vessel_url, categories):
        response = await client.post(f"{vessel_url}/transactions/", json={
            "type": "expense", "category_id": categories["Combustível"], "transaction_date": "2026-03-01",
        }, headers=headers)
        assert response.status_code == 422

    async def test_category_type_must_match(self, client, headers, vessel_url, categories):
        response = await client.post(f"{vessel_url}/transactions/", json={
            "type": "income",
            "category_id": categories["Combustível"],
            "amount": 100,
            "transaction_date": "2026-03-01",
        }, headers=headers)
        assert response.status_code == 400

    async def test_numbers_are_sequential(self, create_transaction):
        first = await create_transaction("expense", 100)
        second = await create_transaction("expense", 200)
        assert int(second["transaction_number"][-6:]) == int(first["transaction_number"][-6:]) + 1

    async def test_list_totals_and_filters(self, client, headers, vessel_url, create_transaction):
        await create_transaction("income", 10000, transaction_date="2026-02-10")
        await create_transaction("expense", 3000, transaction_date="2026-02-11")
        await create_transaction("expense", 700, transaction_date="2026-03-01")

        response = await client.get(f"{vessel_url}/transactions/", params={"month": 2, "year": 2026}, headers=headers)
        body = response.json()
        assert body["total"] == 2
        assert body["total_income"] == 12300
        assert body["total_expenses"] == 3000

        response = await client.get(f"{vessel_url}/transactions/", params={"type": "expense"}, headers=headers)
        assert response.json()["total"] == 2

    async def test_history(self, client, headers, vessel_url, create_transaction):
        await create_transaction("expense", 3000, transaction_date="2026-02-11")
        await create_transaction("expense", 700, transaction_date="2026-03-01")
        response = await client.get(f"{vessel_url}/transactions/history", headers=headers)
        assert [(h["year"], h["month"], h["total_expenses"]) for h in response.json()] == [
            (2026, 3, 700), (2026, 2, 3000),
        ]

    async def test_update_recomputes_vat(self, client, headers, vessel_url, create_transaction):
        data = await create_transaction("income", 10000)
        response = await client.put(
            f"{vessel_url}/transactions/{data['id']}", json={"amount": 20000}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["vat_amount"] == 4600
        assert response.json()["total_amount"] == 24600

    async def test_update_date_moves_month(self, client, headers, vessel_url, create_transaction):
        data = await create_transaction("expense", 100, transaction_date="2026-01-31")
        response = await client.put(
            f"{vessel_url}/transactions/{data['id']}", json={"transaction_date": "2026-04-02"}, headers=headers
        )
        assert (response.json()["transaction_month"], response.json()["transaction_year"]) == (4, 2026)

    async def test_delete_moves_to_recycle_bin(self, client, headers, vessel_url, create_transaction):
        data = await create_transaction("expense", 100)
        response = await client.delete(f"{vessel_url}/transactions/{data['id']}", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"{vessel_url}/transactions/{data['id']}", headers=headers)
        assert response.status_code == 404
        response = await client.get(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.json()["counts"]["transaction"] == 1

    async def test_other_vessel_transactions_are_hidden(self, client, headers, vessel_url, create_transaction):
        data = await create_transaction("expense", 100)
        response = await client.post(
            "/api/v1/vessels/", json={"name": "Segundo", "registration_number": "PT-2"}, headers=headers
        )
        other_id = response.json()["id"]
        response = await client.get(f"/api/v1/vessels/{other_id}/transactions/{data['id']}", headers=headers)
        assert response.status_code == 404
