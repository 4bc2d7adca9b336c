class TestCategories:
    async def test_vessel_category(self, client, headers, vessel_url, categories):
        response = await client.post(
            f"{vessel_url}/categories/", json={"name": "Isco", "type": "expense"}, headers=headers
        )
        assert response.status_code == 200
        category = response.json()
        assert category["is_system"] is False

        response = await client.get(f"{vessel_url}/categories/", params={"type": "expense"}, headers=headers)
        names = [c["name"] for c in response.json()]
        assert "Isco" in names and "Combustível" in names

        response = await client.post(
            f"{vessel_url}/categories/", json={"name": "Isco", "type": "expense"}, headers=headers
        )
        assert response.status_code == 400

        response = await client.delete(f"{vessel_url}/categories/{category['id']}", headers=headers)
        assert response.status_code == 200

    async def test_system_categories_cannot_be_deleted(self, client, headers, vessel_url, categories):
        response = await client.delete(f"{vessel_url}/categories/{categories['Combustível']}", headers=headers)
        assert response.status_code == 400


async def test_vat_profiles_are_global(client, headers, vessel):
    response = await client.get("/api/v1/vat-profiles/", headers=headers)
    assert response.status_code == 200
    profiles = response.json()
    assert len(profiles) == 6
    assert [p["name"] for p in profiles if p["is_default"]] == ["IVA Normal"]


class TestSuppliers:
    async def test_crud_and_recycle_bin(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/suppliers/", json={
            "company_name": "Gasóleos do Norte", "email": "geral@gasoleos.pt",
        }, headers=headers)
        supplier = response.json()

        response = await client.put(
            f"{vessel_url}/suppliers/{supplier['id']}", json={"phone": "+351 220 000 000"}, headers=headers
        )
        assert response.json()["phone"] == "+351 220 000 000"

        response = await client.delete(f"{vessel_url}/suppliers/{supplier['id']}", headers=headers)
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/suppliers/", headers=headers)
        assert response.json()["total"] == 0

        response = await client.post(
            f"{vessel_url}/recycle-bin/supplier/{supplier['id']}/restore", headers=headers
        )
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/suppliers/{supplier['id']}", headers=headers)
        assert response.status_code == 200

    async def test_invalid_email(self, client, headers, vessel_url):
        response = await client.post(
            f"{vessel_url}/suppliers/", json={"company_name": "X", "email": "not-an-email"}, headers=headers
        )
        assert response.status_code == 422


class TestBankAccounts:
    async def test_account_in_use_cannot_be_deleted(self, client, headers, vessel_url, create_transaction):
        response = await client.post(
            f"{vessel_url}/bank-accounts/", json={"name": "Conta à ordem", "iban": "PT50000201231234567890154"},
            headers=headers,
        )
        account = response.json()
        await create_transaction("expense", 100, bank_account_id=account["id"])

        response = await client.delete(f"{vessel_url}/bank-accounts/{account['id']}", headers=headers)
        assert response.status_code == 400


class TestCrew:
    async def test_position_with_members_cannot_be_deleted(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/crew-positions/", json={"name": "Mestre"}, headers=headers)
        position = response.json()
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt", "position_id": position["id"],
        }, headers=headers)
        member = response.json()
        assert member["position_name"] == "Mestre"
        assert member["user_type"] == "employee_of_vessel"

        response = await client.delete(f"{vessel_url}/crew-positions/{position['id']}", headers=headers)
        assert response.status_code == 400

    async def test_salary(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt",
            "salary": {"compensation_type": "fixed", "fixed_amount": 120000},
        }, headers=headers)
        member = response.json()
        assert member["salary"]["fixed_amount"] == 120000

        response = await client.put(
            f"{vessel_url}/crew/{member['id']}/salary",
            json={"compensation_type": "percentage"},
            headers=headers,
        )
        assert response.status_code == 422

    async def test_remove_member(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt",
        }, headers=headers)
        member_id = response.json()["id"]
        response = await client.delete(f"{vessel_url}/crew/{member_id}", headers=headers)
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/crew/{member_id}", headers=headers)
        assert response.status_code == 404
