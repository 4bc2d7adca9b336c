from datetime import date

import pytest


@pytest.fixture
def create_marea(client, headers, vessel_url):
    async def _create(**payload) -> dict:
        response = await client.post(f"{vessel_url}/mareas/", json=payload, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _create


class TestMareaCrud:
    async def test_numbers_are_generated(self, create_marea):
        first = await create_marea(name="Janeiro")
        second = await create_marea()
        year = date.today().year
        assert first["marea_number"] == f"MARE{year}000001"
        assert second["marea_number"] == f"MARE{year}000002"
        assert first["status"] == "preparing"
        assert first["currency"] == "EUR"
        assert first["house_of_zeros"] == 2

    async def test_next_number_preview(self, client, headers, vessel_url, create_marea):
        year = date.today().year
        response = await client.get(f"{vessel_url}/mareas/next-number", headers=headers)
        assert response.status_code == 200
        assert response.json()["marea_number"] == f"MARE{year}000001"

        await create_marea()
        response = await client.get(f"{vessel_url}/mareas/next-number", headers=headers)
        assert response.json()["marea_number"] == f"MARE{year}000002"

    async def test_starting_number_from_settings(self, client, headers, vessel_url, create_marea):
        await client.put(f"{vessel_url}/settings/", json={"starting_marea_number": 120}, headers=headers)
        marea = await create_marea()
        assert marea["marea_number"].endswith("000120")

    async def test_explicit_number_must_be_unique(self, client, headers, vessel_url, create_marea):
        await create_marea(marea_number="M-01")
        response = await client.post(f"{vessel_url}/mareas/", json={"marea_number": "M-01"}, headers=headers)
        assert response.status_code == 400

    async def test_estimated_dates_are_validated(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/mareas/", json={
            "estimated_departure_date": "2026-05-10", "estimated_return_date": "2026-05-01",
        }, headers=headers)
        assert response.status_code == 422

    async def test_detail_totals(self, create_marea, create_transaction, client, headers, vessel_url):
        marea = await create_marea()
        await create_transaction("income", 10000, marea_id=marea["id"])
        await create_transaction("expense", 2000, marea_id=marea["id"])

        response = await client.get(f"{vessel_url}/mareas/{marea['id']}", headers=headers)
        body = response.json()
        assert (body["total_income"], body["total_expenses"], body["net_result"]) == (12300, 2000, 10300)
        assert len(body["transactions"]) == 2
        assert body["distribution"]["final_result"] == 10300

    async def test_list_filters_by_status(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        await create_marea()
        await client.post(f"{vessel_url}/mareas/{marea['id']}/cancel", headers=headers)

        response = await client.get(f"{vessel_url}/mareas/", params={"status": "preparing"}, headers=headers)
        assert response.json()["total"] == 1

    async def test_delete_trashes_transactions_and_restore_brings_them_back(
        self, create_marea, create_transaction, client, headers, vessel_url
    ):
        marea = await create_marea()
        transaction = await create_transaction("expense", 500, marea_id=marea["id"])

        response = await client.delete(f"{vessel_url}/mareas/{marea['id']}", headers=headers)
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/transactions/{transaction['id']}", headers=headers)
        assert response.status_code == 404

        response = await client.post(f"{vessel_url}/recycle-bin/marea/{marea['id']}/restore", headers=headers)
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/transactions/{transaction['id']}", headers=headers)
        assert response.status_code == 200


class TestLifecycle:
    async def test_full_trip(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.post(f"{url}/at-sea", json={"effective_date": "2026-04-01"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "at_sea"
        assert response.json()["actual_departure_date"] == "2026-04-01"

        response = await client.post(f"{url}/returned", headers=headers)
        assert response.json()["status"] == "returned"
        assert response.json()["actual_return_date"] == date.today().isoformat()

        response = await client.post(f"{url}/close", headers=headers)
        assert response.json()["status"] == "closed"
        assert response.json()["closed_at"] is not None

    async def test_invalid_transitions(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.post(f"{url}/returned", headers=headers)
        assert response.status_code == 400

        await client.post(f"{url}/close", headers=headers)
        response = await client.post(f"{url}/cancel", headers=headers)
        assert response.status_code == 400

    async def test_closed_marea_is_locked(self, create_marea, create_transaction, client, headers, vessel_url,
                                          categories):
        marea = await create_marea()
        attached = await create_transaction("expense", 100, marea_id=marea["id"])
        loose = await create_transaction("expense", 100)
        url = f"{vessel_url}/mareas/{marea['id']}"
        await client.post(f"{url}/close", headers=headers)

        response = await client.post(f"{url}/transactions", json={"transaction_id": loose["id"]}, headers=headers)
        assert response.status_code == 400
        response = await client.put(
            f"{vessel_url}/transactions/{attached['id']}", json={"amount": 5}, headers=headers
        )
        assert response.status_code == 400
        response = await client.post(f"{vessel_url}/transactions/", json={
            "type": "expense",
            "category_id": categories["Combustível"],
            "amount": 100,
            "transaction_date": "2026-04-01",
            "marea_id": marea["id"],
        }, headers=headers)
        assert response.status_code == 400

    async def test_closed_marea_cannot_be_edited(self, create_marea, create_transaction, client, headers,
                                                 vessel_url):
        response = await client.post(f"{vessel_url}/distribution-profiles/", json={
            "name": "Metade",
            "items": [
                {"order_index": 0, "name": "Receita", "value_type": "base_total_income"},
                {"order_index": 1, "name": "Metade", "value_type": "percentage_of_income",
                 "value_amount": "50"},
            ],
        }, headers=headers)
        profile = response.json()
        marea = await create_marea()
        await create_transaction("income", 10000, marea_id=marea["id"])
        url = f"{vessel_url}/mareas/{marea['id']}"
        await client.post(f"{url}/close", headers=headers)

        response = await client.put(url, json={
            "distribution_profile_id": profile["id"], "use_calculation": True,
        }, headers=headers)
        assert response.status_code == 400

        response = await client.get(url, headers=headers)
        body = response.json()
        assert body["distribution_profile_id"] is None
        assert body["distribution"]["final_result"] == 12300

    async def test_update_checks_estimated_dates(self, create_marea, client, headers, vessel_url):
        marea = await create_marea(estimated_departure_date="2026-05-10")
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.put(url, json={"estimated_return_date": "2026-05-01"}, headers=headers)
        assert response.status_code == 400
        response = await client.put(url, json={
            "estimated_departure_date": "2026-06-10", "estimated_return_date": "2026-06-01",
        }, headers=headers)
        assert response.status_code == 422
        response = await client.put(url, json={"estimated_return_date": "2026-05-20"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["estimated_return_date"] == "2026-05-20"

    async def test_status_changes_need_permission(self, create_marea, client, headers, vessel_url, make_user):
        marea = await create_marea()
        moderator = await make_user("Ana", "ana@fleet.pt")
        await client.put(f"{vessel_url}/members", json={"user_id": moderator.id, "role": "moderator"}, headers=headers)
        response = await client.post(
            f"{vessel_url}/mareas/{marea['id']}/at-sea", headers={"X-User-Id": str(moderator.id)}
        )
        assert response.status_code == 403


class TestMembers:
    async def test_attach_and_detach_transactions(self, create_marea, create_transaction, client, headers,
                                                  vessel_url):
        marea = await create_marea()
        loose = await create_transaction("expense", 800)
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.get(f"{url}/available-transactions", headers=headers)
        assert [t["id"] for t in response.json()] == [loose["id"]]

        response = await client.post(f"{url}/transactions", json={"transaction_id": loose["id"]}, headers=headers)
        assert response.json()["total_expenses"] == 800

        response = await client.delete(f"{url}/transactions/{loose['id']}", headers=headers)
        assert response.json()["total_expenses"] == 0
        response = await client.get(f"{vessel_url}/transactions/{loose['id']}", headers=headers)
        assert response.json()["marea_id"] is None

    async def test_crew(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt",
        }, headers=headers)
        member = response.json()
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.get(f"{url}/available-crew", headers=headers)
        assert [c["id"] for c in response.json()] == [member["id"]]

        response = await client.post(f"{url}/crew", json={"user_id": member["id"]}, headers=headers)
        assert response.json()["crew"][0]["name"] == "Manuel Santos"

        response = await client.post(f"{url}/crew", json={"user_id": member["id"]}, headers=headers)
        assert response.status_code == 400

        response = await client.get(f"{url}/available-crew", headers=headers)
        assert response.json() == []

        response = await client.delete(f"{url}/crew/{member['id']}", headers=headers)
        assert response.json()["crew"] == []

    async def test_quantity_returns(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        url = f"{vessel_url}/mareas/{marea['id']}"
        response = await client.post(
            f"{url}/quantity-returns", json={"name": "Pescada", "quantity": "1250.5"}, headers=headers
        )
        rows = response.json()["quantity_returns"]
        assert rows[0]["quantity"] == 1250.5

        response = await client.delete(f"{url}/quantity-returns/{rows[0]['id']}", headers=headers)
        assert response.json()["quantity_returns"] == []


class TestSalary:
    async def test_percentage_salary_payment(self, create_marea, create_transaction, client, headers, vessel_url):
        marea = await create_marea()
        await create_transaction("income", 10000, marea_id=marea["id"])
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos",
            "email": "manuel@fleet.pt",
            "salary": {"compensation_type": "percentage", "percentage": "10"},
        }, headers=headers)
        member = response.json()
        url = f"{vessel_url}/mareas/{marea['id']}"

        response = await client.get(f"{url}/salary/{member['id']}", headers=headers)
        assert response.json()["amount"] == 1230
        assert response.json()["formatted_amount"] == "12,30 €"

        response = await client.post(f"{url}/salary", json={"user_id": member["id"]}, headers=headers)
        assert response.status_code == 200
        payment = response.json()
        assert payment["type"] == "expense"
        assert payment["total_amount"] == 1230
        assert payment["category_name"] == "Salários"
        assert payment["marea_id"] == marea["id"]
        assert payment["crew_member_id"] == member["id"]

    async def test_nothing_to_pay(self, create_marea, client, headers, vessel_url):
        marea = await create_marea()
        response = await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt",
        }, headers=headers)
        response = await client.post(
            f"{vessel_url}/mareas/{marea['id']}/salary", json={"user_id": response.json()["id"]}, headers=headers
        )
        assert response.status_code == 400
