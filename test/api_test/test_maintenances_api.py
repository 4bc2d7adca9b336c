from datetime import date


class TestMaintenances:
    async def test_create_with_transactions(self, client, headers, vessel_url, create_transaction):
        fuel = await create_transaction("expense", 4000)
        paint = await create_transaction("expense", 1500)
        response = await client.post(f"{vessel_url}/maintenances/", json={
            "name": "Docagem anual", "start_date": "2026-02-01", "transaction_ids": [fuel["id"], paint["id"]],
        }, headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["maintenance_number"] == f"MANT{date.today().year}000001"
        assert body["status"] == "open"
        assert body["total_expenses"] == 5500
        assert len(body["transactions"]) == 2

    async def test_unknown_transaction(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/maintenances/", json={
            "name": "Docagem", "start_date": "2026-02-01", "transaction_ids": [404],
        }, headers=headers)
        assert response.status_code == 404

    async def test_finalize_and_cancel(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/maintenances/", json={
            "name": "Motor", "start_date": "2026-02-01",
        }, headers=headers)
        url = f"{vessel_url}/maintenances/{response.json()['id']}"

        response = await client.post(f"{url}/finalize", json={"end_date": "2026-01-01"}, headers=headers)
        assert response.status_code == 400

        response = await client.post(f"{url}/finalize", json={"end_date": "2026-02-20"}, headers=headers)
        assert response.json()["status"] == "closed"

        response = await client.post(f"{url}/cancel", headers=headers)
        assert response.status_code == 400

    async def test_delete_trashes_transactions(self, client, headers, vessel_url, create_transaction):
        fuel = await create_transaction("expense", 4000)
        response = await client.post(f"{vessel_url}/maintenances/", json={
            "name": "Motor", "start_date": "2026-02-01", "transaction_ids": [fuel["id"]],
        }, headers=headers)
        response = await client.delete(f"{vessel_url}/maintenances/{response.json()['id']}", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.json()["counts"]["maintenance"] == 1
        assert response.json()["counts"]["transaction"] == 1
