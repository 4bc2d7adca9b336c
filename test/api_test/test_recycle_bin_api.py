from sqlalchemy import select, func

from vesselbook.models import (
    MareaCrew, MareaDistributionItem, MareaDistributionProfileItem, MareaQuantityReturn, Transaction,
)


async def rows(session, model, *conditions) -> int:
    return (await session.execute(select(func.count()).select_from(model).where(*conditions))).scalar()


class TestRecycleBin:
    async def test_restore_and_force_delete(self, client, headers, vessel_url, create_transaction):
        kept = await create_transaction("expense", 100)
        dropped = await create_transaction("expense", 200)
        for t in (kept, dropped):
            await client.delete(f"{vessel_url}/transactions/{t['id']}", headers=headers)

        response = await client.get(f"{vessel_url}/recycle-bin/", params={"type": "transaction"}, headers=headers)
        body = response.json()
        assert body["total"] == 2
        assert {item["label"] for item in body["data"]} == {kept["transaction_number"], dropped["transaction_number"]}

        response = await client.post(f"{vessel_url}/recycle-bin/transaction/{kept['id']}/restore", headers=headers)
        assert response.status_code == 200
        response = await client.delete(f"{vessel_url}/recycle-bin/transaction/{dropped['id']}", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"{vessel_url}/transactions/", headers=headers)
        assert [t["id"] for t in response.json()["data"]] == [kept["id"]]
        response = await client.get(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.json()["total"] == 0

    async def test_empty(self, client, headers, vessel_url, create_transaction):
        marea = (await client.post(f"{vessel_url}/mareas/", json={}, headers=headers)).json()
        await create_transaction("expense", 100, marea_id=marea["id"])
        loose = await create_transaction("expense", 100)
        await client.delete(f"{vessel_url}/mareas/{marea['id']}", headers=headers)
        await client.delete(f"{vessel_url}/transactions/{loose['id']}", headers=headers)

        response = await client.delete(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.status_code == 200
        assert response.json()["deleted"] == 2

        response = await client.get(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.json()["total"] == 0
        response = await client.get(f"{vessel_url}/transactions/", headers=headers)
        assert response.json()["total"] == 0

    async def test_unknown_type_and_missing_item(self, client, headers, vessel_url):
        response = await client.post(f"{vessel_url}/recycle-bin/boat/1/restore", headers=headers)
        assert response.status_code == 404
        response = await client.post(f"{vessel_url}/recycle-bin/transaction/1/restore", headers=headers)
        assert response.status_code == 404

    async def test_supervisor_cannot_destroy(self, client, headers, vessel_url, make_user, create_transaction):
        t = await create_transaction("expense", 100)
        await client.delete(f"{vessel_url}/transactions/{t['id']}", headers=headers)
        supervisor = await make_user("Ana", "ana@fleet.pt")
        await client.put(
            f"{vessel_url}/members", json={"user_id": supervisor.id, "role": "supervisor"}, headers=headers
        )
        supervisor_headers = {"X-User-Id": str(supervisor.id)}

        response = await client.delete(f"{vessel_url}/recycle-bin/transaction/{t['id']}", headers=supervisor_headers)
        assert response.status_code == 403
        response = await client.post(
            f"{vessel_url}/recycle-bin/transaction/{t['id']}/restore", headers=supervisor_headers
        )
        assert response.status_code == 200


class TestCascades:
    async def test_destroying_a_marea_removes_its_rows(self, client, headers, vessel_url, create_transaction,
                                                       session):
        marea = (await client.post(f"{vessel_url}/mareas/", json={}, headers=headers)).json()
        url = f"{vessel_url}/mareas/{marea['id']}"
        transaction = await create_transaction("expense", 100, marea_id=marea["id"])
        member = (await client.post(f"{vessel_url}/crew/", json={
            "name": "Manuel Santos", "email": "manuel@fleet.pt",
        }, headers=headers)).json()
        await client.post(f"{url}/crew", json={"user_id": member["id"]}, headers=headers)
        await client.post(f"{url}/quantity-returns", json={"name": "Pescada", "quantity": "10"}, headers=headers)
        await client.put(f"{url}/distribution", json=[
            {"order_index": 0, "name": "Receita", "value_type": "base_total_income"},
        ], headers=headers)

        await client.delete(url, headers=headers)
        response = await client.delete(f"{vessel_url}/recycle-bin/marea/{marea['id']}", headers=headers)
        assert response.status_code == 200

        assert await rows(session, Transaction, Transaction.id == transaction["id"]) == 0
        assert await rows(session, MareaCrew, MareaCrew.marea_id == marea["id"]) == 0
        assert await rows(session, MareaQuantityReturn, MareaQuantityReturn.marea_id == marea["id"]) == 0
        assert await rows(session, MareaDistributionItem, MareaDistributionItem.marea_id == marea["id"]) == 0
        response = await client.get(f"{vessel_url}/recycle-bin/", headers=headers)
        assert response.json()["total"] == 0

    async def test_destroying_a_profile_unlinks_mareas(self, client, headers, vessel_url, session):
        response = await client.post(f"{vessel_url}/distribution-profiles/", json={
            "name": "Partilha",
            "items": [{"order_index": 0, "name": "Receita", "value_type": "base_total_income"}],
        }, headers=headers)
        profile = response.json()
        marea = (await client.post(f"{vessel_url}/mareas/", json={
            "distribution_profile_id": profile["id"], "use_calculation": True,
        }, headers=headers)).json()

        await client.delete(f"{vessel_url}/mareas/{marea['id']}", headers=headers)
        response = await client.delete(f"{vessel_url}/distribution-profiles/{profile['id']}", headers=headers)
        assert response.status_code == 200
        response = await client.delete(
            f"{vessel_url}/recycle-bin/distribution_profile/{profile['id']}", headers=headers
        )
        assert response.status_code == 200

        assert await rows(
            session, MareaDistributionProfileItem,
            MareaDistributionProfileItem.distribution_profile_id == profile["id"],
        ) == 0
        await client.post(f"{vessel_url}/recycle-bin/marea/{marea['id']}/restore", headers=headers)
        response = await client.get(f"{vessel_url}/mareas/{marea['id']}", headers=headers)
        assert response.json()["distribution_profile_id"] is None

    async def test_restoring_a_maintenance_restores_its_transactions(self, client, headers, vessel_url,
                                                                      create_transaction):
        fuel = await create_transaction("expense", 4000)
        response = await client.post(f"{vessel_url}/maintenances/", json={
            "name": "Motor", "start_date": "2026-02-01", "transaction_ids": [fuel["id"]],
        }, headers=headers)
        maintenance_id = response.json()["id"]
        await client.delete(f"{vessel_url}/maintenances/{maintenance_id}", headers=headers)
        response = await client.get(f"{vessel_url}/transactions/{fuel['id']}", headers=headers)
        assert response.status_code == 404

        response = await client.post(
            f"{vessel_url}/recycle-bin/maintenance/{maintenance_id}/restore", headers=headers
        )
        assert response.status_code == 200
        response = await client.get(f"{vessel_url}/transactions/{fuel['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["maintenance_id"] == maintenance_id
