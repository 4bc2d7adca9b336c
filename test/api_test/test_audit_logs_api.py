class TestAuditLogs:
    async def test_changes_are_logged(self, client, headers, vessel_url, create_transaction, owner):
        data = await create_transaction("expense", 100)
        await client.put(
            f"{vessel_url}/transactions/{data['id']}", json={"description": "Gasóleo"}, headers=headers
        )

        response = await client.get(f"{vessel_url}/audit-logs/", params={"model_type": "Transaction"}, headers=headers)
        body = response.json()
        assert body["total"] == 2
        update, create = body["data"]
        assert create["action"] == "create"
        assert update["action"] == "update"
        assert update["action_display"] == "Updated"
        assert update["user_name"] == owner.name
        assert update["changes"]["description"]["new"] == "Gasóleo"

    async def test_filters(self, client, headers, vessel_url, create_transaction):
        await create_transaction("expense", 100)
        response = await client.get(f"{vessel_url}/audit-logs/", params={"action": "create"}, headers=headers)
        assert {log["model_type"] for log in response.json()["data"]} == {"Vessel", "Transaction"}

        response = await client.get(f"{vessel_url}/audit-logs/", params={"search": "Joaquim"}, headers=headers)
        assert response.json()["total"] == 2

        response = await client.get(f"{vessel_url}/audit-logs/recent", params={"limit": 1}, headers=headers)
        assert len(response.json()) == 1

    async def test_moderators_cannot_see_logs(self, client, headers, vessel_url, make_user):
        moderator = await make_user("Ana", "ana@fleet.pt")
        await client.put(
            f"{vessel_url}/members", json={"user_id": moderator.id, "role": "moderator"}, headers=headers
        )
        response = await client.get(f"{vessel_url}/audit-logs/", headers={"X-User-Id": str(moderator.id)})
        assert response.status_code == 403
