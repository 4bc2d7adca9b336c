from datetime import date


class TestFinancialReport:
    async def test_month_summary(self, client, headers, vessel_url, create_transaction):
        await create_transaction("income", 10000, transaction_date="2026-03-05")
        await create_transaction("expense", 2000, transaction_date="2026-03-06")
        await create_transaction("expense", 999, transaction_date="2026-03-07", status="pending")
        await create_transaction("expense", 1000, transaction_date="2026-02-10")

        response = await client.get(f"{vessel_url}/reports/financial/2026/3", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["month_label"] == "March"
        assert body["currency"] == "EUR"
        summary = body["summary"]
        assert summary["total_income"] == 12300
        assert summary["total_expenses"] == 2000
        assert summary["net_balance"] == 10300
        assert summary["transaction_count"] == 2
        assert summary["expenses_change"] == 100.0
        assert {row["category_name"] for row in body["category_breakdown"]} == {"Fretamento", "Combustível"}
        assert [row["date"] for row in body["daily_breakdown"]] == ["2026-03-05", "2026-03-06"]

    async def test_index_lists_months_newest_first(self, client, headers, vessel_url, create_transaction):
        await create_transaction("expense", 1000, transaction_date="2026-02-10")
        await create_transaction("expense", 500, transaction_date="2026-03-01")
        response = await client.get(f"{vessel_url}/reports/financial", headers=headers)
        assert [(m["month"], m["total_expenses"]) for m in response.json()] == [(3, 500), (2, 1000)]

    async def test_invalid_period(self, client, headers, vessel_url):
        response = await client.get(f"{vessel_url}/reports/financial/2026/13", headers=headers)
        assert response.status_code == 404

    async def test_mareas_of_the_month(self, client, headers, vessel_url, create_transaction):
        response = await client.post(f"{vessel_url}/mareas/", json={"name": "Março"}, headers=headers)
        marea = response.json()
        await client.post(
            f"{vessel_url}/mareas/{marea['id']}/at-sea", json={"effective_date": "2026-03-02"}, headers=headers
        )
        await create_transaction("income", 10000, transaction_date="2026-03-05", marea_id=marea["id"])

        response = await client.get(f"{vessel_url}/reports/financial/2026/3", headers=headers)
        rows = response.json()["mareas"]
        assert [r["marea_number"] for r in rows] == [marea["marea_number"]]
        assert rows[0]["total_income"] == 12300

    async def test_requires_reports_permission(self, client, headers, vessel_url, make_user):
        reader = await make_user("Ana", "ana@fleet.pt")
        await client.put(f"{vessel_url}/members", json={"user_id": reader.id, "role": "normal"}, headers=headers)
        response = await client.get(f"{vessel_url}/reports/financial", headers={"X-User-Id": str(reader.id)})
        assert response.status_code == 403


class TestVatReport:
    async def test_vat_month(self, client, headers, vessel_url, create_transaction):
        await create_transaction("income", 10000, transaction_date="2026-03-05")
        await create_transaction("income", 20000, transaction_date="2026-03-20")
        await create_transaction("expense", 5000, transaction_date="2026-03-21")

        response = await client.get(f"{vessel_url}/reports/vat/2026/3", headers=headers)
        body = response.json()
        assert body["summary"]["base_amount"] == 30000
        assert body["summary"]["vat_amount"] == 6900
        assert body["summary"]["count"] == 2
        assert len(body["by_vat_profile"]) == 1
        assert body["by_vat_profile"][0]["percentage"] == 23.0
        assert len(body["by_vat_profile"][0]["transactions"]) == 2

        response = await client.get(f"{vessel_url}/reports/vat", headers=headers)
        assert response.json() == [
            {"year": 2026, "month": 3, "month_label": "March", "count": 2, "total_vat": 6900},
        ]


class TestDashboard:
    async def test_dashboard(self, client, headers, vessel_url, create_transaction):
        response = await client.post(f"{vessel_url}/mareas/", json={}, headers=headers)
        at_sea = response.json()
        await client.post(f"{vessel_url}/mareas/{at_sea['id']}/at-sea", headers=headers)
        await client.post(f"{vessel_url}/mareas/", json={}, headers=headers)
        await create_transaction("expense", 700, transaction_date=date.today().isoformat())

        response = await client.get(f"{vessel_url}/dashboard/", headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["is_at_sea"] is True
        assert body["active_marea"]["id"] == at_sea["id"]
        assert len(body["preparing_mareas"]) == 1
        assert body["current_month"]["total_expenses"] == 700
        assert len(body["last_six_months"]) == 6
        assert body["last_six_months"][-1]["month"] == date.today().month
        assert body["recent_transactions"][0]["total_amount"] == 700
