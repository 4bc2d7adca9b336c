from datetime import date, timedelta


async def test_generate_due_occurrences(client, headers, vessel_url, categories):
    start = date.today() - timedelta(days=14)
    response = await client.post(f"{vessel_url}/recurring-transactions/", json={
        "name": "Seguro semanal",
        "type": "expense",
        "category_id": categories["Seguros"],
        "amount": 2500,
        "frequency": "weekly",
        "start_date": start.isoformat(),
    }, headers=headers)
    assert response.status_code == 200
    template = response.json()
    assert template["next_occurrence_date"] == start.isoformat()

    response = await client.post(f"{vessel_url}/recurring-transactions/generate", headers=headers)
    assert response.json()["generated"] == 3

    response = await client.get(f"{vessel_url}/transactions/", headers=headers)
    body = response.json()
    assert body["total"] == 3
    assert body["total_expenses"] == 7500
    assert {t["recurring_transaction_id"] for t in body["data"]} == {template["id"]}

    # Nothing left to generate today
    response = await client.post(f"{vessel_url}/recurring-transactions/generate", headers=headers)
    assert response.json()["generated"] == 0


async def test_end_date_completes_template(client, headers, vessel_url, categories):
    start = date.today() - timedelta(days=40)
    response = await client.post(f"{vessel_url}/recurring-transactions/", json={
        "name": "Licença",
        "type": "expense",
        "category_id": categories["Taxas e Licenças"],
        "amount": 1000,
        "frequency": "monthly",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=1)).isoformat(),
    }, headers=headers)
    template_id = response.json()["id"]

    response = await client.post(f"{vessel_url}/recurring-transactions/generate", headers=headers)
    assert response.json()["generated"] == 1

    response = await client.get(f"{vessel_url}/recurring-transactions/{template_id}", headers=headers)
    assert response.json()["status"] == "completed"


async def test_failing_template_does_not_block_others(client, headers, vessel_url, categories, session):
    from vesselbook.models import VatProfile

    response = await client.get("/api/v1/vat-profiles/", params={"country_code": "PT"}, headers=headers)
    vat_profile_id = response.json()[0]["id"]
    start = date.today() - timedelta(days=2)
    response = await client.post(f"{vessel_url}/recurring-transactions/", json={
        "name": "Fretamento diário",
        "type": "income",
        "category_id": categories["Fretamento"],
        "amount": 10000,
        "frequency": "daily",
        "start_date": start.isoformat(),
        "vat_profile_id": vat_profile_id,
    }, headers=headers)
    broken = response.json()
    response = await client.post(f"{vessel_url}/recurring-transactions/", json={
        "name": "Gasóleo diário",
        "type": "expense",
        "category_id": categories["Combustível"],
        "amount": 3000,
        "frequency": "daily",
        "start_date": start.isoformat(),
    }, headers=headers)
    healthy = response.json()

    profile = await session.get(VatProfile, vat_profile_id)
    profile.is_active = False
    await session.commit()

    response = await client.post(f"{vessel_url}/recurring-transactions/generate", headers=headers)
    assert response.status_code == 200
    assert response.json()["generated"] == 3

    response = await client.get(f"{vessel_url}/transactions/", headers=headers)
    assert {t["recurring_transaction_id"] for t in response.json()["data"]} == {healthy["id"]}

    response = await client.get(f"{vessel_url}/recurring-transactions/{broken['id']}", headers=headers)
    assert response.json()["next_occurrence_date"] == start.isoformat()
    assert response.json()["last_generated_date"] is None
