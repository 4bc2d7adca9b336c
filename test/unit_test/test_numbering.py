from datetime import date

import pytest

from vesselbook.models import Marea, Transaction, VesselSetting
from vesselbook.services import numbering


class TestSequenceParsing:
    def test_parse_sequence(self):
        assert numbering.parse_sequence("TRX2026000042", "TRX2026") == 42
        assert numbering.parse_sequence("MARE2025000007", "MARE") == 7

    def test_parse_sequence_other_prefix(self):
        assert numbering.parse_sequence("REF202601000001", "TRX") is None
        assert numbering.parse_sequence(None, "TRX") is None
        assert numbering.parse_sequence("TRXabc", "TRX") is None

    def test_format_number_pads(self):
        assert numbering.format_number("MANT2026", 12) == "MANT2026000012"


@pytest.fixture
async def vessel_id(session, make_user):
    from vesselbook.models import Vessel

    owner = await make_user("Rui Costa", "rui@fleet.pt")
    vessel = Vessel(name="Estrela do Mar", registration_number="PT-PN-77", owner_id=owner.id)
    session.add(vessel)
    await session.commit()
    return vessel.id


class TestMareaNumbers:
    async def test_first_marea_uses_starting_number(self, session, vessel_id):
        session.add(VesselSetting(vessel_id=vessel_id, starting_marea_number=40))
        await session.commit()
        number = await numbering.next_marea_number(session, vessel_id, today=date(2026, 3, 1))
        assert number == "MARE2026000040"

    async def test_sequence_continues_across_years(self, session, vessel_id):
        session.add(Marea(vessel_id=vessel_id, marea_number="MARE2025000009", status="closed"))
        await session.commit()
        number = await numbering.next_marea_number(session, vessel_id, today=date(2026, 1, 2))
        assert number == "MARE2026000010"

    async def test_taken_numbers_are_skipped(self, session, vessel_id):
        session.add(Marea(vessel_id=vessel_id, marea_number="MARE2026000002"))
        await session.flush()
        session.add(Marea(vessel_id=vessel_id, marea_number="MARE2026000001"))
        await session.commit()
        number = await numbering.next_marea_number(session, vessel_id, today=date(2026, 5, 5))
        assert number == "MARE2026000003"

    async def test_trashed_marea_frees_its_number(self, session, vessel_id):
        marea = Marea(vessel_id=vessel_id, marea_number="MARE2026000001")
        marea.soft_delete()
        session.add(marea)
        await session.commit()
        assert not await numbering.marea_number_taken(session, vessel_id, "MARE2026000001")

    async def test_trashed_marea_is_not_the_last_one(self, session, vessel_id):
        session.add(Marea(vessel_id=vessel_id, marea_number="MARE2026000001"))
        await session.flush()
        trashed = Marea(vessel_id=vessel_id, marea_number="MARE2026000002")
        trashed.soft_delete()
        session.add(trashed)
        await session.commit()
        number = await numbering.next_marea_number(session, vessel_id, today=date(2026, 5, 5))
        assert number == "MARE2026000002"


async def test_transaction_numbers_increment(session, vessel_id, categories):
    session.add(Transaction(
        vessel_id=vessel_id,
        transaction_number="TRX2026000041",
        category_id=categories["Combustível"],
        type="expense",
        transaction_date=date(2026, 2, 1),
        transaction_month=2,
        transaction_year=2026,
    ))
    await session.commit()
    assert await numbering.next_transaction_number(session, date(2026, 6, 1)) == "TRX2026000042"
    assert await numbering.next_transaction_number(session, date(2027, 1, 1)) == "TRX2027000001"
