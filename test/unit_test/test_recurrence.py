from datetime import date

import pytest

from vesselbook.models import RecurringTransaction
from vesselbook.services import recurrence


def template(start: date, frequency: str = "monthly", next_date: date = None, end: date = None):
    return RecurringTransaction(
        name="Seguro",
        type="expense",
        amount=5000,
        frequency=frequency,
        start_date=start,
        end_date=end,
        next_occurrence_date=next_date or start,
        status="active",
        auto_generate=True,
    )


class TestDateArithmetic:
    def test_add_months_clamps_to_month_end(self):
        assert recurrence.add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert recurrence.add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_add_months_crosses_year(self):
        assert recurrence.add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)

    def test_anchor_day_restored_after_short_month(self):
        assert recurrence.advance(date(2026, 2, 28), "monthly", anchor_day=31) == date(2026, 3, 31)

    @pytest.mark.parametrize("frequency,expected", [
        ("daily", date(2026, 1, 11)),
        ("weekly", date(2026, 1, 17)),
        ("quarterly", date(2026, 4, 10)),
        ("yearly", date(2027, 1, 10)),
    ])
    def test_advance(self, frequency, expected):
        assert recurrence.advance(date(2026, 1, 10), frequency) == expected

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            recurrence.advance(date(2026, 1, 1), "hourly")


class TestOccurrences:
    def test_missed_occurrences_up_to_today(self):
        dates = recurrence.occurrences(template(date(2026, 1, 31)), today=date(2026, 4, 30))
        assert dates == [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)]

    def test_end_date_stops_generation(self):
        t = template(date(2026, 1, 1), end=date(2026, 2, 15))
        assert recurrence.occurrences(t, today=date(2026, 6, 1)) == [date(2026, 1, 1), date(2026, 2, 1)]

    def test_nothing_due_yet(self):
        assert recurrence.occurrences(template(date(2026, 5, 1)), today=date(2026, 4, 30)) == []

    def test_is_due(self):
        t = template(date(2026, 1, 1))
        assert t.is_due(date(2026, 1, 1))
        t.status = "paused"
        assert not t.is_due(date(2026, 1, 1))
