from datetime import date

from vesselbook.services import audit


class TestChangedFields:
    def test_only_changed_columns_are_reported(self):
        before = {"id": 1, "name": "Gasóleo", "amount": 100, "transaction_date": date(2026, 3, 1)}
        after = {"id": 1, "name": "Gasóleo", "amount": 250, "transaction_date": date(2026, 3, 2)}
        assert audit.changed_fields(before, after) == {
            "amount": {"old": 100, "new": 250},
            "transaction_date": {"old": "2026-03-01", "new": "2026-03-02"},
        }

    def test_timestamps_are_ignored(self):
        before = {"updated_at": None, "deleted_at": None}
        after = {"updated_at": "now", "deleted_at": "now"}
        assert audit.changed_fields(before, after) == {}


def test_format_value():
    assert audit.format_value(None) == "(empty)"
    assert audit.format_value("") == "(empty)"
    assert audit.format_value(True) == "Yes"
    assert audit.format_value(False) == "No"
    assert audit.format_value(12) == "12"


def test_field_label():
    assert audit.field_label("transaction_date") == "Transaction Date"
    assert audit.field_label("supplier_id") == "Supplier"
