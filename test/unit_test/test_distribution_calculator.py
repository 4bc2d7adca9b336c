from decimal import Decimal
from types import SimpleNamespace

import pytest

from vesselbook.services.distribution import (
    DistributionError, DistributionRule, calculate, check_references, rules_from_input,
)


def rule(id, value_type, operation="set", value_amount=None, reference_item_id=None,
         reference_operation_item_id=None):
    return DistributionRule(
        id=id,
        order_index=id,
        name=f"item {id}",
        value_type=value_type,
        value_amount=Decimal(str(value_amount)) if value_amount is not None else None,
        operation=operation,
        reference_item_id=reference_item_id,
        reference_operation_item_id=reference_operation_item_id,
    )


def submitted(order_index, value_type="base_total_income", ref=None, op_ref=None, operation="set"):
    return SimpleNamespace(
        order_index=order_index,
        name=f"item {order_index}",
        value_type=value_type,
        value_amount=None,
        operation=operation,
        reference_item_order_index=ref,
        reference_operation_item_order_index=op_ref,
    )


class TestCalculate:
    def test_without_items_final_is_net_result(self):
        result = calculate([], 10000, 4000, currency="EUR")
        assert result["net_result"] == 6000
        assert result["final_result"] == 6000
        assert result["items"] == []
        assert result["formatted_final_result"] == "60,00 €"

    def test_chain_of_operations(self):
        items = [
            rule(1, "base_total_income"),
            rule(2, "base_total_expense", "subtract"),
            rule(3, "fixed_amount", "subtract", value_amount=10),
        ]
        result = calculate(items, 12300, 2000)
        assert [row["value"] for row in result["items"]] == [12300, 10300, 9300]
        assert result["final_result"] == 9300

    def test_percentages(self):
        items = [
            rule(1, "percentage_of_income", value_amount=35),
            rule(2, "percentage_of_expense", "add", value_amount=50),
        ]
        result = calculate(items, 10000, 3000)
        assert result["items"][0]["value"] == 3500
        assert result["final_result"] == 5000

    def test_reference_item_and_operation_reference(self):
        items = [
            rule(1, "base_total_income"),
            rule(2, "percentage_of_income", value_amount=10),
            rule(3, "reference_item", "subtract", reference_item_id=2, reference_operation_item_id=1),
        ]
        result = calculate(items, 50000, 0)
        assert result["final_result"] == 45000

    def test_divide_by_zero_yields_zero(self):
        items = [rule(1, "base_total_income"), rule(2, "base_total_expense", "divide")]
        assert calculate(items, 1000, 0)["final_result"] == 0

    def test_results_round_half_up(self):
        items = [rule(1, "percentage_of_income", value_amount="2.5")]
        assert calculate(items, 100, 0)["final_result"] == 3

    def test_items_evaluated_in_order_index(self):
        items = [rule(2, "fixed_amount", "add", value_amount=1), rule(1, "base_total_income")]
        result = calculate(items, 500, 0)
        assert [row["id"] for row in result["items"]] == [1, 2]
        assert result["final_result"] == 600

    def test_disabled_ignores_items(self):
        result = calculate([rule(1, "fixed_amount", value_amount=5)], 1000, 200, enabled=False)
        assert result["final_result"] == 800
        assert result["uses_overrides"] is False


class TestReferences:
    def test_duplicate_indexes_rejected(self):
        with pytest.raises(DistributionError):
            check_references([submitted(0), submitted(0)])

    def test_forward_reference_rejected(self):
        with pytest.raises(DistributionError):
            check_references([submitted(0, "reference_item", ref=1), submitted(1)])

    def test_self_reference_rejected(self):
        with pytest.raises(DistributionError):
            check_references([submitted(0), submitted(1, operation="add", op_ref=1)])

    def test_reference_item_needs_target(self):
        with pytest.raises(DistributionError):
            check_references([submitted(0, "reference_item")])

    def test_backward_reference_accepted(self):
        check_references([submitted(0), submitted(1, "reference_item", ref=0)])

    def test_rules_from_input_drops_unknown_references(self):
        rules = rules_from_input([submitted(0), submitted(1, "reference_item", ref=7, op_ref=0)])
        assert rules[1].reference_item_id is None
        assert rules[1].reference_operation_item_id == 0
