"""
Marea distribution calculator

Items are evaluated in order_index order. Each item first produces a value:

    base_total_income      total income of the marea
    base_total_expense     total expenses of the marea
    fixed_amount           value_amount in major units, converted to cents
    percentage_of_income   total income * value_amount / 100
    percentage_of_expense  total expenses * value_amount / 100
    reference_item         result of the item reference_item_id points to

then combines it through its operation:

    set        result = value
    add        result = operand + value
    subtract   result = operand - value
    multiply   result = operand * value
    divide     result = operand / value (0 when value is 0)

The operand is the result of reference_operation_item_id when given,
otherwise the previous result, otherwise 0. Every result is rounded to
whole cents and the last one is the marea's final result.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from vesselbook.services.money import format_money, round_half_up


class DistributionError(ValueError):
    pass


@dataclass
class DistributionRule:
    """Plain rule, used to evaluate unsaved items"""
    id: int
    order_index: int
    name: str
    value_type: str
    value_amount: Optional[Decimal] = None
    operation: str = "set"
    reference_item_id: Optional[int] = None
    reference_operation_item_id: Optional[int] = None
    description: Optional[str] = None


def _amount(rule) -> float:
    return float(rule.value_amount) if rule.value_amount is not None else 0.0


def item_value(rule, total_income: int, total_expenses: int, results: Dict[int, int]) -> float:
    if rule.value_type == "base_total_income":
        return float(total_income)
    if rule.value_type == "base_total_expense":
        return float(total_expenses)
    if rule.value_type == "fixed_amount":
        if not rule.value_amount:
            return 0.0
        return float(round_half_up(Decimal(str(rule.value_amount)) * 100))
    if rule.value_type == "percentage_of_income":
        return total_income * (_amount(rule) / 100)
    if rule.value_type == "percentage_of_expense":
        return total_expenses * (_amount(rule) / 100)
    if rule.value_type == "reference_item":
        if rule.reference_item_id is not None and rule.reference_item_id in results:
            return float(results[rule.reference_item_id])
        return 0.0
    return 0.0


def apply_operation(rule, value: float, results: Dict[int, int]) -> float:
    if rule.operation == "set":
        return value

    operand = 0.0
    if rule.reference_operation_item_id is not None and rule.reference_operation_item_id in results:
        operand = float(results[rule.reference_operation_item_id])
    elif results:
        operand = float(next(reversed(results.values())))

    if rule.operation == "add":
        return operand + value
    if rule.operation == "subtract":
        return operand - value
    if rule.operation == "multiply":
        return operand * value
    if rule.operation == "divide":
        return operand / value if value != 0 else 0.0
    return value


def calculate(
    items: Iterable[Any],
    total_income: int,
    total_expenses: int,
    currency: Optional[str] = None,
    house_of_zeros: int = 2,
    enabled: bool = True,
    uses_overrides: bool = False,
) -> Dict[str, Any]:
    """
    Evaluate distribution items against marea totals

    Returns the totals, the final result and one entry per item with its
    value in cents.
    """
    net_result = total_income - total_expenses
    ordered = sorted(items, key=lambda i: (i.order_index, i.id)) if enabled else []

    results: Dict[int, int] = {}
    rows: List[Dict[str, Any]] = []
    for rule in ordered:
        value = item_value(rule, total_income, total_expenses, results)
        result = round_half_up(apply_operation(rule, value, results))
        results[rule.id] = result
        rows.append({
            "id": rule.id,
            "order_index": rule.order_index,
            "name": rule.name,
            "value_type": rule.value_type,
            "operation": rule.operation,
            "value": result,
            "formatted_value": format_money(result, currency, house_of_zeros, with_symbol=True),
        })

    final_result = rows[-1]["value"] if rows else net_result
    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "net_result": net_result,
        "final_result": final_result,
        "formatted_final_result": format_money(final_result, currency, house_of_zeros, with_symbol=True),
        "items": rows,
        "uses_overrides": bool(rows) and uses_overrides,
    }


def check_references(items: List[Any]) -> None:
    """
    Submitted items reference each other by order index; a reference must
    point to an item evaluated earlier.
    """
    indexes = [item.order_index for item in items]
    if len(indexes) != len(set(indexes)):
        raise DistributionError("Order indexes must be unique")
    for item in items:
        for ref in (item.reference_item_order_index, item.reference_operation_item_order_index):
            if ref is not None and ref in indexes and ref >= item.order_index:
                raise DistributionError(
                    f"Item '{item.name}' can only reference items placed before it"
                )
        if item.value_type == "reference_item" and item.reference_item_order_index is None:
            raise DistributionError(f"Item '{item.name}' needs a referenced item")


def rules_from_input(items: List[Any]) -> List[DistributionRule]:
    """Unsaved items keyed by order index, for previews"""
    indexes = {item.order_index for item in items}
    return [
        DistributionRule(
            id=item.order_index,
            order_index=item.order_index,
            name=item.name,
            value_type=item.value_type,
            value_amount=item.value_amount,
            operation=item.operation,
            reference_item_id=item.reference_item_order_index
            if item.reference_item_order_index in indexes else None,
            reference_operation_item_id=item.reference_operation_item_order_index
            if item.reference_operation_item_order_index in indexes else None,
        )
        for item in items
    ]
