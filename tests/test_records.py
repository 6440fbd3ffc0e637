"""Expense and income record model tests."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime

import pytest

from financemanager.domain.errors import MalformedRecord
from financemanager.domain.month import Month
from financemanager.domain.records import (
    Expense,
    Income,
    RecordKind,
    amount_field_names,
    natural_order,
    record_type,
    sum_totals,
)


def test_expense_total_is_sum_of_seven_categories():
    expense = Expense(
        date=date(2024, 3, 1),
        housing=800.0,
        food=250.5,
        going_out=60.25,
        transportation=45.0,
        travel=120.0,
        tax=90.1,
        other=12.3,
    )

    assert expense.total == (
        expense.housing
        + expense.food
        + expense.going_out
        + expense.transportation
        + expense.travel
        + expense.tax
        + expense.other
    )


def test_income_total_is_sum_of_five_sources():
    income = Income(
        date=date(2024, 3, 1),
        salary=2500.0,
        help=100.0,
        entrepreneur=333.33,
        passive=12.5,
        other=0.1,
    )

    assert income.total == income.salary + income.help + income.entrepreneur + income.passive + income.other


def test_total_defaults_to_zero_without_amounts():
    assert Expense(date=date(2024, 1, 1)).total == 0.0
    assert Income(date=date(2024, 1, 1)).total == 0.0


def test_total_is_not_a_constructor_argument():
    with pytest.raises(TypeError):
        Expense(date=date(2024, 1, 1), total=99.0)  # type: ignore[call-arg]


def test_records_are_immutable():
    expense = Expense(date=date(2024, 1, 1), food=10.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        expense.food = 20.0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        expense.total = 0.0  # type: ignore[misc]


def test_date_is_normalized_to_first_of_month():
    expense = Expense(date=date(2024, 5, 17), food=1.0)
    income = Income(date=datetime(2024, 5, 31, 18, 30), salary=1.0)

    assert expense.date == date(2024, 5, 1)
    assert income.date == date(2024, 5, 1)
    assert expense.month == Month(2024, 5)


def test_integer_amounts_are_stored_as_floats():
    expense = Expense(date=date(2024, 1, 1), housing=700, food=300)

    assert isinstance(expense.housing, float)
    assert expense.total == 1000.0


def test_value_equality_includes_amounts():
    first = Expense(date=date(2024, 1, 1), food=10.0)
    same = Expense(date=date(2024, 1, 9), food=10.0)
    different = Expense(date=date(2024, 1, 1), food=11.0)

    assert first == same
    assert first != different
    assert hash(first) == hash(same)


def test_categories_follow_declaration_order():
    expense = Expense(date=date(2024, 1, 1), housing=1, food=2, going_out=3, transportation=4, travel=5, tax=6, other=7)

    assert list(expense.categories()) == list(Expense.CATEGORY_FIELDS)
    assert list(expense.categories().values()) == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]
    assert list(Income(date=date(2024, 1, 1)).categories()) == [
        "salary",
        "help",
        "entrepreneur",
        "passive",
        "other",
    ]


def test_natural_order_is_most_recent_first_and_stable():
    older = Expense(date=date(2024, 1, 1), food=1.0)
    tie_a = Expense(date=date(2024, 3, 1), food=2.0)
    tie_b = Expense(date=date(2024, 3, 1), food=3.0)
    newest = Expense(date=date(2024, 4, 1), food=4.0)

    ordered = natural_order([older, tie_a, newest, tie_b])

    assert ordered == [newest, tie_a, tie_b, older]


@pytest.mark.parametrize("amount", [-0.01, float("nan"), float("inf")])
def test_validate_rejects_bad_amounts(amount):
    with pytest.raises(MalformedRecord):
        Income(date=date(2024, 1, 1), salary=amount).validate()


def test_validate_returns_record_when_valid():
    expense = Expense(date=date(2024, 1, 1), tax=0.0, food=3.0)
    assert expense.validate() is expense


def test_sum_totals_adds_record_totals():
    incomes = [Income(date=date(2024, 1, 1), salary=100.0), Income(date=date(2024, 2, 1), passive=25.0)]

    assert sum_totals(incomes) == 125.0
    assert sum_totals([]) == 0.0


def test_kind_lookup_helpers():
    assert record_type(RecordKind.EXPENSE) is Expense
    assert record_type("income") is Income
    assert Expense.kind is RecordKind.EXPENSE
    assert tuple(amount_field_names(RecordKind.INCOME)) == Income.CATEGORY_FIELDS
