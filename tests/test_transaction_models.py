from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from bajeti.db.core import TransactionKind
from bajeti.models.budget import BudgetCreate
from bajeti.models.transaction import TransactionCreate, TransactionResponse


def payload(**overrides):
    data = {"amount": "12.50", "transaction_date": "2024-03-01"}
    data.update(overrides)
    return data


def test_tagged_kind():
    assert TransactionCreate(**payload(kind="EXPENSE")).kind == TransactionKind.EXPENSE


@pytest.mark.parametrize("legacy", [{"is_income": True}, {"type": "income"}, {"is_income": True, "type": "Income"}])
def test_legacy_fields_map_to_kind(legacy):
    assert TransactionCreate(**payload(**legacy)).kind == TransactionKind.INCOME


@pytest.mark.parametrize("legacy", [
    {"is_income": True, "type": "expense"},
    {"is_income": False, "kind": "INCOME"},
    {"type": "transfer"},
])
def test_inconsistent_legacy_fields_are_rejected(legacy):
    with pytest.raises(PydanticValidationError):
        TransactionCreate(**payload(**legacy))


def test_kind_is_required():
    with pytest.raises(PydanticValidationError):
        TransactionCreate(**payload())


def test_amount_must_be_positive():
    with pytest.raises(PydanticValidationError):
        TransactionCreate(**payload(kind="EXPENSE", amount="0"))


def test_response_carries_legacy_fields():
    response = TransactionResponse(id=1, user_id=1, kind=TransactionKind.INCOME, amount=Decimal("5"),
                                   transaction_date=date(2024, 3, 1))

    dumped = response.model_dump()
    assert dumped["is_income"] is True
    assert dumped["type"] == "income"


def test_budget_needs_split_with_income():
    with pytest.raises(PydanticValidationError):
        BudgetCreate(month=3, year=2024, currency="TZS", income_amount="1000")
    with pytest.raises(PydanticValidationError):
        BudgetCreate(month=3, year=2024, currency="TZS")


def test_budget_rejects_duplicate_categories():
    with pytest.raises(PydanticValidationError):
        BudgetCreate(month=3, year=2024, currency="TZS",
                     categories=[{"category_id": 1, "amount": 10}, {"category_id": 1, "amount": 20}])


def test_budget_amounts_are_quantized_to_the_currency():
    budget = BudgetCreate(month=3, year=2024, currency="jpy", income_amount="1000.6",
                          split={"needs": 50, "wants": 30, "savings": 20},
                          categories=[{"category_id": 1, "amount": "250.4"}])

    assert budget.income_amount == Decimal("1001")
    assert budget.categories[0].amount == Decimal("250")

    bhd = BudgetCreate(month=3, year=2024, currency="BHD", categories=[{"category_id": 1, "amount": "0.0004"}])
    assert bhd.categories[0].amount == Decimal("0.000")
