from decimal import Decimal

from bajeti.db.core import AccountType
from bajeti.models.account import AccountResponse
from bajeti.services.wallets import summarize_accounts


def wallet(id, account_type, balance, currency="TZS", credit_limit=None, is_active=True):
    return AccountResponse(
        id=id, user_id=1, name=f"Wallet {id}", account_type=account_type, currency=currency,
        balance=Decimal(str(balance)), credit_limit=credit_limit, is_active=is_active,
    )


def test_balances_are_summed_per_currency():
    summaries = summarize_accounts([
        wallet(1, AccountType.BANK, 1000),
        wallet(2, AccountType.MOBILE, 250),
        wallet(3, AccountType.LOAN, 400, credit_limit=Decimal("1000")),
        wallet(4, AccountType.CASH, 50, currency="IDR"),
        wallet(5, AccountType.BANK, 9999, is_active=False),
    ])

    assert [s.currency for s in summaries] == ["IDR", "TZS"]
    idr, tzs = summaries
    assert idr.assets == Decimal("50.00")
    assert idr.liabilities == Decimal("0")
    assert tzs.assets == Decimal("1250.00")
    assert tzs.liabilities == Decimal("400.00")
    assert tzs.net_worth == Decimal("850.00")
    assert tzs.account_count == 3
    assert tzs.loans[0].available_credit == Decimal("600.00")


def test_no_accounts_no_summary():
    assert summarize_accounts([]) == []
