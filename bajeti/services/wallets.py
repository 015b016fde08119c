"""
Wallet balance summary.

Balances are snapshots kept on each wallet, so this only adds them up per
currency. Loans count as liabilities.
"""
from decimal import Decimal
from typing import Dict, Iterable, List

from bajeti.db.core import AccountType
from bajeti.models.account import AccountResponse, CurrencyWalletSummary, LoanCredit
from bajeti.services.money import quantize


def summarize_accounts(accounts: Iterable[AccountResponse]) -> List[CurrencyWalletSummary]:
    grouped: Dict[str, List[AccountResponse]] = {}
    for account in accounts:
        if not account.is_active:
            continue
        grouped.setdefault(account.currency, []).append(account)

    summaries = []
    for currency in sorted(grouped):
        assets = Decimal("0")
        liabilities = Decimal("0")
        loans = []
        for account in grouped[currency]:
            if account.account_type == AccountType.LOAN:
                liabilities += account.balance
                available = None
                if account.credit_limit is not None:
                    available = quantize(account.credit_limit - account.balance, currency)
                loans.append(LoanCredit(
                    account_id=account.id,
                    name=account.name,
                    balance=quantize(account.balance, currency),
                    credit_limit=account.credit_limit,
                    available_credit=available,
                ))
            else:
                assets += account.balance

        summaries.append(CurrencyWalletSummary(
            currency=currency,
            assets=quantize(assets, currency),
            liabilities=quantize(liabilities, currency),
            net_worth=quantize(assets - liabilities, currency),
            account_count=len(grouped[currency]),
            loans=loans,
        ))
    return summaries
